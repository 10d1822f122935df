"""
This __init__.py file makes fluentcriteria a Python package and exposes
the `CriteriaBuilder` together with the mapping and query types it works
with.
"""

from .abc import Session
from .builder import CriteriaBuilder
from .mapping import Association, Identity, MappingContext, PersistentEntity, PersistentProperty, ToMany, ToOne
from .query import Order, ProjectionList, Query, Restrictions, ScrollCursor

__version__ = "0.1.0"

__all__ = [
    "CriteriaBuilder",
    "Session",
    "Query",
    "Order",
    "ProjectionList",
    "Restrictions",
    "ScrollCursor",
    "MappingContext",
    "PersistentEntity",
    "PersistentProperty",
    "Identity",
    "Association",
    "ToOne",
    "ToMany",
]
