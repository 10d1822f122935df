"""Query algebra.

Exports the criteria nodes, the `Restrictions` factory, projections and
the abstract `Query` handle that execution engines implement.
"""

from .base import AssociationQuery, Query
from .criteria import (
    Between,
    Conjunction,
    Criterion,
    Direction,
    Disjunction,
    Equals,
    GreaterThan,
    GreaterThanEquals,
    IdEquals,
    ILike,
    In,
    IsEmpty,
    IsNotEmpty,
    IsNotNull,
    IsNull,
    Junction,
    LessThan,
    LessThanEquals,
    Like,
    Negation,
    NotEquals,
    Order,
    PropertyCriterion,
    RLike,
)
from .cursor import ScrollCursor
from .projections import Projection, ProjectionList
from .restrictions import Restrictions

__all__ = (
    "Query",
    "AssociationQuery",
    "Criterion",
    "PropertyCriterion",
    "Equals",
    "NotEquals",
    "GreaterThan",
    "GreaterThanEquals",
    "LessThan",
    "LessThanEquals",
    "Like",
    "ILike",
    "RLike",
    "In",
    "Between",
    "IsNull",
    "IsNotNull",
    "IsEmpty",
    "IsNotEmpty",
    "IdEquals",
    "Junction",
    "Conjunction",
    "Disjunction",
    "Negation",
    "Direction",
    "Order",
    "Projection",
    "ProjectionList",
    "Restrictions",
    "ScrollCursor",
)
