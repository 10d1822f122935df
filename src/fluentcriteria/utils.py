"""Utility functions for fluentcriteria.

Shared helpers for block detection and pagination argument handling.
"""

from typing import Any, Mapping, Optional

from .constants import ARGUMENT_MAX, ARGUMENT_OFFSET, ARGUMENT_ORDER, ARGUMENT_SORT, ORDER_DESCENDING
from .query.base import Query
from .query.criteria import Order
from .settings import settings


def is_block(obj: Any) -> bool:
    """Return True if `obj` can be run as a nested declarative block."""
    return callable(obj) and not isinstance(obj, (type, Mapping))


def to_int(value: Any) -> Optional[int]:
    """Coerce a pagination value to int; None when absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def populate_arguments_for_criteria(query: Query, params: Mapping[str, Any]) -> Query:
    """Apply pagination parameters to `query`.

    Recognised keys:
        - max: maximum number of results (falls back to DEFAULT_MAX_RESULTS)
        - offset: index of the first result
        - sort: property to order by
        - order: "desc" (case-insensitive) for descending, anything else ascending

    Negative or non-numeric max/offset values are ignored.

    Returns:
        The same query, for chaining
    """
    max_param = to_int(params.get(ARGUMENT_MAX))
    if max_param is None:
        max_param = settings.DEFAULT_MAX_RESULTS
    offset_param = to_int(params.get(ARGUMENT_OFFSET))

    if max_param is not None and max_param > -1:
        query.max_results(max_param)
    if offset_param is not None and offset_param > -1:
        query.offset(offset_param)

    sort = params.get(ARGUMENT_SORT)
    if sort:
        order_param = params.get(ARGUMENT_ORDER)
        if isinstance(order_param, str) and order_param.lower() == ORDER_DESCENDING:
            query.order(Order.desc(sort))
        else:
            query.order(Order.asc(sort))
    return query
