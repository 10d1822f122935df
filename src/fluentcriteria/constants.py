"""
Vocabulary constants shared by the criteria builder and the query algebra.
"""

ORDER_DESCENDING = "desc"
ORDER_ASCENDING = "asc"

# Grouping
AND = "and"
OR = "or"
NOT = "not"

# Restrictions without an operand
IS_NULL = "isNull"
IS_NOT_NULL = "isNotNull"
IS_EMPTY = "isEmpty"
IS_NOT_EMPTY = "isNotEmpty"
ID_EQUALS = "idEq"

# Construction / execution calls
ROOT_DO_CALL = "doCall"
ROOT_CALL = "call"
LIST_CALL = "list"
LIST_DISTINCT_CALL = "listDistinct"
COUNT_CALL = "count"
GET_CALL = "get"
SCROLL_CALL = "scroll"
PROJECTIONS = "projections"

CONSTRUCTION_CALLS = frozenset(
    {ROOT_DO_CALL, ROOT_CALL, LIST_CALL, LIST_DISTINCT_CALL, COUNT_CALL, GET_CALL, SCROLL_CALL}
)

# Pagination argument keys
ARGUMENT_MAX = "max"
ARGUMENT_OFFSET = "offset"
ARGUMENT_SORT = "sort"
ARGUMENT_ORDER = "order"


class ExecutionMode:
    UNIQUE = "unique"
    COUNT = "count"
    PAGINATED_LIST = "paginated_list"
    LIST = "list"
    SCROLL = "scroll"
