"""Type aliases for fluentcriteria package.

This module provides reusable type definitions to ensure consistency
across the codebase and improve code readability.
"""

from typing import Any, Callable, Collection, Mapping, Tuple, Union

# A nested declarative block: receives the builder (or sub-scope) explicitly
Block = Callable[[Any], Any]

# Membership operands - a collection or a fixed tuple of values
Values = Union[Collection[Any], Tuple[Any, ...]]

# Pagination parameters for paginated list calls (max, offset, sort, order)
PaginationParams = Mapping[str, Any]
