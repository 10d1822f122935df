"""Factory for restriction nodes."""

from typing import Any, Collection

from ..exceptions import InvalidOperandError
from .criteria import (
    Between,
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
    LessThan,
    LessThanEquals,
    Like,
    NotEquals,
    RLike,
)

__all__ = ("Restrictions",)


class Restrictions:
    """Static constructors, one per restriction operator."""

    @staticmethod
    def eq(property_name: str, value: Any) -> Equals:
        return Equals(property_name=property_name, value=value)

    @staticmethod
    def ne(property_name: str, value: Any) -> NotEquals:
        return NotEquals(property_name=property_name, value=value)

    @staticmethod
    def gt(property_name: str, value: Any) -> GreaterThan:
        return GreaterThan(property_name=property_name, value=value)

    @staticmethod
    def gte(property_name: str, value: Any) -> GreaterThanEquals:
        return GreaterThanEquals(property_name=property_name, value=value)

    @staticmethod
    def lt(property_name: str, value: Any) -> LessThan:
        return LessThan(property_name=property_name, value=value)

    @staticmethod
    def lte(property_name: str, value: Any) -> LessThanEquals:
        return LessThanEquals(property_name=property_name, value=value)

    @staticmethod
    def between(property_name: str, start: Any, finish: Any) -> Between:
        return Between(property_name=property_name, start=start, finish=finish)

    @staticmethod
    def like(property_name: str, pattern: str) -> Like:
        return Like(property_name=property_name, value=pattern)

    @staticmethod
    def ilike(property_name: str, pattern: str) -> ILike:
        return ILike(property_name=property_name, value=pattern)

    @staticmethod
    def rlike(property_name: str, pattern: str) -> RLike:
        return RLike(property_name=property_name, value=pattern)

    @staticmethod
    def in_(property_name: str, values: Collection[Any]) -> In:
        if isinstance(values, (str, bytes)):
            raise InvalidOperandError(
                "Cannot use in expression with a string value", property=property_name, operation="in"
            )
        return In(property_name=property_name, value=list(values))

    @staticmethod
    def is_null(property_name: str) -> IsNull:
        return IsNull(property_name=property_name)

    @staticmethod
    def is_not_null(property_name: str) -> IsNotNull:
        return IsNotNull(property_name=property_name)

    @staticmethod
    def is_empty(property_name: str) -> IsEmpty:
        return IsEmpty(property_name=property_name)

    @staticmethod
    def is_not_empty(property_name: str) -> IsNotEmpty:
        return IsNotEmpty(property_name=property_name)

    @staticmethod
    def id_eq(value: Any) -> IdEquals:
        return IdEquals(value=value)
