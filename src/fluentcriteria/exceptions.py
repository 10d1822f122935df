"""Custom exceptions for the fluentcriteria library.

This module defines all custom exceptions raised while building and
executing criteria queries, for consistent error handling and clear
error messaging.
"""

from typing import Any, Dict


# Base exception
class CriteriaError(Exception):
    """Base exception for all fluentcriteria errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., property, entity, operation)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Dispatch exceptions
class UnknownOperationError(CriteriaError, AttributeError):
    """Raised when a call matches no builder operation, query method or association.

    Example:
        >>> raise UnknownOperationError("No such operation", operation="fooBar", owner="CriteriaBuilder")
    """


# Validation exceptions
class InvalidPropertyError(CriteriaError, ValueError):
    """Raised when a restriction names a property the current entity does not declare.

    Example:
        >>> raise InvalidPropertyError("Not a valid property", property="nmae", entity="Book", operation="eq")
    """


class NullOperandError(CriteriaError, ValueError):
    """Raised when a pattern or membership restriction receives a ``None`` operand.

    Example:
        >>> raise NullOperandError("Cannot use like expression with null value", property="title", operation="like")
    """


class InvalidOperandError(CriteriaError, TypeError):
    """Raised when a membership restriction receives a string instead of a collection of values.

    Example:
        >>> raise InvalidOperandError("Cannot use in expression with a string value", property="status", operation="in")
    """


class InvalidAssociationError(CriteriaError, ValueError):
    """Raised when a sub-query is requested for a name that is not an association.

    Example:
        >>> raise InvalidAssociationError("Not an association", association="title", entity="Book")
    """


# Construction exceptions
class ConstructionError(CriteriaError, ValueError):
    """Raised when a builder is constructed with missing collaborators.

    Example:
        >>> raise ConstructionError("Argument cannot be null", argument="session")
    """


class NotPersistentEntityError(ConstructionError):
    """Raised when the target class is not registered as a persistent entity.

    Example:
        >>> raise NotPersistentEntityError("Class is not a persistent entity", target="Widget")
    """
