"""Query criteria nodes.

Restrictions are immutable leaves (operator + property + operand).
Junctions (`Conjunction`, `Disjunction`, `Negation`) are mutable groups
that accumulate child criteria in insertion order. Every node renders a
universal dict representation:

- Leaves: ``{"name": {"$eq": "Bob"}}``
- Groups: ``{"$and": [...]}``, ``{"$or": [...]}``
- Negation: ``{"$not": node}``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

__all__ = (
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
)


class Criterion(ABC):
    """Base class for every node of a query tree."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the universal dict representation of this node."""
        raise NotImplementedError


# -------------------
# Leaves
# -------------------
class PropertyCriterion(Criterion, BaseModel):
    """A restriction on a single property with a single operand."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    operator: ClassVar[str] = "$eq"

    property_name: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {self.property_name: {self.operator: self.value}}

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.to_dict()}>"


class Equals(PropertyCriterion):
    operator: ClassVar[str] = "$eq"


class NotEquals(PropertyCriterion):
    operator: ClassVar[str] = "$ne"


class GreaterThan(PropertyCriterion):
    operator: ClassVar[str] = "$gt"


class GreaterThanEquals(PropertyCriterion):
    operator: ClassVar[str] = "$gte"


class LessThan(PropertyCriterion):
    operator: ClassVar[str] = "$lt"


class LessThanEquals(PropertyCriterion):
    operator: ClassVar[str] = "$lte"


class Like(PropertyCriterion):
    """SQL-style pattern match (``%`` and ``_`` wildcards)."""

    operator: ClassVar[str] = "$like"
    value: str


class ILike(Like):
    """Case-insensitive `Like`."""

    operator: ClassVar[str] = "$ilike"


class RLike(Like):
    """Regular expression match."""

    operator: ClassVar[str] = "$regex"


class In(PropertyCriterion):
    operator: ClassVar[str] = "$in"
    value: List[Any]


class Between(PropertyCriterion):
    """Inclusive range restriction."""

    operator: ClassVar[str] = "$between"

    start: Any = None
    finish: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {self.property_name: {self.operator: [self.start, self.finish]}}


class _FlagCriterion(PropertyCriterion):
    """Restriction without operand; renders ``{property: {op: True}}``."""

    value: bool = True


class IsNull(_FlagCriterion):
    operator: ClassVar[str] = "$isNull"


class IsNotNull(_FlagCriterion):
    operator: ClassVar[str] = "$isNotNull"


class IsEmpty(_FlagCriterion):
    operator: ClassVar[str] = "$isEmpty"


class IsNotEmpty(_FlagCriterion):
    operator: ClassVar[str] = "$isNotEmpty"


class IdEquals(Criterion, BaseModel):
    """Identity restriction; the engine resolves the identity property name."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"$id": {"$eq": self.value}}

    def __repr__(self) -> str:
        return f"<IdEquals: {self.to_dict()}>"


# -------------------
# Junctions
# -------------------
class Junction(Criterion):
    """A logical group of criteria.

    Children are kept in the order they were added.
    """

    connector = "$and"

    def __init__(self, criteria: Optional[Iterable[Criterion]] = None) -> None:
        self.criteria: List[Criterion] = list(criteria or [])

    def add(self, criterion: Criterion) -> "Junction":
        self.criteria.append(criterion)
        return self

    def is_empty(self) -> bool:
        return not self.criteria

    def __len__(self) -> int:
        return len(self.criteria)

    def __iter__(self):
        return iter(self.criteria)

    def to_dict(self) -> Dict[str, Any]:
        return {self.connector: [c.to_dict() for c in self.criteria]}

    def __str__(self) -> str:
        return str(self.to_dict())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.to_dict()}>"


class Conjunction(Junction):
    connector = "$and"


class Disjunction(Junction):
    connector = "$or"


class Negation(Junction):
    """Negates the conjunction of its children."""

    connector = "$not"

    def to_dict(self) -> Dict[str, Any]:
        if len(self.criteria) == 1:
            return {"$not": self.criteria[0].to_dict()}
        return {"$not": {"$and": [c.to_dict() for c in self.criteria]}}


# -------------------
# Ordering
# -------------------
class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Order(BaseModel):
    """Order entry: property name and direction."""

    model_config = ConfigDict(frozen=True)

    property_name: str
    direction: Direction = Direction.ASC

    @classmethod
    def asc(cls, property_name: str) -> "Order":
        return cls(property_name=property_name, direction=Direction.ASC)

    @classmethod
    def desc(cls, property_name: str) -> "Order":
        return cls(property_name=property_name, direction=Direction.DESC)

    def to_dict(self) -> Dict[str, Any]:
        return {"property": self.property_name, "direction": self.direction.value}

    def __repr__(self) -> str:
        return f"<Order: {self.property_name} {self.direction.value}>"
