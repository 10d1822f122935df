"""Projection nodes and the per-query projection list."""

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict

__all__ = ("Projection", "ProjectionList", "AGGREGATE_KINDS")

# Projections that collapse all rows into a single value
AGGREGATE_KINDS = frozenset({"count", "countDistinct", "sum", "min", "max", "avg"})


class Projection(BaseModel):
    """A computed or selected value in place of whole-entity results."""

    model_config = ConfigDict(frozen=True)

    kind: str
    property_name: Optional[str] = None

    @property
    def is_aggregate(self) -> bool:
        return self.kind in AGGREGATE_KINDS

    def to_dict(self) -> Dict[str, Any]:
        if self.property_name is None:
            return {"$" + self.kind: True}
        return {"$" + self.kind: self.property_name}


class ProjectionList:
    """Ordered list of projections owned by one query.

    Each method appends a projection and returns the list for chaining.
    """

    def __init__(self) -> None:
        self.projections: List[Projection] = []

    def add(self, projection: Projection) -> "ProjectionList":
        self.projections.append(projection)
        return self

    def is_empty(self) -> bool:
        return not self.projections

    def __len__(self) -> int:
        return len(self.projections)

    def __iter__(self) -> Iterator[Projection]:
        return iter(self.projections)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.projections]

    def __repr__(self) -> str:
        return f"<ProjectionList: {self.to_dict()}>"

    def id(self) -> "ProjectionList":
        return self.add(Projection(kind="id"))

    def count(self) -> "ProjectionList":
        return self.add(Projection(kind="count"))

    def count_distinct(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="countDistinct", property_name=property_name))

    def distinct(self, property_name: Optional[str] = None) -> "ProjectionList":
        return self.add(Projection(kind="distinct", property_name=property_name))

    def sum(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="sum", property_name=property_name))

    def min(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="min", property_name=property_name))

    def max(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="max", property_name=property_name))

    def avg(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="avg", property_name=property_name))

    # Defined last: shadows the builtin decorator in the class body
    def property(self, property_name: str) -> "ProjectionList":
        return self.add(Projection(kind="property", property_name=property_name))
