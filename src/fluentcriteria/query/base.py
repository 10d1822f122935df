"""Abstract query handle.

A `Query` holds the criteria tree (a root `Conjunction`), order entries,
the projection list and pagination bounds for one persistent entity.
Concrete engines subclass it and implement `execute_query`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..exceptions import InvalidAssociationError
from .criteria import Conjunction, Criterion, Junction, Order
from .cursor import ScrollCursor
from .projections import ProjectionList

if TYPE_CHECKING:
    from ..abc import Session
    from ..mapping import Association, PersistentEntity

__all__ = ("Query", "AssociationQuery")


class Query(ABC):
    """Executable query against one persistent entity.

    Attributes:
        session: Owning session
        entity: Queried persistent entity
        criteria: Root conjunction of restrictions
        orders: Order entries in insertion order
        limit: Maximum number of results, -1 for unbounded
        start: Index of the first result returned
    """

    def __init__(self, session: Optional["Session"], entity: "PersistentEntity") -> None:
        self.session = session
        self.entity = entity
        self.criteria: Junction = Conjunction()
        self.orders: List[Order] = []
        self.limit = -1
        self.start = 0
        self._projections = ProjectionList()

    def add(self, criterion: Criterion) -> "Query":
        self.criteria.add(criterion)
        return self

    def order(self, order: Order) -> "Query":
        self.orders.append(order)
        return self

    def projections(self) -> ProjectionList:
        return self._projections

    def max_results(self, max_results: int) -> "Query":
        self.limit = max_results
        return self

    def offset(self, offset: int) -> "Query":
        self.start = offset
        return self

    def create_query(self, association_name: str) -> "AssociationQuery":
        """Create a sub-query scoped to the association called `association_name`.

        The sub-query is not attached to this query; the caller adds it
        wherever it belongs in the criteria tree.

        Raises:
            InvalidAssociationError: If the name is not a resolvable association
        """
        association = self.entity.get_association_by_name(association_name)
        if association is None or association.associated_entity is None:
            raise InvalidAssociationError(
                f"Cannot query [{self.entity}] on non-existent association [{association_name}]",
                association=association_name,
                entity=self.entity.name,
            )
        return AssociationQuery(self.session, association.associated_entity, association)

    def list(self) -> List[Any]:
        return self.execute_query(self.entity, self.criteria)

    def single_result(self) -> Any:
        results = self.list()
        if not results:
            return None
        return results[0]

    def scroll(self) -> ScrollCursor:
        return ScrollCursor(self.list())

    def to_dict(self) -> Dict[str, Any]:
        """Return the universal dict form of the criteria tree."""
        return self.criteria.to_dict()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.entity.name} {self.to_dict()}>"

    @abstractmethod
    def execute_query(self, entity: "PersistentEntity", criteria: Junction) -> List[Any]:
        """Evaluate `criteria` for `entity` honouring orders, projections and bounds."""
        raise NotImplementedError


class AssociationQuery(Query, Criterion):
    """Sub-query over an association; it is itself a criterion of its parent."""

    def __init__(self, session: Optional["Session"], entity: "PersistentEntity", association: "Association") -> None:
        super().__init__(session, entity)
        self.association = association

    def to_dict(self) -> Dict[str, Any]:
        return {self.association.name: {"$association": self.criteria.to_dict()}}

    def execute_query(self, entity: "PersistentEntity", criteria: Junction) -> List[Any]:
        raise NotImplementedError("Association queries are evaluated as part of their parent query")
