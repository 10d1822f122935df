"""Abstract collaborators consumed by the criteria builder."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .mapping import MappingContext
    from .query.base import Query


class Session(ABC):
    """A unit of work against a datastore.

    Concrete sessions own the mapping context and know how to create
    executable query handles for a mapped class.
    """

    @property
    @abstractmethod
    def mapping_context(self) -> "MappingContext":
        """Return the mapping context describing persistent entities."""
        raise NotImplementedError

    @abstractmethod
    def create_query(self, entity_class: type) -> "Query":
        """Create a new, empty query handle for `entity_class`."""
        raise NotImplementedError
