"""Persistent entity metadata.

Describes the properties, identity and associations of persistent classes.
A `MappingContext` is the registry the builder consults when it validates
property names and when it traverses associations.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr


class PersistentProperty(BaseModel):
    """A declared property of a persistent entity."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    type: Any = None

    def __str__(self) -> str:
        return self.name


class Identity(PersistentProperty):
    """The identity (primary key) property of an entity."""


class Association(PersistentProperty):
    """A named relationship to another persistent entity.

    The target entity is resolved lazily through the mapping context the
    owning entity is registered in, so associations may refer to classes
    registered later (including cycles).
    """

    associated_class: Any = None
    _mapping_context: Any = PrivateAttr(default=None)

    @property
    def is_to_many(self) -> bool:
        return False

    @property
    def associated_entity(self) -> Optional["PersistentEntity"]:
        if self._mapping_context is None or self.associated_class is None:
            return None
        return self._mapping_context.get_persistent_entity(self.associated_class)


class ToOne(Association):
    """Single-valued association (many-to-one, one-to-one)."""


class ToMany(Association):
    """Collection-valued association (one-to-many, many-to-many)."""

    @property
    def is_to_many(self) -> bool:
        return True


class PersistentEntity:
    """Metadata for one persistent class.

    Attributes:
        python_class: The mapped class
        identity: Identity property (defaults to ``id``)
        properties: Declared non-identity properties, associations included
    """

    def __init__(
        self,
        python_class: type,
        properties: Iterable[PersistentProperty] = (),
        identity: Union[str, Identity] = "id",
    ) -> None:
        self.python_class = python_class
        self.identity = identity if isinstance(identity, Identity) else Identity(name=identity)
        self.properties: List[PersistentProperty] = list(properties)
        self._by_name: Dict[str, PersistentProperty] = {p.name: p for p in self.properties}

    @property
    def name(self) -> str:
        return f"{self.python_class.__module__}.{self.python_class.__qualname__}"

    @property
    def associations(self) -> List[Association]:
        return [p for p in self.properties if isinstance(p, Association)]

    def get_property_by_name(self, name: Optional[str]) -> Optional[PersistentProperty]:
        """Return the declared property called `name`, or None. The identity is not included."""
        if name is None:
            return None
        return self._by_name.get(name)

    def get_association_by_name(self, name: Optional[str]) -> Optional[Association]:
        prop = self.get_property_by_name(name)
        if isinstance(prop, Association):
            return prop
        return None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<PersistentEntity: {self.name}>"


class MappingContext:
    """Registry of persistent entities keyed by fully qualified class name."""

    def __init__(self) -> None:
        self._entities: Dict[str, PersistentEntity] = {}

    @staticmethod
    def _class_name(python_class: type) -> str:
        return f"{python_class.__module__}.{python_class.__qualname__}"

    @property
    def persistent_entities(self) -> List[PersistentEntity]:
        return list(self._entities.values())

    def add_persistent_entity(
        self,
        python_class: type,
        properties: Iterable[PersistentProperty] = (),
        identity: Union[str, Identity] = "id",
    ) -> PersistentEntity:
        """Register `python_class` and return its metadata.

        Args:
            python_class: Class to map
            properties: Declared properties and associations
            identity: Identity property or its name

        Returns:
            The registered PersistentEntity
        """
        entity = PersistentEntity(python_class, properties=properties, identity=identity)
        for association in entity.associations:
            association._mapping_context = self
        self._entities[self._class_name(python_class)] = entity
        return entity

    def get_persistent_entity(self, target: Union[type, str, None]) -> Optional[PersistentEntity]:
        """Look up an entity by class, fully qualified name or simple class name."""
        if target is None:
            return None
        if isinstance(target, type):
            return self._entities.get(self._class_name(target))
        entity = self._entities.get(target)
        if entity is not None:
            return entity
        for candidate in self._entities.values():
            if candidate.python_class.__name__ == target:
                return candidate
        return None
