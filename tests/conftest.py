"""Pytest configuration and fixtures for criteria builder tests."""

import re
from typing import Any, Callable, Dict, List, Optional

import pytest
from dotenv import load_dotenv

from fluentcriteria.abc import Session
from fluentcriteria.builder import CriteriaBuilder
from fluentcriteria.mapping import MappingContext, PersistentEntity, PersistentProperty, ToMany, ToOne
from fluentcriteria.query.base import Query
from fluentcriteria.query.criteria import Direction, Junction
from fluentcriteria.query.projections import ProjectionList

# Load environment variables
load_dotenv()


# -------------------
# Sample domain
# -------------------
class Publisher:
    def __init__(self, id: int, name: str, city: Optional[str] = None) -> None:
        self.id = id
        self.name = name
        self.city = city


class Author:
    def __init__(self, id: int, name: str, age: Optional[int] = None, publisher: Optional[Publisher] = None) -> None:
        self.id = id
        self.name = name
        self.age = age
        self.publisher = publisher
        self.books: List["Book"] = []


class Book:
    def __init__(
        self,
        id: int,
        title: str,
        pages: int,
        price: float,
        status: str,
        author: Optional[Author] = None,
        tags: Optional[List[str]] = None,
    ) -> None:
        self.id = id
        self.title = title
        self.pages = pages
        self.price = price
        self.status = status
        self.author = author
        self.tags = tags or []
        if author is not None:
            author.books.append(self)


class Widget:
    """Not a persistent entity."""


# -------------------
# In-memory engine
# -------------------
def _like_pattern(pattern: str, flags: int = 0) -> "re.Pattern[str]":
    regex = "".join(".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern)
    return re.compile(regex, flags)


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda v, o: v == o,
    "$ne": lambda v, o: v != o,
    "$gt": lambda v, o: v is not None and v > o,
    "$gte": lambda v, o: v is not None and v >= o,
    "$lt": lambda v, o: v is not None and v < o,
    "$lte": lambda v, o: v is not None and v <= o,
    "$between": lambda v, o: v is not None and o[0] <= v <= o[1],
    "$like": lambda v, o: v is not None and _like_pattern(o).fullmatch(str(v)) is not None,
    "$ilike": lambda v, o: v is not None and _like_pattern(o, re.IGNORECASE).fullmatch(str(v)) is not None,
    "$regex": lambda v, o: v is not None and re.search(o, str(v)) is not None,
    "$in": lambda v, o: v in o,
    "$isNull": lambda v, o: v is None,
    "$isNotNull": lambda v, o: v is not None,
    "$isEmpty": lambda v, o: not v,
    "$isNotEmpty": lambda v, o: bool(v),
}


def matches(entity: PersistentEntity, row: Any, node: Dict[str, Any]) -> bool:
    """Evaluate a universal criteria dict against one object."""
    if "$and" in node:
        return all(matches(entity, row, child) for child in node["$and"])
    if "$or" in node:
        return any(matches(entity, row, child) for child in node["$or"])
    if "$not" in node:
        return not matches(entity, row, node["$not"])
    for key, cond in node.items():
        if "$association" in cond:
            association = entity.get_association_by_name(key)
            target = getattr(row, key, None)
            target_entity = association.associated_entity
            sub = cond["$association"]
            if association.is_to_many:
                ok = any(matches(target_entity, t, sub) for t in target or [])
            else:
                ok = target is not None and matches(target_entity, target, sub)
            if not ok:
                return False
            continue
        name = entity.identity.name if key == "$id" else key
        value = getattr(row, name, None)
        for op, operand in cond.items():
            if not _OPERATORS[op](value, operand):
                return False
    return True


def project(entity: PersistentEntity, rows: List[Any], projections: ProjectionList) -> List[Any]:
    columns: List[Any] = []
    aggregate = True
    for p in projections:
        values = [getattr(r, p.property_name, None) for r in rows] if p.property_name else []
        if p.kind == "count":
            columns.append(len(rows))
        elif p.kind == "countDistinct":
            columns.append(len(set(values)))
        elif p.kind == "sum":
            columns.append(sum(values))
        elif p.kind == "min":
            columns.append(min(values) if values else None)
        elif p.kind == "max":
            columns.append(max(values) if values else None)
        elif p.kind == "avg":
            columns.append(sum(values) / len(values) if values else None)
        else:
            aggregate = False
            if p.kind == "id":
                values = [getattr(r, entity.identity.name) for r in rows]
            elif p.kind == "distinct":
                values = list(dict.fromkeys(values)) if p.property_name else rows
            columns.append(values)
    if aggregate:
        return [columns[0]] if len(columns) == 1 else [tuple(columns)]
    if len(columns) == 1:
        return columns[0]
    return list(zip(*columns))


class InMemoryQuery(Query):
    """Query handle evaluated against the session's object store."""

    def execute_query(self, entity: PersistentEntity, criteria: Junction) -> List[Any]:
        self.session.executed.append(self)
        rows = [r for r in self.session.objects(entity.python_class) if matches(entity, r, criteria.to_dict())]
        for order in reversed(self.orders):
            rows.sort(key=lambda r, p=order.property_name: getattr(r, p), reverse=order.direction == Direction.DESC)
        rows = rows[self.start :]
        if self.limit > -1:
            rows = rows[: self.limit]
        if not self.projections().is_empty():
            return project(entity, rows, self.projections())
        return rows


class InMemorySession(Session):
    """Simple in-memory session to test the builder without a datastore."""

    def __init__(self, mapping_context: MappingContext, store: Optional[Dict[type, List[Any]]] = None) -> None:
        self._mapping_context = mapping_context
        self._store: Dict[type, List[Any]] = store or {}
        self.created: List[InMemoryQuery] = []
        self.executed: List[InMemoryQuery] = []

    @property
    def mapping_context(self) -> MappingContext:
        return self._mapping_context

    def objects(self, python_class: type) -> List[Any]:
        return list(self._store.get(python_class, []))

    def create_query(self, entity_class: type) -> InMemoryQuery:
        query = InMemoryQuery(self, self._mapping_context.get_persistent_entity(entity_class))
        self.created.append(query)
        return query


# -------------------
# Fixtures
# -------------------
@pytest.fixture
def mapping_context():
    """Mapping for Author, Book and Publisher."""
    context = MappingContext()
    context.add_persistent_entity(
        Publisher,
        properties=[PersistentProperty(name="name", type=str), PersistentProperty(name="city", type=str)],
    )
    context.add_persistent_entity(
        Author,
        properties=[
            PersistentProperty(name="name", type=str),
            PersistentProperty(name="age", type=int),
            ToOne(name="publisher", associated_class=Publisher),
            ToMany(name="books", associated_class=Book),
        ],
    )
    context.add_persistent_entity(
        Book,
        properties=[
            PersistentProperty(name="title", type=str),
            PersistentProperty(name="pages", type=int),
            PersistentProperty(name="price", type=float),
            PersistentProperty(name="status", type=str),
            PersistentProperty(name="tags", type=list),
            ToOne(name="author", associated_class=Author),
        ],
    )
    return context


@pytest.fixture
def library():
    """Seeded publishers, authors and books."""
    acme = Publisher(1, "Acme", city="Boston")
    orbit = Publisher(2, "Orbit", city="London")
    ada = Author(1, "Ada", age=36, publisher=acme)
    alan = Author(2, "Alan", age=41, publisher=orbit)
    grace = Author(3, "Grace", age=None, publisher=None)
    books = [
        Book(1, "Analytical Engines", 320, 25.0, "published", author=ada, tags=["history"]),
        Book(2, "Notes on Computing", 120, 9.5, "draft", author=ada),
        Book(3, "Computable Numbers", 450, 30.0, "published", author=alan, tags=["math", "logic"]),
        Book(4, "Morphogenesis", 210, 18.0, "published", author=alan),
        Book(5, "Compilers", 500, 45.0, "archived", author=grace, tags=["systems"]),
    ]
    return {
        Publisher: [acme, orbit],
        Author: [ada, alan, grace],
        Book: books,
    }


@pytest.fixture
def session(mapping_context, library):
    """In-memory session over the seeded library."""
    return InMemorySession(mapping_context, library)


@pytest.fixture
def builder(session):
    """Criteria builder for Book."""
    return CriteriaBuilder(Book, session)


@pytest.fixture
def author_builder(session):
    """Criteria builder for Author."""
    return CriteriaBuilder(Author, session)
