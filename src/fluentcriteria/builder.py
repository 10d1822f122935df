"""
Fluent criteria builder.

This module provides the `CriteriaBuilder`, a stateful cursor that turns a
declarative block of method calls into a query tree for one persistent
entity and then executes it. Blocks are plain callables that receive the
builder as their only argument:

    >>> books = CriteriaBuilder(Book, session).list(lambda c: (
    ...     c.eq("status", "published"),
    ...     c.or_(lambda c: (c.gt("pages", 300), c.lt("price", 10))),
    ...     c.author(lambda a: a.like("name", "A%")),
    ...     c.order("title", "desc"),
    ... ))

Calls are resolved in this order:

1. Construction/execution calls (`list`, `list_distinct`, `get`, `count`,
   `scroll`, `call`) when given a block, or a parameter mapping and a block
   for paginated `list`.
2. The builder's own vocabulary of restrictions, junctions, ordering and
   projections (snake_case names plus their camelCase aliases).
3. Public methods of the underlying query handle, called with the same
   arguments.
4. Association traversal: an association name of the current entity with
   a single block argument.

Anything else raises `UnknownOperationError`.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from .abc import Session
from .constants import (
    AND,
    COUNT_CALL,
    CONSTRUCTION_CALLS,
    GET_CALL,
    ID_EQUALS,
    IS_EMPTY,
    IS_NOT_EMPTY,
    IS_NOT_NULL,
    IS_NULL,
    LIST_CALL,
    LIST_DISTINCT_CALL,
    NOT,
    OR,
    ORDER_ASCENDING,
    ORDER_DESCENDING,
    PROJECTIONS,
    ROOT_CALL,
    SCROLL_CALL,
    ExecutionMode,
)
from .exceptions import (
    ConstructionError,
    InvalidOperandError,
    InvalidPropertyError,
    NotPersistentEntityError,
    NullOperandError,
    UnknownOperationError,
)
from .logger import Logger
from .mapping import Association, PersistentEntity
from .query.base import Query
from .query.criteria import Conjunction, Criterion, Disjunction, Junction, Negation, Order
from .query.projections import ProjectionList
from .query.restrictions import Restrictions
from .types import Block, PaginationParams, Values
from .utils import is_block, populate_arguments_for_criteria


def _vocabulary(*names: str, **aliases: str) -> Dict[str, str]:
    table = {name: name for name in names}
    table.update(aliases)
    return table


class CriteriaBuilder:
    """Stateful query-construction cursor for one persistent class.

    The cursor owns one in-progress query at a time. Execution calls create
    a fresh query, run the block against the builder, execute the query in
    the selected mode and clear the query handle, so one builder can serve
    any number of sequential, unrelated queries. It is not safe for
    concurrent use.

    Attributes:
        logger: Class logger
    """

    ORDER_DESCENDING = ORDER_DESCENDING
    ORDER_ASCENDING = ORDER_ASCENDING

    # Builder vocabulary: call name -> method name
    _OPERATIONS: Dict[str, str] = _vocabulary(
        # restrictions
        "eq", "ne", "gt", "gte", "ge", "lt", "lte", "le", "between",
        "like", "ilike", "rlike", "in_", "in_list",
        "is_null", "is_not_null", "is_empty", "is_not_empty", "id_eq", "id_equals",
        # junctions
        "and_", "or_", "not_",
        # ordering, projections
        "order", PROJECTIONS,
        "id", "count", "count_distinct", "distinct", "row_count",
        "property", "sum", "min", "max", "avg",
        "build", "set_unique_result",
        # aliases
        **{
            AND: "and_",
            OR: "or_",
            NOT: "not_",
            "in": "in_",
            "inList": "in_list",
            IS_NULL: "is_null",
            IS_NOT_NULL: "is_not_null",
            IS_EMPTY: "is_empty",
            IS_NOT_EMPTY: "is_not_empty",
            ID_EQUALS: "id_eq",
            "idEquals": "id_equals",
            "countDistinct": "count_distinct",
            "rowCount": "row_count",
            "setUniqueResult": "set_unique_result",
        },
    )

    def __init__(self, target_class: type, session: Session, query: Optional[Query] = None) -> None:
        """Bind the builder to a persistent class and a session.

        Args:
            target_class: Persistent class to query
            session: Session used to create query handles
            query: Optional pre-existing query handle, used by `build`

        Raises:
            ConstructionError: If target_class or session is None
            NotPersistentEntityError: If target_class is not a persistent entity
        """
        if target_class is None:
            raise ConstructionError("Argument [target_class] cannot be null", argument="target_class")
        if session is None:
            raise ConstructionError("Argument [session] cannot be null", argument="session")

        entity = session.mapping_context.get_persistent_entity(target_class)
        if entity is None:
            name = getattr(target_class, "__qualname__", str(target_class))
            raise NotPersistentEntityError(f"Class [{name}] is not a persistent entity", target=name)

        self._target_class = target_class
        self._session = session
        self._persistent_entity: PersistentEntity = entity
        self._query: Optional[Query] = query
        self._unique_result = False
        self._count = False
        self._pagination_enabled_list = False
        self._order_entries: List[Order] = []
        self._logical_expression_stack: List[Junction] = []
        self._projection_list: Optional[ProjectionList] = None
        self.logger = Logger(self.__class__.__name__)
        self.logger.debug("CriteriaBuilder initialized: entity=%s", entity.name)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def query(self) -> Optional[Query]:
        """The in-progress query handle, None when no query is open."""
        return self._query

    @property
    def persistent_entity(self) -> PersistentEntity:
        """Entity restrictions currently validate against."""
        return self._persistent_entity

    @property
    def target_class(self) -> type:
        return self._target_class

    @property
    def session(self) -> Session:
        return self._session

    @property
    def unique_result(self) -> bool:
        return self._unique_result

    @property
    def count_mode(self) -> bool:
        return self._count

    @property
    def pagination_enabled(self) -> bool:
        return self._pagination_enabled_list

    @property
    def order_entries(self) -> List[Order]:
        return list(self._order_entries)

    @property
    def junction_depth(self) -> int:
        """Number of currently open junctions."""
        return len(self._logical_expression_stack)

    def set_unique_result(self, unique_result: bool) -> None:
        self._unique_result = unique_result

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for names the class does not define
        if name.startswith("_"):
            raise AttributeError(name)

        def dispatch(*args: Any) -> Any:
            return self.invoke_method(name, *args)

        dispatch.__name__ = name
        return dispatch

    def invoke_method(self, name: str, *args: Any) -> Any:
        """Resolve `name` against the builder vocabulary and run it with `args`.

        Raises:
            UnknownOperationError: If nothing handles the call
        """
        if self._is_criteria_construction_method(name, args):
            return self._execute(name, args)

        operation = self._OPERATIONS.get(name)
        if operation is not None:
            return getattr(self, operation)(*args)

        if self._query is not None:
            method = self._query_method(self._query, name)
            if method is not None:
                return method(*args)

        if len(args) == 1 and is_block(args[0]):
            association = self._persistent_entity.get_association_by_name(name)
            if association is not None:
                return self._traverse_association(association, args[0])

        raise UnknownOperationError(
            f"No signature of method [{name}] is applicable for type [{self.__class__.__name__}]",
            operation=name,
            owner=self.__class__.__name__,
        )

    @staticmethod
    def _is_criteria_construction_method(name: str, args: tuple) -> bool:
        if name == LIST_CALL and len(args) == 2 and isinstance(args[0], Mapping) and is_block(args[1]):
            return True
        return name in CONSTRUCTION_CALLS and len(args) == 1 and is_block(args[0])

    @staticmethod
    def _query_method(query: Query, name: str) -> Optional[Callable[..., Any]]:
        if name.startswith("_") or not callable(getattr(type(query), name, None)):
            return None
        return getattr(query, name)

    def _invoke_block(self, block: Block) -> Any:
        return block(self)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def _execution_mode(self, name: str) -> str:
        if self._unique_result:
            return ExecutionMode.UNIQUE
        if self._count:
            return ExecutionMode.COUNT
        if self._pagination_enabled_list:
            return ExecutionMode.PAGINATED_LIST
        if name == SCROLL_CALL:
            return ExecutionMode.SCROLL
        return ExecutionMode.LIST

    def _execute(self, name: str, args: tuple) -> Any:
        self._initialize_query()

        if name == GET_CALL:
            self._unique_result = True
            self._count = False
        elif name == COUNT_CALL:
            self._count = True
            self._unique_result = False
        else:
            self._unique_result = False
            self._count = False

        params: PaginationParams = {}
        if name == LIST_CALL and len(args) == 2:
            self._pagination_enabled_list = True
            self._order_entries = []
            params, block = args
        else:
            self._pagination_enabled_list = False
            block = args[0]

        try:
            self._invoke_block(block)
            # Read after the block: set_unique_result may be called inside it
            mode = self._execution_mode(name)
            self.logger.message("Executing %s query: call=%s entity=%s", mode, name, self._persistent_entity.name)
            query = self._query
            if mode == ExecutionMode.UNIQUE:
                result = query.single_result()
            elif mode == ExecutionMode.COUNT:
                query.projections().count()
                result = query.single_result()
            elif mode == ExecutionMode.PAGINATED_LIST:
                populate_arguments_for_criteria(query, params)
                for order in self._order_entries:
                    query.order(order)
                result = query.list()
            elif mode == ExecutionMode.SCROLL:
                result = query.scroll()
            else:
                result = query.list()
                if name == LIST_DISTINCT_CALL:
                    result = self._distinct_results(result)
        finally:
            self._teardown()
        return result

    @staticmethod
    def _distinct_results(results: List[Any]) -> List[Any]:
        seen = set()
        distinct = []
        for entity in results:
            if id(entity) not in seen:
                seen.add(id(entity))
                distinct.append(entity)
        return distinct

    def _initialize_query(self) -> Query:
        self._query = self._session.create_query(self._target_class)
        self._projection_list = None
        return self._query

    def _ensure_query(self) -> Query:
        if self._query is None:
            return self._initialize_query()
        return self._query

    def _teardown(self) -> None:
        self._query = None
        self._projection_list = None
        self._pagination_enabled_list = False
        self._order_entries = []
        self.logger.debug("Query handle cleared: entity=%s", self._persistent_entity.name)

    def list(self, *args: Any, **params: Any) -> Any:
        """Execute the block and return all matching entities.

        Pagination parameters may be given as a mapping before the block or
        as keyword arguments:

            >>> builder.list({"max": 10, "offset": 20}, block)
            >>> builder.list(block, max=10, offset=20)
        """
        if params:
            args = (params, *args)
        return self.invoke_method(LIST_CALL, *args)

    def list_distinct(self, block: Block) -> Any:
        """Execute the block and return matching entities without repeats."""
        return self.invoke_method(LIST_DISTINCT_CALL, block)

    def get(self, block: Block) -> Any:
        """Execute the block and return a single entity or None."""
        return self.invoke_method(GET_CALL, block)

    def scroll(self, block: Block) -> Any:
        """Execute the block and return a `ScrollCursor` over the results."""
        return self.invoke_method(SCROLL_CALL, block)

    def call(self, block: Block) -> Any:
        return self.invoke_method(ROOT_CALL, block)

    def __call__(self, block: Block) -> Any:
        return self.invoke_method(ROOT_CALL, block)

    def build(self, block: Optional[Block]) -> Optional[Query]:
        """Run `block` against the builder without executing or clearing the query.

        Returns:
            The in-progress query handle (None if the block added nothing)
        """
        if block is not None:
            self._invoke_block(block)
        return self._query

    # ------------------------------------------------------------------
    # Junctions
    # ------------------------------------------------------------------
    def and_(self, block: Optional[Block]) -> "CriteriaBuilder":
        self._handle_junction(Conjunction(), block)
        return self

    def or_(self, block: Optional[Block]) -> "CriteriaBuilder":
        self._handle_junction(Disjunction(), block)
        return self

    def not_(self, block: Optional[Block]) -> "CriteriaBuilder":
        self._handle_junction(Negation(), block)
        return self

    def _handle_junction(self, junction: Junction, block: Optional[Block]) -> None:
        self._logical_expression_stack.append(junction)
        try:
            if block is not None:
                self._invoke_block(block)
        finally:
            logical_expression = self._logical_expression_stack.pop()
            self._add_to_criteria(logical_expression)

    def _add_to_criteria(self, criterion: Criterion) -> Criterion:
        """Add `criterion` to the innermost open junction, or to the query root."""
        if self._logical_expression_stack:
            self._logical_expression_stack[-1].add(criterion)
        else:
            self._ensure_query().add(criterion)
        return criterion

    # ------------------------------------------------------------------
    # Association traversal
    # ------------------------------------------------------------------
    def _traverse_association(self, association: Association, block: Block) -> Query:
        previous_query = self._ensure_query()
        previous_entity = self._persistent_entity
        previous_stack = self._logical_expression_stack
        previous_projections = self._projection_list

        sub_query = previous_query.create_query(association.name)
        self._add_to_criteria(sub_query)
        try:
            self._query = sub_query
            self._persistent_entity = association.associated_entity
            self._logical_expression_stack = []
            self._invoke_block(block)
            return sub_query
        finally:
            self._projection_list = previous_projections
            self._logical_expression_stack = previous_stack
            self._persistent_entity = previous_entity
            self._query = previous_query

    # ------------------------------------------------------------------
    # Restrictions
    # ------------------------------------------------------------------
    def validate_property_name(self, property_name: Optional[str], method_name: str) -> None:
        """Ensure `property_name` is a declared property or the identity of the current entity.

        Raises:
            InvalidPropertyError: If the name is None or not declared
        """
        if property_name is None:
            raise InvalidPropertyError(
                f"Cannot use [{method_name}] restriction with null property name",
                operation=method_name,
            )
        entity = self._persistent_entity
        prop = entity.get_property_by_name(property_name)
        if prop is None and entity.identity.name == property_name:
            prop = entity.identity
        if prop is None:
            raise InvalidPropertyError(
                f"Property [{property_name}] is not a valid property of class [{entity}]",
                property=property_name,
                entity=entity.name,
                operation=method_name,
            )

    def id_eq(self, value: Any) -> "CriteriaBuilder":
        self._add_to_criteria(Restrictions.id_eq(value))
        return self

    def id_equals(self, value: Any) -> "CriteriaBuilder":
        return self.id_eq(value)

    def is_empty(self, property_name: str) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "isEmpty")
        self._add_to_criteria(Restrictions.is_empty(property_name))
        return self

    def is_not_empty(self, property_name: str) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "isNotEmpty")
        self._add_to_criteria(Restrictions.is_not_empty(property_name))
        return self

    def is_null(self, property_name: str) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "isNull")
        self._add_to_criteria(Restrictions.is_null(property_name))
        return self

    def is_not_null(self, property_name: str) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "isNotNull")
        self._add_to_criteria(Restrictions.is_not_null(property_name))
        return self

    def eq(self, property_name: str, value: Any) -> "CriteriaBuilder":
        """Restrict `property_name` to be equal to `value`."""
        self.validate_property_name(property_name, "eq")
        self._add_to_criteria(Restrictions.eq(property_name, value))
        return self

    def ne(self, property_name: str, value: Any) -> "CriteriaBuilder":
        """Restrict `property_name` to differ from `value`."""
        self.validate_property_name(property_name, "ne")
        self._add_to_criteria(Restrictions.ne(property_name, value))
        return self

    def between(self, property_name: str, start: Any, finish: Any) -> "CriteriaBuilder":
        """Restrict `property_name` to the inclusive range [start, finish]."""
        self.validate_property_name(property_name, "between")
        self._add_to_criteria(Restrictions.between(property_name, start, finish))
        return self

    def gte(self, property_name: str, value: Any) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "gte")
        self._add_to_criteria(Restrictions.gte(property_name, value))
        return self

    def ge(self, property_name: str, value: Any) -> "CriteriaBuilder":
        return self.gte(property_name, value)

    def gt(self, property_name: str, value: Any) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "gt")
        self._add_to_criteria(Restrictions.gt(property_name, value))
        return self

    def lte(self, property_name: str, value: Any) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "lte")
        self._add_to_criteria(Restrictions.lte(property_name, value))
        return self

    def le(self, property_name: str, value: Any) -> "CriteriaBuilder":
        return self.lte(property_name, value)

    def lt(self, property_name: str, value: Any) -> "CriteriaBuilder":
        self.validate_property_name(property_name, "lt")
        self._add_to_criteria(Restrictions.lt(property_name, value))
        return self

    def like(self, property_name: str, value: Any) -> "CriteriaBuilder":
        """Restrict `property_name` to match the SQL-style pattern `value`.

        Raises:
            NullOperandError: If value is None
        """
        self.validate_property_name(property_name, "like")
        if value is None:
            raise NullOperandError(
                "Cannot use like expression with null value", property=property_name, operation="like"
            )
        self._add_to_criteria(Restrictions.like(property_name, str(value)))
        return self

    def ilike(self, property_name: str, value: Any) -> "CriteriaBuilder":
        """Case-insensitive variant of `like`."""
        self.validate_property_name(property_name, "ilike")
        if value is None:
            raise NullOperandError(
                "Cannot use ilike expression with null value", property=property_name, operation="ilike"
            )
        self._add_to_criteria(Restrictions.ilike(property_name, str(value)))
        return self

    def rlike(self, property_name: str, value: Any) -> "CriteriaBuilder":
        """Restrict `property_name` to match the regular expression `value`."""
        self.validate_property_name(property_name, "rlike")
        if value is None:
            raise NullOperandError(
                "Cannot use rlike expression with null value", property=property_name, operation="rlike"
            )
        self._add_to_criteria(Restrictions.rlike(property_name, str(value)))
        return self

    def in_(self, property_name: str, values: Optional[Values]) -> "CriteriaBuilder":
        """Restrict `property_name` to one of `values` (a collection or a tuple).

        Raises:
            NullOperandError: If values is None
            InvalidOperandError: If values is a string
        """
        self.validate_property_name(property_name, "in")
        if values is None:
            raise NullOperandError(
                "Cannot use in expression with null values", property=property_name, operation="in"
            )
        if isinstance(values, (str, bytes)):
            raise InvalidOperandError(
                "Cannot use in expression with a string value", property=property_name, operation="in"
            )
        self._add_to_criteria(Restrictions.in_(property_name, list(values)))
        return self

    def in_list(self, property_name: str, values: Optional[Values]) -> "CriteriaBuilder":
        return self.in_(property_name, values)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def order(self, property_name: str, direction: Optional[str] = None) -> "CriteriaBuilder":
        """Order by `property_name`.

        Only the exact token "desc" selects descending order; any other
        direction, including "DESC", orders ascending.
        """
        if direction is not None and direction == ORDER_DESCENDING:
            o = Order.desc(property_name)
        else:
            o = Order.asc(property_name)
        if self._pagination_enabled_list:
            self._order_entries.append(o)
        else:
            self._ensure_query().order(o)
        return self

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------
    def projections(self, block: Block) -> ProjectionList:
        """Establish the projection list of the current query and run `block` against it."""
        self._projection_list = self._ensure_query().projections()
        self._invoke_block(block)
        return self._projection_list

    # Projection methods are no-ops returning None outside a projections block
    def id(self) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.id()
        return self._projection_list

    def count(self, block: Optional[Block] = None) -> Any:
        """Execute a count query when given a block, otherwise add a count projection."""
        if is_block(block):
            return self._execute(COUNT_CALL, (block,))
        if self._projection_list is not None:
            self._projection_list.count()
        return self._projection_list

    def row_count(self) -> Optional[ProjectionList]:
        return self.count()

    def count_distinct(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.count_distinct(property_name)
        return self._projection_list

    def distinct(self, property_name: Optional[str] = None) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.distinct(property_name)
        return self._projection_list

    def sum(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.sum(property_name)
        return self._projection_list

    def min(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.min(property_name)
        return self._projection_list

    def max(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.max(property_name)
        return self._projection_list

    def avg(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.avg(property_name)
        return self._projection_list

    # Defined last: shadows the builtin decorator in the class body
    def property(self, property_name: str) -> Optional[ProjectionList]:
        if self._projection_list is not None:
            self._projection_list.property(property_name)
        return self._projection_list

    def __repr__(self) -> str:
        return f"<CriteriaBuilder: {self._persistent_entity.name}>"
