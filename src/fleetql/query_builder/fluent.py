"""Fluent query builder.

A ``QueryBuilder`` is created per ``from_(table)`` call. Chain methods
accumulate state and return the same builder; awaiting it (or calling one
of the fetch terminals) compiles the state into one statement, runs it
through the executor once, and returns a ``QueryResult``.

Example:
    >>> data, error = await (
    ...     db.from_("drivers")
    ...     .select("id,name")
    ...     .eq("status", "available")
    ...     .order("name")
    ...     .limit(10)
    ... )
"""

from collections.abc import Iterable, Mapping
from typing import Any, Dict, Generator, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from fleetql.common.exceptions import (
    ErrorCode,
    FleetQLError,
    builder_consumed_error,
    query_execution_error,
    validation_error,
)
from fleetql.constants.sql import FilterOperator, QueryType
from fleetql.logging import get_logger
from fleetql.operations import (
    BaseOperation,
    Condition,
    Delete,
    Insert,
    OrderBy,
    Select,
    Update,
    Upsert,
)
from fleetql.protocols import QueryExecutor
from fleetql.query_builder.base import BaseQueryCompiler
from fleetql.query_builder.compiled import CompiledQuery
from fleetql.types.results import DriverResult, QueryResult

logger = get_logger(__name__)

Payload = Union[Mapping, List[Mapping]]


class QueryBuilder:
    """Chainable builder for one statement against one table.

    State rules:
        - The statement kind starts as SELECT. ``insert``, ``upsert``,
          ``update`` and ``delete`` replace it; the last one called wins.
          ``select()`` never switches a write back to SELECT; after a write
          it only chooses the RETURNING columns.
        - Filters accumulate and are conjoined with AND in call order.
        - ``order`` and ``limit`` keep the last value and only apply to
          SELECT.
        - Invalid input raises ``ValidationError`` from the chain method
          that received it.

    A builder resolves at most once. A second ``await`` or fetch raises
    a BUILDER_CONSUMED error instead of running the statement again.
    """

    def __init__(self, table: str, executor: QueryExecutor, compiler: BaseQueryCompiler):
        self.table = table
        self._executor = executor
        self._compiler = compiler

        self._operation = QueryType.SELECT
        self._select_columns = "*"
        self._select_called = False
        self._conditions: List[Condition] = []
        self._order_by: Optional[OrderBy] = None
        self._limit: Optional[int] = None
        self._insert_data: Optional[List[Dict[str, Any]]] = None
        self._upsert_data: Optional[List[Dict[str, Any]]] = None
        self._update_data: Optional[Dict[str, Any]] = None
        self._conflict_columns: Optional[List[str]] = None
        self._resolved = False

    def __repr__(self) -> str:
        return f"QueryBuilder(table={self.table!r}, operation={self._operation.value})"

    @property
    def operation(self) -> QueryType:
        return self._operation

    # --- statement kind -------------------------------------------------------

    def select(self, columns: str = "*") -> "QueryBuilder":
        """Choose the projected columns (or RETURNING columns after a write).

        Args:
            columns: Column list such as ``"id,name"`` or
                ``"*, customer:customers(*)"``

        Raises:
            ValidationError: If the column list contains disallowed characters
        """
        self._select_columns = self._compiler.validate_column_spec(columns)
        self._select_called = True
        return self

    def insert(self, data: Payload) -> "QueryBuilder":
        """Insert one row, or several rows sharing the same keys."""
        self._insert_data = self._normalize_rows(data)
        self._operation = QueryType.INSERT
        return self

    def upsert(self, data: Payload, on_conflict: Optional[str] = None) -> "QueryBuilder":
        """Insert rows, overwriting existing rows that collide on ``on_conflict``.

        Args:
            data: Row mapping or list of row mappings
            on_conflict: Comma-separated conflict columns. Defaults to the
                configured ``default_conflict_target`` (``id``).

        Raises:
            ValidationError: If any conflict column is not a plain identifier,
                or the payload is malformed
        """
        self._conflict_columns = self._compiler.validate_conflict_target(on_conflict)
        self._upsert_data = self._normalize_rows(data)
        self._operation = QueryType.UPSERT
        return self

    def update(self, data: Mapping) -> "QueryBuilder":
        """Set columns on every row matching the filters."""
        if not isinstance(data, Mapping) or not data:
            raise validation_error(
                "update() requires a non-empty mapping of column values",
                field="data",
                value=type(data).__name__,
                error_code=ErrorCode.INVALID_PAYLOAD,
            )
        for column in data:
            self._compiler.validate_identifier(column)
        self._update_data = dict(data)
        self._operation = QueryType.UPDATE
        return self

    def delete(self) -> "QueryBuilder":
        """Delete every row matching the filters. With no filters, every row."""
        self._operation = QueryType.DELETE
        return self

    # --- filters --------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        """``column = value``; ``None`` becomes ``column IS NULL``."""
        if value is None:
            return self._add_condition(column, FilterOperator.IS, None)
        return self._add_condition(column, FilterOperator.EQ, value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        """``column != value``; ``None`` becomes ``column IS NOT NULL``."""
        if value is None:
            return self._add_condition(column, FilterOperator.IS_NOT, None)
        return self._add_condition(column, FilterOperator.NEQ, value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.GT, value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.GTE, value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.LT, value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.LTE, value)

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.LIKE, pattern)

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        return self._add_condition(column, FilterOperator.ILIKE, pattern)

    def is_(self, column: str, value: Optional[bool]) -> "QueryBuilder":
        """``column IS NULL|TRUE|FALSE``.

        Raises:
            ValidationError: If ``value`` is not None, True or False
        """
        self._compiler.is_keyword(value)
        return self._add_condition(column, FilterOperator.IS, value)

    def in_(self, column: str, values: Iterable) -> "QueryBuilder":
        """``column IN (...)``, one parameter per element.

        An empty list is accepted and matches no rows.
        """
        if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
            raise validation_error(
                "in_() requires a list of values",
                field="values",
                value=values,
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        return self._add_condition(column, FilterOperator.IN, list(values))

    # --- ordering and paging --------------------------------------------------

    def order(self, column: str, ascending: bool = True) -> "QueryBuilder":
        """Sort by one column. A later call replaces the earlier one."""
        self._compiler.validate_column(column)
        self._order_by = OrderBy(column=column, ascending=ascending is not False)
        return self

    def limit(self, count: int) -> "QueryBuilder":
        """Return at most ``count`` rows. A later call replaces the earlier one."""
        self._limit = self._compiler.validate_limit(count)
        return self

    # --- compilation ----------------------------------------------------------

    def to_operation(self) -> BaseOperation:
        """Convert the accumulated state into exactly one operation."""
        # INSERT returns rows only on request; the other writes always do
        insert_returning = self._select_columns if self._select_called else None
        try:
            if self._operation == QueryType.INSERT:
                return Insert(table=self.table, rows=self._insert_data, returning=insert_returning)
            if self._operation == QueryType.UPSERT:
                return Upsert(
                    table=self.table,
                    rows=self._upsert_data,
                    conflict_columns=self._conflict_columns,
                    returning=self._select_columns,
                )
            if self._operation == QueryType.UPDATE:
                return Update(
                    table=self.table,
                    values=self._update_data,
                    conditions=list(self._conditions),
                    returning=self._select_columns,
                )
            if self._operation == QueryType.DELETE:
                return Delete(
                    table=self.table,
                    conditions=list(self._conditions),
                    returning=self._select_columns,
                )
            return Select(
                table=self.table,
                columns=self._select_columns,
                conditions=list(self._conditions),
                order_by=self._order_by,
                limit=self._limit,
            )
        except PydanticValidationError as exc:
            raise validation_error(
                f"Invalid {self._operation.value} on '{self.table}': {exc.errors()[0]['msg']}",
                field=self._operation.value.lower(),
                error_code=ErrorCode.INVALID_PAYLOAD,
                cause=exc,
            )

    def compile(self) -> CompiledQuery:
        """Compile the chain to SQL text and parameters without executing it.

        Pure: may be called any number of times, before or after resolving.

        Raises:
            ValidationError: If the accumulated state cannot be rendered
        """
        return self._compiler.build_query(self.to_operation())

    # --- terminals ------------------------------------------------------------

    async def fetch_many(self) -> QueryResult:
        """Resolve to ``{data: [rows], error}``. No rows is ``[]``, not an error."""
        return await self._resolve(single=False)

    async def fetch_one(self) -> QueryResult:
        """Resolve to ``{data: first row or None, error}``."""
        return await self._resolve(single=True)

    def single(self):
        """Alias of ``fetch_one()``; ``await builder.single()``."""
        return self.fetch_one()

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.fetch_many().__await__()

    async def _resolve(self, single: bool) -> QueryResult:
        if self._resolved:
            raise builder_consumed_error(self.table)
        self._resolved = True

        # Validation failures propagate; only execution becomes an error result
        operation = self.to_operation()
        compiled = self._compiler.build_query(operation)
        logger.debug(
            "Executing compiled query",
            extra={
                **operation.telemetry_fields(),
                "sql": compiled.sql,
                "param_count": len(compiled.params),
            },
        )

        try:
            result = await self._executor.query(compiled.sql, compiled.params)
        except FleetQLError as exc:
            return QueryResult.failure(exc)
        except Exception as exc:
            return QueryResult.failure(
                query_execution_error(compiled.sql, exc, details={"table": self.table})
            )

        rows = _rows_of(result)
        if single:
            return QueryResult.success(rows[0] if rows else None)
        return QueryResult.success(rows)

    # --- helpers --------------------------------------------------------------

    def _add_condition(self, column: str, operator: FilterOperator, value: Any) -> "QueryBuilder":
        self._compiler.validate_column(column)
        self._conditions.append(Condition(column=column, operator=operator, value=value))
        return self

    def _normalize_rows(self, data: Payload) -> List[Dict[str, Any]]:
        if isinstance(data, Mapping):
            rows = [dict(data)]
        elif isinstance(data, (list, tuple)) and all(isinstance(row, Mapping) for row in data):
            rows = [dict(row) for row in data]
        else:
            raise validation_error(
                "Payload must be a mapping or a list of mappings",
                field="data",
                value=type(data).__name__,
                error_code=ErrorCode.INVALID_PAYLOAD,
            )

        if not rows or not rows[0]:
            raise validation_error(
                "Payload must contain at least one row with at least one column",
                field="data",
                error_code=ErrorCode.INVALID_PAYLOAD,
            )

        columns = list(rows[0].keys())
        for column in columns:
            self._compiler.validate_identifier(column)
        for index, row in enumerate(rows[1:], start=1):
            if set(row.keys()) != set(columns):
                raise validation_error(
                    f"Row {index} does not have the same columns as row 0",
                    field="data",
                    value=sorted(row.keys()),
                    error_code=ErrorCode.INVALID_PAYLOAD,
                )
        return rows


def _rows_of(result: Any) -> List[Dict[str, Any]]:
    if isinstance(result, DriverResult):
        return list(result.rows)
    if isinstance(result, Mapping):
        return list(result.get("rows") or [])
    return list(result or [])
