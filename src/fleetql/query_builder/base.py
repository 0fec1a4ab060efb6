import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from fleetql.common.exceptions import ErrorCode, validation_error
from fleetql.constants.sql import IS_KEYWORDS, FilterOperator, QueryType
from fleetql.operations import (
    BaseOperation,
    Condition,
    Delete,
    Insert,
    Select,
    Update,
    Upsert,
)
from fleetql.query_builder.compiled import CompiledQuery, ParameterBinder
from fleetql.settings import _Settings


# Column lists cannot be bound as parameters, so their shape is restricted:
# identifiers, dots, *, commas, whitespace, parentheses, colons, and the
# ! and - used by nested-relation projections like "customer:customers(*)".
_COLUMN_SPEC_PATTERN = re.compile(r'^[a-zA-Z0-9_.*,\s():!-]+$')
_CONFLICT_COLUMN_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')
_COLUMN_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$')


class BaseQueryCompiler(ABC):
    """Base interface for query compilers with SQL injection protection.

    A compiler turns one operation into one ``CompiledQuery``: SQL text plus
    the ordered parameter list. It never executes anything; that is the job
    of the executor the fluent builder hands the result to.

    Security Principles:
        1. **Parameter Binding**: Every value travels as a bound parameter.
           The only literals rendered into the text are ``NULL``, ``TRUE``
           and ``FALSE`` on the right of ``IS``/``IS NOT``.
        2. **Whitelist Approach**: Strings that must be rendered verbatim
           (column lists, conflict targets, column names) are checked
           against a character whitelist before use.
        3. **Length Limits**: Column names longer than the configured
           maximum are rejected.

    Table names are the one unchecked input; they come from internal call
    sites, never from end users.
    """

    def __init__(self, settings: _Settings):
        """Initialize the compiler.

        Args:
            settings: Settings providing the default conflict target and
                the identifier length limit.
        """
        self.settings = settings
        self.max_identifier_length = settings.max_identifier_length
        self.default_conflict_target = settings.default_conflict_target

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Return the placeholder text for the 1-based parameter ``index``."""
        pass

    @abstractmethod
    def _build_select(self, operation: Select, binder: ParameterBinder) -> str:
        """Build SELECT statement.

        Args:
            operation: Select operation
            binder: Parameter binder for this compilation

        Returns:
            Dialect-specific SELECT statement
        """
        pass

    @abstractmethod
    def _build_insert(self, operation: Insert, binder: ParameterBinder) -> str:
        """Build INSERT statement.

        Args:
            operation: Insert operation
            binder: Parameter binder for this compilation

        Returns:
            Dialect-specific INSERT statement
        """
        pass

    @abstractmethod
    def _build_upsert(self, operation: Upsert, binder: ParameterBinder) -> str:
        """Build INSERT ... ON CONFLICT statement.

        Args:
            operation: Upsert operation
            binder: Parameter binder for this compilation

        Returns:
            Dialect-specific upsert statement
        """
        pass

    @abstractmethod
    def _build_update(self, operation: Update, binder: ParameterBinder) -> str:
        """Build UPDATE statement.

        Args:
            operation: Update operation
            binder: Parameter binder for this compilation

        Returns:
            Dialect-specific UPDATE statement
        """
        pass

    @abstractmethod
    def _build_delete(self, operation: Delete, binder: ParameterBinder) -> str:
        """Build DELETE statement.

        Args:
            operation: Delete operation
            binder: Parameter binder for this compilation

        Returns:
            Dialect-specific DELETE statement
        """
        pass

    def build_query(self, operation: BaseOperation) -> CompiledQuery:
        """Build SQL text and parameters from an operation.

        All placeholders of the statement are assigned in a single rendering
        pass, in the order the statement text visits the values.

        Args:
            operation: Operation to convert to SQL

        Returns:
            The compiled statement

        Raises:
            NotImplementedError: If operation type is not supported
            ValidationError: If a rendered identifier or operand is invalid
        """
        operation_mapping = {
            QueryType.SELECT: self._build_select,
            QueryType.INSERT: self._build_insert,
            QueryType.UPSERT: self._build_upsert,
            QueryType.UPDATE: self._build_update,
            QueryType.DELETE: self._build_delete,
        }

        builder_method = operation_mapping.get(operation.operation_type)
        if builder_method is None:
            raise NotImplementedError(
                f"Operation type {operation.operation_type} not supported by {self.__class__.__name__}"
            )

        binder = ParameterBinder(self.placeholder)
        sql = builder_method(operation, binder)
        return CompiledQuery(sql=sql, params=binder.params)

    # --- rendering helpers ----------------------------------------------------

    def render_where(self, conditions: List[Condition], binder: ParameterBinder) -> str:
        """Render ``" WHERE a AND b ..."`` or an empty string.

        Conditions are joined with AND in the order given; there is no OR,
        grouping or nesting.
        """
        if not conditions:
            return ""
        rendered = [self.render_condition(condition, binder) for condition in conditions]
        return " WHERE " + " AND ".join(rendered)

    def render_condition(self, condition: Condition, binder: ParameterBinder) -> str:
        """Render one predicate, binding its value(s) through ``binder``.

        - ``IN`` consumes one placeholder per element, in list order. An
          empty list can match nothing and renders ``FALSE``.
        - ``IS``/``IS NOT`` render the NULL/TRUE/FALSE keyword and consume
          no placeholder.
        - Every other operator consumes exactly one placeholder.
        """
        column = self.validate_column(condition.column)
        operator = FilterOperator(condition.operator)

        if operator == FilterOperator.IN:
            values = list(condition.value)
            if not values:
                return "FALSE"
            placeholders = ", ".join(binder.bind_many(values))
            return f"{column} IN ({placeholders})"

        if operator in (FilterOperator.IS, FilterOperator.IS_NOT):
            keyword = self.is_keyword(condition.value)
            return f"{column} {operator.value} {keyword}"

        return f"{column} {operator.value} {binder.bind(condition.value)}"

    def format_column_list(self, columns: List[str]) -> str:
        return ", ".join(columns)

    def format_values_rows(
        self,
        rows: List[Dict[str, Any]],
        columns: List[str],
        binder: ParameterBinder,
    ) -> str:
        """Render ``($1, $2), ($3, $4)``, binding row by row in column order."""
        tuples = []
        for row in rows:
            placeholders = binder.bind_many([row[column] for column in columns])
            tuples.append(f"({', '.join(placeholders)})")
        return ", ".join(tuples)

    def format_set_clause(self, values: Dict[str, Any], binder: ParameterBinder) -> str:
        """Render ``col1 = $1, col2 = $2`` in key order."""
        assignments = []
        for column, value in values.items():
            assignments.append(f"{self.validate_identifier(column)} = {binder.bind(value)}")
        return ", ".join(assignments)

    def format_returning(self, returning: Optional[str]) -> str:
        if not returning:
            return ""
        return f" RETURNING {self.validate_column_spec(returning)}"

    # --- validation -----------------------------------------------------------

    def is_keyword(self, value: Any) -> str:
        """Map an ``IS`` operand to its SQL keyword.

        Raises:
            ValidationError: If the operand is not None, True or False
        """
        if value is not None and not isinstance(value, bool):
            raise validation_error(
                "IS only accepts None, True or False",
                field="value",
                value=value,
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        return IS_KEYWORDS[value]

    def validate_column_spec(self, columns: str) -> str:
        """Validate a select/returning column list.

        Args:
            columns: Column list text, e.g. ``"id, name"`` or
                ``"*, customer:customers(*)"``

        Returns:
            The column list unchanged

        Raises:
            ValidationError: If the text contains anything outside the
                whitelist, or a comment sequence
        """
        if not isinstance(columns, str) or not columns.strip():
            raise validation_error(
                "Invalid column specification: empty",
                field="columns",
                value=columns,
                error_code=ErrorCode.INVALID_COLUMN_SPEC,
            )

        if not _COLUMN_SPEC_PATTERN.match(columns) or '--' in columns:
            raise validation_error(
                f"Invalid column specification: {columns}",
                field="columns",
                value=columns,
                error_code=ErrorCode.INVALID_COLUMN_SPEC,
            )
        return columns

    def validate_conflict_target(self, conflict: Optional[str]) -> List[str]:
        """Split and validate an upsert conflict target.

        Args:
            conflict: Comma-separated column names, or None/empty for the
                configured default

        Returns:
            The stripped column names, in order

        Raises:
            ValidationError: If any segment is not a plain identifier
        """
        target = conflict if conflict and conflict.strip() else self.default_conflict_target
        columns = [segment.strip() for segment in target.split(",")]
        for column in columns:
            if not _CONFLICT_COLUMN_PATTERN.match(column):
                raise validation_error(
                    f"Invalid conflict target: {conflict}",
                    field="on_conflict",
                    value=conflict,
                    error_code=ErrorCode.INVALID_CONFLICT_TARGET,
                )
        return columns

    def validate_identifier(self, identifier: str, identifier_type: str = "column") -> str:
        """Validate a plain column name (payload keys, conflict columns)."""
        if not isinstance(identifier, str) or not _CONFLICT_COLUMN_PATTERN.match(identifier):
            raise validation_error(
                f"Invalid {identifier_type} name: {identifier}",
                field=identifier_type,
                value=identifier,
                error_code=ErrorCode.INVALID_IDENTIFIER,
            )
        self._check_length(identifier, identifier_type)
        return identifier

    def validate_column(self, column: str) -> str:
        """Validate a filter or ordering column; one ``relation.column`` dot is allowed."""
        if not isinstance(column, str) or not _COLUMN_PATTERN.match(column):
            raise validation_error(
                f"Invalid column name: {column}",
                field="column",
                value=column,
                error_code=ErrorCode.INVALID_IDENTIFIER,
            )
        self._check_length(column, "column")
        return column

    def validate_limit(self, count: Any) -> int:
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise validation_error(
                f"Invalid limit: {count!r}. Limit must be a non-negative integer.",
                field="limit",
                value=count,
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        return count

    def _check_length(self, identifier: str, identifier_type: str) -> None:
        for part in identifier.split("."):
            if len(part) > self.max_identifier_length:
                raise validation_error(
                    f"{identifier_type} name too long: {identifier}",
                    field=identifier_type,
                    value=identifier,
                    error_code=ErrorCode.INVALID_IDENTIFIER,
                )
