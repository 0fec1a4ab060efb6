"""PostgreSQL query compiler implementation."""

from typing import Union

from fleetql.constants.sql import SortDirection
from fleetql.operations import Delete, Insert, Select, Update, Upsert
from fleetql.query_builder.base import BaseQueryCompiler
from fleetql.query_builder.compiled import ParameterBinder


class PostgresQueryCompiler(BaseQueryCompiler):
    """Query compiler for PostgreSQL.

    Statements are single-line with one space between clauses. Values are
    numbered ``$1..$n`` in the order they appear in the text, so an UPDATE
    numbers its SET values before its WHERE values.
    """

    def placeholder(self, index: int) -> str:
        return f"${index}"

    def _build_select(self, operation: Select, binder: ParameterBinder) -> str:
        columns = self.validate_column_spec(operation.columns)
        sql = f"SELECT {columns} FROM {operation.table}"
        sql += self.render_where(operation.conditions, binder)

        if operation.order_by is not None:
            column = self.validate_column(operation.order_by.column)
            direction = SortDirection.ASC if operation.order_by.ascending else SortDirection.DESC
            sql += f" ORDER BY {column} {direction.value}"

        if operation.limit is not None:
            sql += f" LIMIT {self.validate_limit(operation.limit)}"

        return sql

    def _build_insert(self, operation: Insert, binder: ParameterBinder) -> str:
        sql = self._insert_prefix(operation, binder)
        sql += self.format_returning(operation.returning)
        return sql

    def _build_upsert(self, operation: Upsert, binder: ParameterBinder) -> str:
        """Build ``INSERT ... ON CONFLICT (...) DO UPDATE SET ...``.

        Every inserted column is overwritten from ``EXCLUDED``, the conflict
        columns included. The statement always returns rows; ``*`` unless a
        column list was selected.
        """
        sql = self._insert_prefix(operation, binder)

        conflict = self.format_column_list(
            [self.validate_identifier(column) for column in operation.conflict_columns]
        )
        assignments = ", ".join(
            f"{column} = EXCLUDED.{column}" for column in operation.column_names
        )
        sql += f" ON CONFLICT ({conflict}) DO UPDATE SET {assignments}"
        sql += self.format_returning(operation.returning or "*")
        return sql

    def _build_update(self, operation: Update, binder: ParameterBinder) -> str:
        sql = f"UPDATE {operation.table} SET {self.format_set_clause(operation.values, binder)}"
        sql += self.render_where(operation.conditions, binder)
        sql += self.format_returning(operation.returning)
        return sql

    def _build_delete(self, operation: Delete, binder: ParameterBinder) -> str:
        sql = f"DELETE FROM {operation.table}"
        sql += self.render_where(operation.conditions, binder)
        sql += self.format_returning(operation.returning)
        return sql

    def _insert_prefix(self, operation: Union[Insert, Upsert], binder: ParameterBinder) -> str:
        columns = [self.validate_identifier(column) for column in operation.column_names]
        values = self.format_values_rows(operation.rows, columns, binder)
        return f"INSERT INTO {operation.table} ({self.format_column_list(columns)}) VALUES {values}"
