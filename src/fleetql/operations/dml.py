"""Data Manipulation Language (DML) operations.

This module contains operation classes for SELECT, INSERT, UPSERT,
UPDATE and DELETE.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from fleetql.constants.sql import QueryType
from fleetql.operations.base import BaseOperation, Condition, OrderBy


class Select(BaseOperation):
    """Select rows operation."""
    operation_type: Literal[QueryType.SELECT] = Field(
        default=QueryType.SELECT,
        frozen=True
    )

    columns: str = Field(default="*", min_length=1)
    conditions: List[Condition] = Field(default_factory=list)
    order_by: Optional[OrderBy] = Field(default=None)
    limit: Optional[int] = Field(default=None, ge=0)


class _RowsOperation(BaseOperation):
    """Shared payload handling for INSERT and UPSERT.

    ``rows`` holds one mapping per VALUES tuple. Every row must carry the
    same keys; the first row fixes the column order.
    """
    rows: List[Dict[str, Any]] = Field(...)
    returning: Optional[str] = Field(default=None)

    @field_validator('rows')
    @classmethod
    def validate_rows(cls, v: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not v:
            raise ValueError("at least one row is required")
        keys = list(v[0].keys())
        if not keys:
            raise ValueError("rows must contain at least one column")
        for index, row in enumerate(v[1:], start=1):
            if set(row.keys()) != set(keys):
                raise ValueError(
                    f"row {index} has columns {sorted(row.keys())}, "
                    f"expected {sorted(keys)}"
                )
        return v

    @property
    def column_names(self) -> List[str]:
        return list(self.rows[0].keys())


class Insert(_RowsOperation):
    """Insert rows operation. ``returning`` is None unless select() was called."""
    operation_type: Literal[QueryType.INSERT] = Field(
        default=QueryType.INSERT,
        frozen=True
    )


class Upsert(_RowsOperation):
    """Insert-or-update operation.

    Rows that collide on ``conflict_columns`` have every inserted column
    overwritten with the incoming value.
    """
    operation_type: Literal[QueryType.UPSERT] = Field(
        default=QueryType.UPSERT,
        frozen=True
    )
    conflict_columns: List[str] = Field(..., min_length=1)
    returning: Optional[str] = Field(default="*")


class Update(BaseOperation):
    """Update rows operation."""
    operation_type: Literal[QueryType.UPDATE] = Field(
        default=QueryType.UPDATE,
        frozen=True
    )
    values: Dict[str, Any] = Field(...)
    conditions: List[Condition] = Field(default_factory=list)
    returning: Optional[str] = Field(default="*")

    @field_validator('values')
    @classmethod
    def validate_values(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Ensure there is at least one column to SET."""
        if not v:
            raise ValueError("values cannot be empty")
        return v


class Delete(BaseOperation):
    """Delete rows operation. No conditions means every row."""
    operation_type: Literal[QueryType.DELETE] = Field(
        default=QueryType.DELETE,
        frozen=True
    )
    conditions: List[Condition] = Field(default_factory=list)
    returning: Optional[str] = Field(default="*")
