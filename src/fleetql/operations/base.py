"""Base operation definitions.

Operations are data structures that describe what statement should be
produced, independent of how it is rendered or executed. The fluent
builder accumulates its state and turns it into exactly one operation;
a query compiler turns that operation into SQL text plus parameters.
"""

from typing import Any, Dict, List

from pydantic import Field, field_validator

from fleetql.constants.sql import FilterOperator, QueryType
from fleetql.types.base import FleetBaseModel


class Condition(FleetBaseModel):
    """One ``<column> <operator> <value>`` predicate.

    Conditions of an operation are conjoined with AND in the order they
    were added.
    """
    column: str = Field(..., min_length=1)
    operator: FilterOperator
    value: Any = None

    @field_validator('value')
    @classmethod
    def normalize_in_list(cls, v: Any, info) -> Any:
        if info.data.get('operator') == FilterOperator.IN:
            if isinstance(v, (str, bytes)) or not hasattr(v, '__iter__'):
                raise ValueError("IN requires a list of values")
            return list(v)
        return v


class OrderBy(FleetBaseModel):
    column: str = Field(..., min_length=1)
    ascending: bool = True


class BaseOperation(FleetBaseModel):
    """Base class for all statement operations.

    Attributes:
        operation_type: The statement kind to render
        table: Target table. Trusted input from internal call sites; it is
            not validated here.
    """
    operation_type: QueryType
    table: str = Field(..., min_length=1)

    def telemetry_fields(self) -> Dict[str, str]:
        """Return flattened fields describing this operation for logs/spans."""
        payload: Dict[str, str] = {
            "operation.type": self.operation_type.value,
            "operation.table": self.table,
        }
        conditions: List[Condition] = getattr(self, "conditions", None) or []
        if conditions:
            payload["operation.conditions"] = str(len(conditions))
        return payload
