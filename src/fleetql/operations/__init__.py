"""Statement operations module.

This module provides data structures that describe statements independent
of how they are rendered. Operations are pure data that can be:
- Produced by the fluent query builder
- Transformed into SQL by query compilers
- Serialized for logging or inspection
"""

from fleetql.operations.base import BaseOperation, Condition, OrderBy
from fleetql.operations.dml import Delete, Insert, Select, Update, Upsert

__all__ = [
    # Base
    "BaseOperation",
    "Condition",
    "OrderBy",
    # DML
    "Select",
    "Insert",
    "Upsert",
    "Update",
    "Delete",
]
