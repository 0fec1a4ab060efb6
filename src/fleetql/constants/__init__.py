"""Constants module for FleetQL.

This module contains the constant values and enumerations used throughout
the package. It has no dependencies on other FleetQL modules.

Organization:
    - sql: statement kinds, filter operators and sort directions
"""

from fleetql.constants.sql import (
    IS_KEYWORDS,
    FilterOperator,
    QueryType,
    SortDirection,
)

__all__ = [
    "QueryType",
    "FilterOperator",
    "SortDirection",
    "IS_KEYWORDS",
]
