"""Common exceptions for FleetQL.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    FleetQLError and carry structured error information.

    ValidationError is the exception for malformed chain input (column
    lists, conflict targets, identifiers, payloads). It is thrown
    synchronously. Driver failures are wrapped with query_execution_error
    and surfaced through QueryResult.error instead of being raised.
"""

from fleetql.common.exceptions import (
    ErrorCode,
    FleetQLError,
    ValidationError,
    # Helper functions
    builder_consumed_error,
    configuration_error,
    connection_error,
    query_execution_error,
    validation_error,
)

__all__ = [
    # Base Exception and Error Codes
    "FleetQLError",
    "ValidationError",
    "ErrorCode",
    # Helper functions
    "validation_error",
    "configuration_error",
    "connection_error",
    "query_execution_error",
    "builder_consumed_error",
]
