from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for FleetQL.

    This enum provides categorized error codes that identify error types
    without creating numerous exception classes. Each category has its
    own prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Chain-construction and input validation errors
        CONNECTION_*: Driver and connection errors
        EXECUTION_*: Statement execution errors
        OPERATION_*: Builder lifecycle errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    INVALID_IDENTIFIER = "VALIDATION_003"
    INVALID_COLUMN_SPEC = "VALIDATION_004"
    INVALID_CONFLICT_TARGET = "VALIDATION_005"
    INVALID_PAYLOAD = "VALIDATION_006"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"

    # Operation errors
    OPERATION_ERROR = "OPERATION_001"
    BUILDER_CONSUMED = "OPERATION_002"


class FleetQLError(Exception):
    """Base exception for all FleetQL errors.

    Error codes categorize failures instead of a deep class hierarchy. The
    one exception with its own class is ``ValidationError``, because callers
    are expected to tell programmer errors in chain construction apart from
    everything else.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.OPERATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from fleetql.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "error_details": self.details,
            },
            exc_info=cause is not None,
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class ValidationError(FleetQLError, ValueError):
    """Malformed input detected while a query chain is being built.

    Raised synchronously from the chain method (or ``compile()``) that
    received the bad input. It is never converted into a result tuple.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, error_code=error_code, details=details, cause=cause)


def _details(extra: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Merge caller-supplied details with the helper's own fields, skipping None."""
    details = dict(extra or {})
    details.update({key: value for key, value in fields.items() if value is not None})
    return details


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    details: Optional[Dict[str, Any]] = None,
    cause: Optional[Exception] = None,
) -> ValidationError:
    """Build the ValidationError for a rejected chain argument.

    Args:
        message: Error message
        field: Name of the rejected argument
        value: Rejected value; stored as ``str(value)``
        error_code: More specific VALIDATION_* code
        details: Additional error details
        cause: Underlying exception, e.g. a pydantic validation error
    """
    return ValidationError(
        message,
        error_code=error_code,
        details=_details(details, field=field, value=None if value is None else str(value)),
        cause=cause,
    )


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    cause: Optional[Exception] = None,
) -> FleetQLError:
    """Missing or unusable configuration, e.g. no database URL."""
    return FleetQLError(
        message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=_details(details, config_key=config_key),
        cause=cause,
    )


def connection_error(
    message: str,
    service: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    cause: Optional[Exception] = None,
) -> FleetQLError:
    """The driver could not be loaded or could not reach the database."""
    return FleetQLError(
        message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=_details(details, service=service),
        cause=cause,
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    details: Optional[Dict[str, Any]] = None,
) -> FleetQLError:
    """Wrap whatever the driver raised while running ``query``.

    The message is the driver's own text, so callers see e.g. the
    constraint that was violated. Only the statement text is kept, never
    the bound values, truncated to 500 characters.

    Args:
        query: SQL statement that failed
        original_error: The underlying exception
        details: Additional error details
    """
    statement = query if len(query) <= 500 else query[:500] + "..."
    return FleetQLError(
        str(original_error) or type(original_error).__name__,
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=_details(details, query=statement),
        cause=original_error,
    )


def builder_consumed_error(table: str) -> FleetQLError:
    """Create the error raised when a resolved builder is resolved again."""
    return FleetQLError(
        f"Query builder for table '{table}' has already been resolved. "
        "Start a new chain with from_().",
        error_code=ErrorCode.BUILDER_CONSUMED,
        details={"table": table},
    )
