
from fleetql.__version__ import __version__

from fleetql.query_builder import (
    CompiledQuery,
    Database,
    DatabaseFactory,
    QueryBuilder,
    from_,
    get_database,
    set_database,
)
from fleetql.types import QueryError, QueryResult, DriverResult
from fleetql.protocols import QueryExecutor
from fleetql.engines import SQLAlchemyExecutor

from fleetql.common.exceptions import FleetQLError, ValidationError, ErrorCode

from fleetql.logging import setup_logging, set_logging_context, set_request_context


__all__ = [
    "__version__",

    # Entry points
    "from_",
    "get_database",
    "set_database",
    "Database",
    "DatabaseFactory",
    "QueryBuilder",
    "CompiledQuery",

    # Results
    "QueryResult",
    "QueryError",
    "DriverResult",

    # Execution
    "QueryExecutor",
    "SQLAlchemyExecutor",

    # Exceptions (public API)
    "FleetQLError",
    "ValidationError",
    "ErrorCode",

    # Logging
    "setup_logging",
    "set_logging_context",
    "set_request_context",
]
