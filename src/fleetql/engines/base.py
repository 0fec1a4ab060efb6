import time
from typing import Any, Dict, List, Optional

from opentelemetry.trace import SpanKind
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from fleetql.common.exceptions import (
    configuration_error,
    connection_error,
    query_execution_error,
)
from fleetql.engines.placeholders import translate_placeholders
from fleetql.logging import get_logger
from fleetql.settings import DatabaseSettings
from fleetql.types.results import DriverResult
from fleetql.utils.decorators import traced

logger = get_logger(__name__)


class SQLAlchemyExecutor:
    """Async SQLAlchemy implementation of the ``query(sql, params)`` primitive.

    Works with any SQLAlchemy async dialect. Statements arrive with ``$n``
    placeholders and are rewritten for the driver's paramstyle before
    execution; asyncpg takes them unchanged.

    Features:
        - Lazy engine creation with connection pooling
        - One transaction per statement, committed on success
        - Structured logging of statement text and parameter count
        - OpenTelemetry span per statement

    Parameter values are never logged or attached to spans. Failed
    statements are not retried.

    Example:
        >>> executor = SQLAlchemyExecutor(get_settings().database)
        >>> result = await executor.query("SELECT * FROM drivers WHERE id = $1", [7])
        >>> result.rows
        [{'id': 7, 'name': 'Ada'}]
    """

    def __init__(self, settings: DatabaseSettings, engine: Optional[AsyncEngine] = None):
        """Initialize the executor.

        Args:
            settings: Database connection settings
            engine: Optional pre-built engine; created from settings when omitted
        """
        self.settings = settings
        self._engine: Optional[AsyncEngine] = engine

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the SQLAlchemy async engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        """Create the async engine with pooling from settings.

        Raises:
            FleetQLError: CONFIG_ERROR when no URL is configured,
                CONNECTION_ERROR when the dialect cannot be loaded
        """
        url = self.settings.get_url()
        if not url:
            raise configuration_error(
                "No database URL configured. Set FLEETQL_DATABASE__URL.",
                config_key="database.url",
            )

        options: Dict[str, Any] = {
            "echo": self.settings.echo,
            "pool_pre_ping": self.settings.pool_pre_ping,
        }
        # SQLite pools do not accept sizing arguments
        if not self.settings.is_sqlite:
            options.update(
                pool_size=self.settings.pool_size,
                max_overflow=self.settings.max_overflow,
                pool_timeout=self.settings.pool_timeout,
            )

        try:
            engine = create_async_engine(url, **options)
        except Exception as exc:
            raise connection_error(
                "Failed to create database engine",
                service=self._db_system(),
                cause=exc,
            )

        logger.info("Created database engine", extra={"db.system": engine.dialect.name})
        return engine

    def _span_attributes(self, sql: str, params: Optional[List[Any]] = None) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for one statement."""
        statement = (sql or "").strip()
        if len(statement) > 4096:
            statement = f"{statement[:4093]}..."

        words = statement.split()
        attributes: Dict[str, Any] = {
            "db.system": self._db_system(),
            "db.operation": words[0].upper() if words else "",
            "db.statement": statement,
            "db.statement.length": len(statement),
            "db.parameter_count": len(params or []),
        }

        table = _statement_table(words)
        if table:
            attributes["db.sql.table"] = table
        return attributes

    def _db_system(self) -> str:
        url = self.settings.get_url() or "sql"
        return url.split(":", 1)[0].split("+", 1)[0]

    @traced(
        span_name="fleetql.engine.query",
        kind=SpanKind.CLIENT,
        attribute_getter=lambda self, sql, params=None: self._span_attributes(sql, params),
    )
    async def query(self, sql: str, params: Optional[List[Any]] = None) -> DriverResult:
        """Execute one statement and return its rows.

        Args:
            sql: Statement with ``$n`` placeholders
            params: Positional values for the placeholders

        Returns:
            DriverResult with one dict per returned row; empty for
            statements that return nothing

        Raises:
            FleetQLError: QUERY_EXECUTION_ERROR wrapping the driver failure
        """
        params = list(params or [])
        start_time = time.time()
        payload: Dict[str, Any] = {"sql": sql, "param_count": len(params)}

        engine = self.engine
        statement, bound = translate_placeholders(sql, params, engine.dialect.paramstyle)

        try:
            async with engine.begin() as conn:
                result = await conn.exec_driver_sql(statement, bound if params else None)
                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings().all()]
                    row_count = len(rows)
                else:
                    rows = []
                    row_count = max(result.rowcount, 0)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "SQL query failed",
                extra={**payload, "duration.seconds": f"{duration:.6f}", "error": str(exc)},
                exc_info=True,
            )
            raise query_execution_error(sql, exc)

        duration = time.time() - start_time
        logger.debug(
            "SQL query executed",
            extra={**payload, "row_count": row_count, "duration.seconds": f"{duration:.6f}"},
        )
        return DriverResult.from_rows(rows, row_count)

    async def dispose(self) -> None:
        """Close every pooled connection. The engine is recreated on next use."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Disposed database engine")


def _statement_table(words: List[str]) -> Optional[str]:
    upper = [word.upper() for word in words]
    for keyword in ("FROM", "INTO", "UPDATE"):
        if keyword in upper:
            position = upper.index(keyword) + 1
            if position < len(words):
                return words[position]
    return None
