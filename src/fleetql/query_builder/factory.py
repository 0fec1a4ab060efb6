"""Database entry point and factory.

``Database`` pairs one executor with one compiler and hands out a fresh
``QueryBuilder`` per ``from_(table)`` call. ``DatabaseFactory`` builds the
default pairing from settings so application code never wires drivers by
hand.
"""

from typing import Optional

from fleetql.logging import get_logger
from fleetql.protocols import QueryExecutor
from fleetql.query_builder.base import BaseQueryCompiler
from fleetql.query_builder.fluent import QueryBuilder
from fleetql.query_builder.postgres import PostgresQueryCompiler
from fleetql.settings import _Settings, get_settings

logger = get_logger(__name__)


class Database:
    """Client handle over one executor.

    Example:
        >>> db = Database(executor)
        >>> data, error = await db.from_("drivers").select("id,name").limit(10)
    """

    def __init__(
        self,
        executor: QueryExecutor,
        compiler: Optional[BaseQueryCompiler] = None,
        settings: Optional[_Settings] = None,
    ):
        """Initialize the handle.

        Args:
            executor: Object implementing ``async query(sql, params)``
            compiler: Query compiler; PostgreSQL by default
            settings: Settings for the default compiler; process settings
                when omitted
        """
        self.executor = executor
        self.compiler = compiler or PostgresQueryCompiler(settings or get_settings())

    def from_(self, table: str) -> QueryBuilder:
        """Start a new chain against ``table``. Every call returns a fresh builder."""
        return QueryBuilder(table, self.executor, self.compiler)

    def table(self, name: str) -> QueryBuilder:
        return self.from_(name)

    async def health_check(self) -> bool:
        """Run ``SELECT 1`` through the executor.

        Returns:
            True if the statement succeeded, False otherwise
        """
        try:
            await self.executor.query("SELECT 1", [])
            return True
        except Exception as exc:
            logger.error(
                "Database health check failed",
                extra={"executor": type(self.executor).__name__, "error": str(exc)},
                exc_info=True,
            )
            return False

    async def close(self) -> None:
        """Release executor resources, if it holds any."""
        dispose = getattr(self.executor, "dispose", None)
        if dispose is not None:
            await dispose()


class DatabaseFactory:
    """Factory for creating ``Database`` handles from settings.

    Example:
        >>> db = DatabaseFactory.create()   # FLEETQL_DATABASE__URL decides the driver
    """

    @staticmethod
    def create_compiler(settings: Optional[_Settings] = None) -> BaseQueryCompiler:
        return PostgresQueryCompiler(settings or get_settings())

    @staticmethod
    def create(settings: Optional[_Settings] = None) -> Database:
        """Create a Database backed by the SQLAlchemy executor.

        The engine is created lazily, so a missing or wrong URL surfaces on
        the first query rather than here.
        """
        from fleetql.engines import SQLAlchemyExecutor

        settings = settings or get_settings()
        executor = SQLAlchemyExecutor(settings.database)
        return Database(executor, DatabaseFactory.create_compiler(settings))


_database: Optional[Database] = None


def get_database() -> Database:
    """Return the process-wide Database, creating it from settings on first use."""
    global _database
    if _database is None:
        _database = DatabaseFactory.create()
    return _database


def set_database(database: Optional[Database]) -> None:
    """Replace the process-wide Database. ``None`` resets to lazy creation."""
    global _database
    _database = database


def from_(table: str) -> QueryBuilder:
    """Start a chain against ``table`` on the process-wide Database."""
    return get_database().from_(table)
