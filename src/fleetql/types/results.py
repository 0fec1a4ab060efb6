"""Result shapes exchanged with callers and with the driver."""

from typing import Any, Dict, Iterator, List, Optional

from pydantic import Field

from fleetql.common.exceptions import FleetQLError
from fleetql.types.base import FleetBaseModel


class QueryError(FleetBaseModel):
    """Error half of a QueryResult.

    ``message`` is always present; ``code`` and ``details`` come from the
    FleetQLError that was converted.
    """

    message: str
    code: str = "EXECUTION_002"
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: Exception) -> "QueryError":
        if isinstance(exc, FleetQLError):
            return cls(
                message=exc.message,
                code=exc.error_code.value,
                details=dict(exc.details),
            )
        return cls(message=str(exc) or type(exc).__name__)


class QueryResult(FleetBaseModel):
    """The uniform ``{data, error}`` outcome of resolving a builder.

    Exactly one of the two halves is meaningful: on failure ``data`` is
    None and ``error`` is set; on success ``error`` is None. A query that
    matched nothing is a success (``[]`` or None), not an error.

    Unpacks like a pair::

        data, error = await from_("drivers").select().fetch_many()
    """

    data: Any = None
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        yield self.data
        yield self.error

    @classmethod
    def success(cls, data: Any) -> "QueryResult":
        return cls(data=data, error=None)

    @classmethod
    def failure(cls, exc: Exception) -> "QueryResult":
        return cls(data=None, error=QueryError.from_exception(exc))


class DriverResult(FleetBaseModel):
    """Rows returned by the outbound ``query(sql, params)`` primitive."""

    rows: List[Dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0

    @classmethod
    def from_rows(cls, rows: List[Dict[str, Any]], row_count: Optional[int] = None) -> "DriverResult":
        return cls(rows=rows, row_count=len(rows) if row_count is None else row_count)
