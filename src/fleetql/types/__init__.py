"""Data models shared across FleetQL."""

from fleetql.types.base import FleetBaseModel
from fleetql.types.results import DriverResult, QueryError, QueryResult

__all__ = [
    "FleetBaseModel",
    "QueryResult",
    "QueryError",
    "DriverResult",
]
