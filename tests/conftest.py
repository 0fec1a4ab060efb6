"""Shared fixtures for FleetQL tests."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from fleetql.query_builder import Database, PostgresQueryCompiler
from fleetql.settings import _Settings
from fleetql.types import DriverResult


class RecordingExecutor:
    """Executor double that records every call and replays canned rows."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.rows = rows or []
        self.error = error
        self.calls: List[Tuple[str, List[Any]]] = []

    async def query(self, sql: str, params: List[Any]) -> DriverResult:
        self.calls.append((sql, list(params)))
        if self.error is not None:
            raise self.error
        return DriverResult.from_rows(list(self.rows))


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return _Settings(_env_file=None)


@pytest.fixture
def compiler(settings):
    return PostgresQueryCompiler(settings)


@pytest.fixture
def executor_factory():
    return RecordingExecutor


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def db(executor, compiler):
    return Database(executor, compiler)
