"""Unit tests for FleetQL exceptions."""

import logging

from fleetql.common.exceptions import (
    ErrorCode,
    FleetQLError,
    ValidationError,
    builder_consumed_error,
    configuration_error,
    connection_error,
    query_execution_error,
    validation_error,
)
from fleetql.types import QueryError, QueryResult


class TestExceptions:

    def test_validation_error_is_value_error(self):
        error = validation_error("bad column", field="columns", value="a;b")
        assert isinstance(error, ValidationError)
        assert isinstance(error, ValueError)
        assert error.details == {"field": "columns", "value": "a;b"}
        assert str(error) == "[VALIDATION_001] bad column"

    def test_query_execution_error_keeps_cause(self):
        cause = RuntimeError("relation \"nope\" does not exist")
        error = query_execution_error("SELECT * FROM nope", cause)
        assert error.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert error.cause is cause
        assert error.message == 'relation "nope" does not exist'
        assert error.details["query"] == "SELECT * FROM nope"

    def test_query_execution_error_truncates_long_statements(self):
        error = query_execution_error("SELECT " + "a, " * 400 + "b FROM t", RuntimeError("x"))
        assert error.details["query"].endswith("...")
        assert len(error.details["query"]) == 503

    def test_query_execution_error_without_message(self):
        assert query_execution_error("SELECT 1", TimeoutError()).message == "TimeoutError"

    def test_helpers_set_codes(self):
        assert configuration_error("x", config_key="database.url").details == {"config_key": "database.url"}
        assert connection_error("x", service="postgresql").error_code == ErrorCode.CONNECTION_ERROR
        assert builder_consumed_error("trips").error_code == ErrorCode.BUILDER_CONSUMED

    def test_errors_are_logged_with_code(self, caplog):
        with caplog.at_level(logging.ERROR, logger="fleetql.common.exceptions"):
            FleetQLError("boom", error_code=ErrorCode.EXECUTION_ERROR)
        assert caplog.records[-1].error_code == "EXECUTION_001"

    def test_to_dict(self):
        data = configuration_error("missing").to_dict()
        assert data["type"] == "FleetQLError"
        assert data["error_name"] == "CONFIG_ERROR"


class TestQueryResult:

    def test_failure_from_fleetql_error(self):
        result = QueryResult.failure(connection_error("refused", service="postgresql"))
        assert result.data is None
        assert result.error == QueryError(
            message="refused",
            code="CONNECTION_001",
            details={"service": "postgresql"},
        )

    def test_failure_from_plain_exception(self):
        result = QueryResult.failure(KeyError())
        assert result.error.message == "KeyError"

    def test_unpacking(self):
        data, error = QueryResult.success([{"id": 1}])
        assert data == [{"id": 1}]
        assert error is None
