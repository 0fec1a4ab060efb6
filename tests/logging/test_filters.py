import json
import logging

from fleetql.logging import (
    ContextFilter,
    CustomJsonFormatter,
    clear_request_context,
    set_logging_context,
    set_request_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fleetql.query_builder.fluent",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=10,
        msg="Executing compiled query",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_filter_respects_static_environment():
    set_logging_context(environment="qa", extra={"region": "eu-west"})
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert getattr(record, "environment") == "qa"
        assert getattr(record, "region") == "eu-west"
        assert record.sdk_name == "fleetql"
    finally:
        set_logging_context(environment=None, extra=None)


def test_static_extra_does_not_override_record_fields():
    set_logging_context(extra={"table": "static"})
    try:
        record = _record(table="drivers")
        ContextFilter().filter(record)
        assert record.table == "drivers"
    finally:
        set_logging_context(environment=None, extra=None)


def test_context_filter_uses_request_context():
    set_request_context(request_id="req-1", user_id="dispatcher-7")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.user_id == "dispatcher-7"
    finally:
        clear_request_context()


def test_context_filter_no_config_is_graceful():
    set_logging_context(environment=None, extra=None)
    record = _record()
    assert ContextFilter().filter(record)
    assert not hasattr(record, "environment")
    assert record.request_id is None


def test_json_formatter_includes_extra_fields():
    record = _record(sql="SELECT * FROM drivers WHERE id = $1", param_count=1)
    ContextFilter().filter(record)

    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["message"] == "Executing compiled query"
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "fleetql.query_builder.fluent"
    assert payload["sql"] == "SELECT * FROM drivers WHERE id = $1"
    assert payload["param_count"] == 1
    assert payload["sdk_name"] == "fleetql"
