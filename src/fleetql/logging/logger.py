"""Logger factory and JSON output for FleetQL.

Every FleetQL module logs through ``get_logger(__name__)`` and passes
structured fields with ``extra=``. ``setup_logging()`` is optional; without
it, records go wherever the application's own logging config sends them.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else on a record came from extra=
_STANDARD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Output keys: ``timestamp``, ``level``, ``logger``, ``message``, then
    every ``extra=`` field and context attribute, then ``trace_id``/``span_id``
    when the OpenTelemetry logging instrumentation has set them, and
    ``exception`` for records logged with ``exc_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRIBUTES and not key.startswith("otel")
        )

        trace_id = getattr(record, "otelTraceID", None)
        if trace_id:
            entry["trace_id"] = trace_id
            entry["span_id"] = getattr(record, "otelSpanID", None)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None, logger_name: str = "") -> None:
    """Install the JSON console handler with context injection.

    Args:
        level: Log level name. Defaults to ``FLEETQL_LOG_LEVEL`` from settings.
        logger_name: Logger to configure; the root logger by default, or
            ``"fleetql"`` to leave the application's handlers alone.
    """
    if level is None:
        from fleetql.settings import get_settings
        level = get_settings().log_level
    level = level.upper()

    handler_config: Dict[str, Any] = {
        "class": "logging.StreamHandler",
        "formatter": "fleetql_json",
        "filters": ["fleetql_context"],
        "stream": "ext://sys.stdout",
    }
    logger_config: Dict[str, Any] = {"level": level, "handlers": ["fleetql_console"]}

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"fleetql_json": {"()": CustomJsonFormatter}},
        "filters": {"fleetql_context": {"()": "fleetql.logging.filters.ContextFilter"}},
        "handlers": {"fleetql_console": handler_config},
    }
    if logger_name:
        config["loggers"] = {logger_name: {**logger_config, "propagate": False}}
    else:
        config["root"] = logger_config

    logging.config.dictConfig(config)
