"""Logging infrastructure for FleetQL.

This module provides structured logging with JSON output and context
tracking, so compiled statements and driver failures can be correlated
with the request that issued them.
"""

from fleetql.logging.filters import (
    ContextFilter,
    clear_request_context,
    set_logging_context,
    set_request_context,
)
from fleetql.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_logging_context",
    "set_request_context",
    "clear_request_context",
]
