"""Context injection for FleetQL log records.

Two kinds of context end up on every record that passes ``ContextFilter``:

- request context (``request_id``, ``user_id`` and any other keys) held in a
  ``ContextVar``, so concurrent coroutines each see their own values;
- static process context (deployment environment, region, ...) set once at
  startup with ``set_logging_context``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Dict, Mapping, Optional

from fleetql.__version__ import __version__

_REQUEST_KEYS = ("request_id", "user_id")

_request_context: ContextVar[Mapping[str, Any]] = ContextVar("fleetql_request_context", default={})

_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Copy request and static context onto each record. Never drops a record.

    Fields passed explicitly through ``extra=`` win over static context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        request = _request_context.get()
        for key in _REQUEST_KEYS:
            setattr(record, key, request.get(key))
        for key, value in request.items():
            if key not in _REQUEST_KEYS and not hasattr(record, key):
                setattr(record, key, value)

        record.sdk_name = "fleetql"
        record.sdk_version = __version__

        for key, value in _static_context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the static context. Calling with no arguments clears it."""
    context = dict(extra or {})
    if environment is not None:
        context["environment"] = environment
    _static_context.clear()
    _static_context.update(context)


def set_request_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
    **fields: Any,
) -> None:
    """Merge values into the current request context. ``None`` values are ignored."""
    updates = {"request_id": request_id, "user_id": user_id, **fields}
    merged = dict(_request_context.get())
    merged.update({key: value for key, value in updates.items() if value is not None})
    _request_context.set(merged)


def clear_request_context() -> None:
    _request_context.set({})
