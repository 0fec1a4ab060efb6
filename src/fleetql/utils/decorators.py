"""Instrumentation decorators."""

import functools
import inspect
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from fleetql.logging import get_logger
from fleetql.telemetry import get_tracer

F = TypeVar('F', bound=Callable[..., Any])

AttributeGetter = Callable[..., Optional[Dict[str, Any]]]

logger = get_logger(__name__)


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attribute_getter: Optional[AttributeGetter] = None,
) -> Callable[[F], F]:
    """Run the decorated function inside an OpenTelemetry span.

    Works on both plain and ``async def`` functions. Exceptions are recorded
    on the span, which is marked as failed, and then re-raised unchanged.

    Args:
        span_name: Span name; defaults to ``<module>.<qualname>``.
        kind: Span kind, e.g. ``SpanKind.CLIENT`` for driver round trips.
        attribute_getter: Called with the function's arguments; the mapping
            it returns becomes span attributes. ``None`` values are skipped.

    Example:
        >>> @traced("fleetql.engine.query", kind=SpanKind.CLIENT,
        ...         attribute_getter=lambda self, sql, params=None: {"db.statement": sql})
        ... async def query(self, sql, params=None): ...
    """

    def decorator(func: F) -> F:
        name = span_name or f"{func.__module__}.{func.__qualname__}"

        @contextmanager
        def span_for(args: tuple, kwargs: dict) -> Iterator[Span]:
            with get_tracer(func.__module__).start_as_current_span(name, kind=kind) as span:
                for key, value in _attributes(attribute_getter, args, kwargs).items():
                    span.set_attribute(key, value)
                try:
                    yield span
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with span_for(args, kwargs):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def _attributes(getter: Optional[AttributeGetter], args: tuple, kwargs: dict) -> Dict[str, Any]:
    if getter is None:
        return {}
    try:
        attributes = getter(*args, **kwargs) or {}
    except Exception as exc:  # pragma: no cover - attributes never block the call
        logger.warning("Span attribute getter failed", extra={"error": str(exc)})
        return {}
    return {key: value for key, value in attributes.items() if value is not None}
