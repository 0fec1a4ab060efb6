"""OpenTelemetry access for FleetQL.

FleetQL depends only on the OpenTelemetry API. Spans are no-ops until the
application installs an SDK tracer provider.
"""

from typing import Optional

from opentelemetry import trace

from fleetql.__version__ import __version__

__all__ = [
    "get_tracer",
]


def get_tracer(name: str, version: Optional[str] = None) -> trace.Tracer:
    """Return a tracer from the globally configured provider."""
    return trace.get_tracer(name, version or __version__)
