"""Shared utilities for FleetQL."""

from fleetql.utils.decorators import traced

__all__ = [
    "traced",
]
