"""Settings module providing configuration management for FleetQL.

Built on Pydantic Settings: values are type-checked on load and can come
from the environment or a ``.env`` file.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Prefix: ``FLEETQL_``
    - Case: insensitive
    - Nested: double underscore, e.g. ``FLEETQL_DATABASE__URL``

Quick Start:
    >>> from fleetql.settings import get_settings
    >>> settings = get_settings()
    >>> settings.default_conflict_target
    'id'
"""

from .main import _Settings, get_settings, _reload_settings
from .base import FleetQLBaseSettings
from .database import DatabaseSettings

__all__ = [
    "get_settings",
    "FleetQLBaseSettings",
    "DatabaseSettings",
]
