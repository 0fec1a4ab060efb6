import re
from typing import Optional

from pydantic import Field, field_validator

from .base import FleetQLBaseSettings
from .database import DatabaseSettings

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class _Settings(FleetQLBaseSettings):

    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings,
        description="Database connection configuration"
    )

    app_env: str = Field(
        default="dev",
        description="Application deployment environment (dev, qa, prod, local, ...)"
    )
    log_level: str = Field(
        default="INFO",
        description="Base log level passed to setup_logging()"
    )

    default_conflict_target: str = Field(
        default="id",
        description=(
            "Comma-separated conflict columns used by upsert() when the caller "
            "passes no on_conflict. Mirrors the primary-key default of hosted "
            "PostgREST services."
        )
    )
    max_identifier_length: int = Field(
        default=63,
        ge=1,
        le=128,
        description="Longest column name accepted in filters, ordering and payload keys"
    )

    @field_validator("default_conflict_target")
    @classmethod
    def validate_default_conflict_target(cls, v: str) -> str:
        columns = [c.strip() for c in v.split(",")]
        for column in columns:
            if not _IDENTIFIER.match(column):
                raise ValueError(
                    f"Invalid default conflict column '{column}'. "
                    f"Columns must be plain identifiers."
                )
        return ", ".join(columns)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


_settings: Optional[_Settings] = None


def get_settings() -> _Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = _Settings()
    return _settings


def _reload_settings() -> _Settings:
    """Force a reload from the environment. Intended for tests."""
    global _settings
    _settings = _Settings()
    return _settings
