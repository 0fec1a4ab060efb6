from pydantic_settings import BaseSettings, SettingsConfigDict


class FleetQLBaseSettings(BaseSettings):
    """Base class for every FleetQL settings group.

    Values are read from ``FLEETQL_``-prefixed environment variables and an
    optional ``.env`` file. Nested groups use ``__`` as the delimiter, e.g.
    ``FLEETQL_DATABASE__URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLEETQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )
