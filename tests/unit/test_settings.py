"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from fleetql.settings import DatabaseSettings, _Settings, _reload_settings, get_settings


class TestSettings:

    def test_defaults(self):
        settings = _Settings(_env_file=None)
        assert settings.default_conflict_target == "id"
        assert settings.max_identifier_length == 63
        assert settings.log_level == "INFO"
        assert settings.database.get_url() is None

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("FLEETQL_DEFAULT_CONFLICT_TARGET", "tenant_id,id")
        monkeypatch.setenv("FLEETQL_DATABASE__URL", "postgresql+asyncpg://u:p@db/fleet")
        monkeypatch.setenv("FLEETQL_DATABASE__POOL_SIZE", "12")

        settings = _Settings(_env_file=None)

        assert settings.default_conflict_target == "tenant_id, id"
        assert settings.database.get_url() == "postgresql+asyncpg://u:p@db/fleet"
        assert settings.database.pool_size == 12
        assert not settings.database.is_sqlite

    def test_url_is_not_exposed_in_repr(self):
        settings = DatabaseSettings(url="postgresql+asyncpg://u:secret@db/fleet")
        assert "secret" not in repr(settings)

    def test_invalid_default_conflict_target(self):
        with pytest.raises(PydanticValidationError):
            _Settings(_env_file=None, default_conflict_target="id; DROP")

    def test_log_level_is_normalized(self):
        assert _Settings(_env_file=None, log_level="debug").log_level == "DEBUG"
        with pytest.raises(PydanticValidationError):
            _Settings(_env_file=None, log_level="verbose")

    def test_sqlite_detection(self):
        assert DatabaseSettings(url="sqlite+aiosqlite:///fleet.db").is_sqlite

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("FLEETQL_APP_ENV", "qa")
        settings = _reload_settings()
        try:
            assert get_settings() is settings
            assert settings.app_env == "qa"
        finally:
            monkeypatch.delenv("FLEETQL_APP_ENV")
            _reload_settings()
