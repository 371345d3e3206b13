"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from tableside.core.config import Settings


class TestSettings:
    def test_defaults_use_memory_store(self):
        settings = Settings(_env_file=None, database_url=None)
        assert settings.use_database is False
        assert settings.service_request_timeout_seconds == 30

    def test_database_url_enables_database(self):
        assert Settings(_env_file=None, database_url="sqlite:///pos.db").use_database is True

    def test_memory_backend_overrides_url(self):
        settings = Settings(_env_file=None, database_url="sqlite:///pos.db", storage_backend="memory")
        assert settings.use_database is False

    def test_database_backend_requires_url(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url=None, storage_backend="database")

    @pytest.mark.parametrize("interval", [0.5, 61])
    def test_poll_interval_bounds(self, interval):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, poll_interval_seconds=interval)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, service_request_timeout_seconds=0)

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
        assert Settings(_env_file=None, cors_origins="*").cors_origins_list == ["*"]
