"""Tests for centralized configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError


class TestStoreSettings:

    def test_default_backend_is_postgres(self):
        from questboard.config import StoreSettings

        with patch.dict(os.environ, {}, clear=True):
            assert StoreSettings().backend == "postgres"

    def test_memory_backend(self):
        from questboard.config import StoreSettings

        with patch.dict(os.environ, {"STORE_BACKEND": "memory"}, clear=True):
            assert StoreSettings().backend == "memory"

    def test_unknown_backend_rejected(self):
        from questboard.config import StoreSettings

        with patch.dict(os.environ, {"STORE_BACKEND": "sqlite"}, clear=True):
            with pytest.raises(ValidationError):
                StoreSettings()


class TestPostgresSettings:

    def test_postgres_default_values(self):
        from questboard.config import PostgresSettings

        with patch.dict(os.environ, {}, clear=True):
            settings = PostgresSettings()
            assert settings.host == "postgres"
            assert settings.port == 5432
            assert settings.user == "questboard"
            assert settings.database == "questboard"
            assert settings.pool_max_size == 10

    def test_postgres_dsn_generation(self):
        from questboard.config import PostgresSettings

        env = {
            "POSTGRES_HOST": "dbhost",
            "POSTGRES_PORT": "5433",
            "POSTGRES_USER": "myuser",
            "POSTGRES_PASSWORD": "mypass",
            "POSTGRES_DB": "mydb",
        }
        with patch.dict(os.environ, env, clear=True):
            dsn = PostgresSettings().get_dsn()
            assert "host=dbhost" in dsn
            assert "port=5433" in dsn
            assert "user=myuser" in dsn
            assert "password=mypass" in dsn
            assert "dbname=mydb" in dsn


class TestCacheSettings:

    def test_disabled_by_default(self):
        from questboard.config import CacheSettings

        with patch.dict(os.environ, {}, clear=True):
            settings = CacheSettings()
            assert settings.enabled is False
            assert settings.ttl_sec == 300

    @pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("off", False)])
    def test_enabled_parsing(self, raw, expected):
        from questboard.config import CacheSettings

        with patch.dict(os.environ, {"CACHE_ENABLED": raw}, clear=True):
            assert CacheSettings().enabled is expected


class TestEventSettings:

    def test_default_hours(self):
        from questboard.config import EventSettings

        with patch.dict(os.environ, {}, clear=True):
            settings = EventSettings()
            assert settings.default_start_hour == 10
            assert settings.default_end_hour == 22
            assert settings.id_length == 10

    def test_inverted_default_hours_rejected(self):
        from questboard.config import EventSettings

        env = {"EVENT_DEFAULT_START_HOUR": "20", "EVENT_DEFAULT_END_HOUR": "8"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ValidationError):
                EventSettings()


class TestCorsSettings:

    def test_origins_parsing(self):
        from questboard.config import CorsSettings

        env = {"CORS_ORIGINS": "http://a.test, http://b.test,"}
        with patch.dict(os.environ, env, clear=True):
            settings = CorsSettings()
            assert settings.origins == ["http://a.test", "http://b.test"]
            assert settings.allow_credentials is True

    def test_wildcard_disables_credentials(self):
        from questboard.config import CorsSettings

        with patch.dict(os.environ, {"CORS_ORIGINS": "*"}, clear=True):
            assert CorsSettings().allow_credentials is False


class TestDebugSettings:

    def test_flags(self):
        from questboard.config import DebugSettings

        with patch.dict(os.environ, {"REQUEST_DEBUG": "1"}, clear=True):
            settings = DebugSettings()
            assert settings.request is True
            assert settings.cache is False


class TestGetSettings:

    def test_cached_until_cleared(self):
        from questboard.config import clear_settings_cache, get_settings

        clear_settings_cache()
        first = get_settings()
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings() is not first
        clear_settings_cache()
