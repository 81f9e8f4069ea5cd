"""
Settings unit tests.
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.openai_model == "gpt-4o-mini"
        assert settings.generation_temperature == 0.7
        assert settings.model_timeout_seconds == 30.0
        assert settings.generation_quota_limit == 100
        assert settings.generation_quota_window_seconds == 86400
        assert settings.strict_catalog is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GENERATION_QUOTA_LIMIT", "25")
        monkeypatch.setenv("STRICT_CATALOG", "true")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")

        settings = Settings(_env_file=None)

        assert settings.is_test
        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.supabase_key == "test-supabase-key"
        assert settings.generation_quota_limit == 25
        assert settings.strict_catalog is True
        assert settings.openai_model == "gpt-4o"

    def test_environment_normalized(self):
        settings = Settings(environment="PRODUCTION", _env_file=None)

        assert settings.environment == "production"
        assert settings.is_production

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa", _env_file=None)

    def test_invalid_temperature(self):
        with pytest.raises(ValidationError):
            Settings(generation_temperature=3.5, _env_file=None)

    def test_quota_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(generation_quota_limit=0, _env_file=None)

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
