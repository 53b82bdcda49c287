"""Unit tests for environment-driven application settings."""

import pytest
from pydantic import ValidationError

from src.settings import AppSettings


_ENV_VARS = (
    "APP_ENV",
    "WIKIPEDIA_API_URL",
    "WIKIPEDIA_API_USER_AGENT",
    "LOG_LEVEL",
    "FETCH_TIMEOUT_SECONDS",
    "FETCH_MAX_RETRIES",
    "REDIS_URL",
    "REDIS_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove any ambient configuration from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def load() -> AppSettings:
    return AppSettings(_env_file=None)  # type: ignore[call-arg]


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        """Test that settings load with no environment at all."""
        settings = load()

        assert settings.app_env == "development"
        assert settings.wikipedia_api_url == "https://en.wikipedia.org/api/rest_v1"
        assert settings.wikipedia_api_user_agent.startswith("ChronosDashboard/1.0")
        assert settings.log_level == "info"
        assert settings.fetch_timeout_seconds == 10.0
        assert settings.fetch_max_retries == 2
        assert settings.redis_url is None
        assert settings.redis_token is None

    def test_development_uses_console_logs(self) -> None:
        """Test that JSON logs are off in development."""
        assert load().json_logs is False


class TestEnvironment:
    """Tests for reading the environment."""

    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that each variable maps onto its field."""
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("WIKIPEDIA_API_URL", "https://example.org/api/")
        monkeypatch.setenv("WIKIPEDIA_API_USER_AGENT", "Tester/1.0")
        monkeypatch.setenv("LOG_LEVEL", "WARN")
        monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("FETCH_MAX_RETRIES", "4")
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379")

        settings = load()

        assert settings.app_env == "production"
        assert settings.json_logs is True
        assert settings.wikipedia_api_url == "https://example.org/api"
        assert settings.wikipedia_api_user_agent == "Tester/1.0"
        assert settings.log_level == "warn"
        assert settings.fetch_timeout_seconds == 2.5
        assert settings.fetch_max_retries == 4
        assert settings.redis_url == "redis://cache:6379"

    def test_empty_values_fall_back_to_defaults(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that empty variables are treated as unset."""
        monkeypatch.setenv("WIKIPEDIA_API_URL", "")
        monkeypatch.setenv("LOG_LEVEL", "")

        settings = load()

        assert settings.wikipedia_api_url == "https://en.wikipedia.org/api/rest_v1"
        assert settings.log_level == "info"


class TestValidation:
    """Tests for rejected configuration."""

    def test_rejects_non_http_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the API URL must be http(s)."""
        monkeypatch.setenv("WIKIPEDIA_API_URL", "ftp://example.org")

        with pytest.raises(ValidationError, match="WIKIPEDIA_API_URL"):
            load()

    def test_rejects_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that log levels are restricted to known names."""
        monkeypatch.setenv("LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            load()

    def test_rejects_unknown_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that APP_ENV is restricted to known environments."""
        monkeypatch.setenv("APP_ENV", "staging")

        with pytest.raises(ValidationError):
            load()

    def test_rejects_non_positive_timeout(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the fetch timeout must be positive."""
        monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "0")

        with pytest.raises(ValidationError):
            load()
