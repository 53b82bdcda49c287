"""Application settings powered by Pydantic BaseSettings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.fetch.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)


LogLevelName = Literal["debug", "info", "warn", "warning", "error"]
AppEnv = Literal["development", "production", "test"]


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Validated once at startup by the entry point; core components receive
    the values they need as constructor arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    app_env: AppEnv = Field(default="development", validation_alias="APP_ENV")
    wikipedia_api_url: str = Field(
        default=DEFAULT_BASE_URL, validation_alias="WIKIPEDIA_API_URL"
    )
    wikipedia_api_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        validation_alias="WIKIPEDIA_API_USER_AGENT",
    )
    log_level: LogLevelName = Field(default="info", validation_alias="LOG_LEVEL")
    fetch_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        validation_alias="FETCH_TIMEOUT_SECONDS",
    )
    fetch_max_retries: int = Field(
        default=2, ge=0, le=10, validation_alias="FETCH_MAX_RETRIES"
    )
    # Accepted for an external cache backend; the in-process cache ignores them.
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")
    redis_token: str | None = Field(default=None, validation_alias="REDIS_TOKEN")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept log level names in any case."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("wikipedia_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) API URL."""
        if not v.startswith(("http://", "https://")):
            msg = f"WIKIPEDIA_API_URL must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @property
    def json_logs(self) -> bool:
        """Whether logs should be rendered as JSON."""
        return self.app_env != "development"


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
