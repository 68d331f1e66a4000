"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./pawmatch.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Shared secret used to verify identity provider access tokens",
        min_length=1,
    )
    token_algorithm: str = Field(
        default="HS256",
        description="Signing algorithm expected on access tokens",
    )
    app_timezone: str | None = Field(
        default="UTC",
        description="Timezone used for server-assigned timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    realtime_retry_seconds: float = Field(
        default=3.0,
        description="Fixed backoff before retrying a failed realtime subscription",
        gt=0,
    )
    bell_poll_seconds: float = Field(
        default=15.0,
        description="Backstop poll interval for the notification bell",
        gt=0,
    )
    page_poll_seconds: float = Field(
        default=10.0,
        description="Backstop poll interval for the notifications page",
        gt=0,
    )
    bell_notification_limit: int = Field(default=5, gt=0)
    page_notification_limit: int = Field(default=50, gt=0)
    admin_scan_limit: int = Field(default=500, gt=0)
    candidate_page_size: int = Field(
        default=20,
        description="Maximum number of candidates loaded into a swipe queue",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_poll_intervals(self) -> "Settings":
        if self.realtime_retry_seconds >= self.bell_poll_seconds:
            raise ValueError(
                "REALTIME_RETRY_SECONDS must be shorter than BELL_POLL_SECONDS"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
