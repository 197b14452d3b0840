"""Service configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_SEARCH_INDEX = "activity-logs"
DEFAULT_ACTIVITY_CHANNEL = "activity-log"


class Settings(BaseSettings):
    """Configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL. When set it takes precedence over the DB_* parts",
    )
    db_driver: str = Field(
        default="mysql+pymysql",
        description="SQLAlchemy dialect and driver used to reach the relational store",
        min_length=1,
    )
    db_host: str = Field(default="localhost", description="Relational store host")
    db_port: int = Field(default=3306, description="Relational store port", gt=0)
    db_username: str | None = Field(default=None, description="Relational store user")
    db_password: str | None = Field(
        default=None, description="Relational store password"
    )
    db_name: str | None = Field(default=None, description="Relational database name")
    db_timezone: str = Field(
        default="+08:00",
        description="Session time zone used when the store generates timestamps",
    )

    elasticsearch_node: str | None = Field(
        default=None,
        description="Search backend endpoint. Leaving it empty disables indexing",
    )
    search_index: str = Field(
        default=DEFAULT_SEARCH_INDEX,
        description="Name of the index receiving activity documents",
        min_length=1,
    )
    search_request_timeout: float = Field(
        default=10.0, description="Seconds before a search request times out", gt=0
    )

    redis_host: str = Field(default="localhost", description="Pub/sub host")
    redis_port: int = Field(default=6379, description="Pub/sub port", gt=0)
    redis_db: int = Field(default=0, description="Redis logical database", ge=0)
    redis_password: str | None = Field(default=None, description="Pub/sub password")
    activity_channel: str = Field(
        default=DEFAULT_ACTIVITY_CHANNEL,
        description="Channel carrying activity log events",
        min_length=1,
    )
    subscriber_enabled: bool = Field(
        default=True,
        description="Start the pub/sub subscriber together with the service",
    )
    listener_max_workers: int | None = Field(
        default=None,
        description="Size of the pool handling deliveries. Empty uses the executor default",
        gt=0,
    )
    reconnect_delay_seconds: float = Field(
        default=5.0,
        description="Seconds to wait before resubscribing after a lost connection",
        ge=0,
    )

    validate_payloads: bool = Field(
        default=True,
        description="Reject payloads with missing or invalid fields before any write",
    )
    log_level: str = Field(default="INFO", description="Root logger level")

    @model_validator(mode="after")
    def _validate_database_target(self) -> "Settings":
        if self.database_url:
            return self
        if not self.db_name:
            raise ValueError("Either DATABASE_URL or DB_NAME must be provided")
        return self

    @property
    def search_enabled(self) -> bool:
        return bool(self.elasticsearch_node and self.elasticsearch_node.strip())


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "DEFAULT_ACTIVITY_CHANNEL",
    "DEFAULT_SEARCH_INDEX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
