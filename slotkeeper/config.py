"""Application configuration via pydantic-settings."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SlotKeeper"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Database
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "slotkeeper"
    postgres_password: str = Field(default="slotkeeper_secret")
    postgres_db: str = "slotkeeper"
    db_pool_size: int = 20
    db_max_overflow: int = 10

    @computed_field
    @property
    def database_url(self) -> str:
        """Async PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # JWT verification (tokens are issued by the identity service)
    jwt_secret_key: str = Field(default="your-super-secret-key-change-in-production")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15

    # Booking rules
    booking_min_duration_minutes: int = 15
    booking_max_duration_hours: int = 8
    booking_lock_timeout_seconds: float = 5.0

    # Listing
    default_page_size: int = 20
    max_page_size: int = 100

    # Booking events
    events_enabled: bool = False
    event_webhook_url: Optional[str] = None
    event_webhook_timeout_seconds: float = 5.0

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    @property
    def min_booking_duration(self) -> timedelta:
        return timedelta(minutes=self.booking_min_duration_minutes)

    @property
    def max_booking_duration(self) -> timedelta:
        return timedelta(hours=self.booking_max_duration_hours)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
