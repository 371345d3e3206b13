"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly. Leaving DATABASE_URL unset runs the
service on the in-memory store.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Database - optional, the in-memory store is used when unset
    database_url: Optional[str] = None
    storage_backend: Literal["auto", "memory", "database"] = "auto"

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_prefix: str = "/api"

    # Rate limiting
    rate_limit_enabled: bool = True

    # Refresh layer
    poll_interval_seconds: float = 3.0

    # Service requests auto-complete after this many seconds
    service_request_timeout_seconds: int = 30
    expiry_sweep_interval_seconds: int = 10

    # One loyalty point per this many currency units spent
    loyalty_points_per_currency_unit: int = 10

    # Completing a billing request marks the linked order as paid
    billing_marks_order_paid: bool = True

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v < 1 or v > 60:
            raise ValueError("poll_interval_seconds must be between 1 and 60")
        return v

    @field_validator("service_request_timeout_seconds", "expiry_sweep_interval_seconds", "loyalty_points_per_currency_unit")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """A database backend needs a URL to connect to."""
        if self.storage_backend == "database" and not self.database_url:
            raise ValueError(
                "FATAL: STORAGE_BACKEND=database requires DATABASE_URL to be set."
            )
        return self

    @property
    def use_database(self) -> bool:
        if self.storage_backend == "memory":
            return False
        return bool(self.database_url)

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
