"""Application configuration via pydantic-settings.

All secrets are loaded from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppwriteSettings(BaseSettings):
    """Appwrite backend (Databases + Messaging) connection settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    appwrite_endpoint: str = Field(
        default="https://cloud.appwrite.io/v1",
        description="Appwrite REST API endpoint, including the /v1 suffix",
    )
    appwrite_project_id: str = Field(default="", description="Appwrite project ID")
    appwrite_api_key: str = Field(default="", description="Server API key with databases + messaging scopes")
    appwrite_database_id: str = Field(default="", description="Database holding the appointment collection")
    appwrite_appointment_collection_id: str = Field(default="", description="Appointment collection ID")
    appwrite_timeout: float = Field(default=15.0, description="Request timeout in seconds")
    appwrite_page_size: int = Field(default=100, gt=0, description="Documents fetched per list request")


class CacheSettings(BaseSettings):
    """Redis cache for rendered admin views."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection string",
    )
    admin_cache_ttl: int = Field(default=300, description="Admin view cache TTL in seconds")


class NotificationSettings(BaseSettings):
    """Patient-facing notification content."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    clinic_name: str = Field(default="HealthCare+")
    directions_url: str = Field(default="https://maps.app.goo.gl/qFqi73srDALDWW2x5")
    notification_subject: str = Field(default="Appointment Notification")


class SecuritySettings(BaseSettings):
    """Admin authentication settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    admin_web_password: str = Field(default="", description="HTTP Basic Auth password for the admin view")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.appwrite.appwrite_endpoint
        settings.cache.redis_url
        settings.notifications.clinic_name
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Composed settings (loaded from same .env)
    appwrite: AppwriteSettings = Field(default_factory=AppwriteSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton — import this wherever settings are needed.
settings = Settings()
