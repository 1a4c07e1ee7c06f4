"""
Centralized configuration for the ResumeTailor backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., EMAIL_*, MONGODB_*).
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationMissingError


# Values that must be present before the server accepts connections,
# mapped to the environment variable that provides them.
REQUIRED_SETTINGS: dict[str, str] = {
    "email_server_host": "EMAIL_SERVER_HOST",
    "email_server_port": "EMAIL_SERVER_PORT",
    "email_server_user": "EMAIL_SERVER_USER",
    "email_server_password": "EMAIL_SERVER_PASSWORD",
    "email_from": "EMAIL_FROM",
    "auth_secret": "AUTH_SECRET",
    "mongodb_uri": "MONGODB_URI",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ResumeTailor API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # MongoDB
    mongodb_uri: str = ""
    mongodb_database: str = "ResumeTailor"
    db_timeout_ms: int = 5000

    # Mail relay
    email_server_host: str = ""
    email_server_port: Optional[int] = None
    email_server_user: str = ""
    email_server_password: str = ""
    email_from: str = ""
    email_use_tls: bool = True
    email_timeout_seconds: float = 10.0

    # Auth
    auth_secret: str = ""
    auth_url: str = "http://localhost:3000"
    session_strategy: Literal["database", "jwt"] = "database"
    session_max_age: int = 30 * 24 * 60 * 60  # seconds
    session_update_age: int = 24 * 60 * 60  # seconds
    session_cookie_name: str = "session-token"
    csrf_cookie_name: str = "csrf-token"
    verification_token_max_age: int = 24 * 60 * 60  # seconds

    # Pages the auth flow redirects to (relative to auth_url)
    sign_in_page: str = "/login"
    verify_request_page: str = "/login/verify-request"
    error_page: str = "/login"

    # Feature Flags
    reconcile_stats_on_startup: bool = False

    @field_validator("email_server_port", mode="before")
    @classmethod
    def _blank_port_is_unset(cls, value):
        # EMAIL_SERVER_PORT= is reported by validate_settings, not by parsing
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_required(self) -> list[str]:
        """Return the environment variable names of required values that are unset."""
        return [
            env_name
            for field, env_name in REQUIRED_SETTINGS.items()
            if getattr(self, field) in (None, "")
        ]


def validate_settings(settings: Settings) -> Settings:
    """
    Fail fast if any required configuration value is absent.

    Raises:
        ConfigurationMissingError: Listing every missing variable
    """
    missing = settings.missing_required()
    if missing:
        raise ConfigurationMissingError(missing)
    return settings


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
