"""
Shared infrastructure for ResumeTailor backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management and startup validation
- database: MongoDB client lifecycle
- exceptions: Base exception classes and the error taxonomy

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, validate_settings
from .database import (
    init_database,
    get_database,
    close_database,
    reset_client_cache,
)
from .exceptions import (
    ErrorKind,
    ResumeTailorError,
    ConfigurationMissingError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    InternalError,
)

__all__ = [
    "Settings",
    "get_settings",
    "validate_settings",
    "init_database",
    "get_database",
    "close_database",
    "reset_client_cache",
    "ErrorKind",
    "ResumeTailorError",
    "ConfigurationMissingError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "InternalError",
]
