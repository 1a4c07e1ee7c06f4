"""
Base exception classes for the ResumeTailor backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application: every
exception carries an ErrorKind and the HTTP status it maps to, and the
API layer turns it into a generic client-facing body.
"""

from enum import Enum
from typing import Optional, Any


class ErrorKind(str, Enum):
    """Error taxonomy shared by all modules."""

    CONFIGURATION_MISSING = "ConfigurationMissing"
    INVALID_OR_EXPIRED_TOKEN = "InvalidOrExpiredToken"
    DELIVERY_FAILED = "DeliveryFailed"
    MALFORMED_IDENTIFIER = "MalformedIdentifier"
    NOT_FOUND = "NotFound"
    INVALID_INPUT = "InvalidInput"
    UNAUTHENTICATED = "Unauthenticated"
    FORBIDDEN = "Forbidden"
    INTERNAL = "Internal"


class ResumeTailorError(Exception):
    """
    Base exception for all ResumeTailor errors.

    All custom exceptions should inherit from this class.

    ``message`` is safe to show to clients; anything diagnostic belongs
    in ``details``, which is only ever logged.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for server-side logging."""
        return {
            "kind": self.kind.value,
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_response(self) -> dict[str, str]:
        """Client-facing error body."""
        return {"error": self.message}


class ConfigurationMissingError(ResumeTailorError):
    """Required configuration is absent. Fatal at startup."""

    kind = ErrorKind.CONFIGURATION_MISSING

    def __init__(self, missing: list[str]):
        super().__init__(
            f"Missing env variables: {', '.join(missing)}",
            code="CONFIGURATION_MISSING",
            details={"missing": list(missing)},
        )
        self.missing = list(missing)


class NotFoundError(ResumeTailorError):
    """Resource not found."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ValidationError(ResumeTailorError):
    """Input validation failed."""

    kind = ErrorKind.INVALID_INPUT
    status_code = 400


class AuthenticationError(ResumeTailorError):
    """Authentication failed (invalid or missing credentials)."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401


class AuthorizationError(ResumeTailorError):
    """Authorization failed (request could not be trusted)."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403


class ExternalServiceError(ResumeTailorError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class InternalError(ResumeTailorError):
    """Unexpected failure. Shown to clients generically."""

    def __init__(
        self,
        message: str = "Internal Server Error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code="INTERNAL", details=details)
