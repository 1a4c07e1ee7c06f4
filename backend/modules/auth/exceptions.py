"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import AuthenticationError, AuthorizationError, ErrorKind


class InvalidOrExpiredTokenError(AuthenticationError):
    """Raised when a sign-in token is unknown, already used, or expired."""

    kind = ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def __init__(self, identifier: Optional[str] = None, reason: str = "not found"):
        super().__init__(
            "Invalid or expired sign-in link",
            code="INVALID_OR_EXPIRED_TOKEN",
            details={"identifier": identifier, "reason": reason},
        )


class InvalidCSRFTokenError(AuthorizationError):
    """Raised when a state-changing auth request lacks a valid CSRF token."""

    def __init__(self):
        super().__init__("Invalid CSRF token", code="INVALID_CSRF_TOKEN")
