"""
Authentication module.

Handles passwordless (magic link) sign-in, identity storage and sessions.

Public API:
- IAuthService: Interface for the sign-in flow
- IIdentityStore: Interface for user/session/token persistence
- User, Session, SessionView, VerificationToken: Models
- enrich_session: Attaches the stored user ID to a session view
- Auth exceptions: InvalidOrExpiredTokenError, InvalidCSRFTokenError
"""

from .interfaces import IAuthService, IIdentityStore, UserCreatedListener
from .models import (
    Account,
    Session,
    SessionUser,
    SessionView,
    SignInResult,
    User,
    VerificationToken,
)
from .sessions import enrich_session
from .exceptions import InvalidOrExpiredTokenError, InvalidCSRFTokenError

__all__ = [
    # Interfaces
    "IAuthService",
    "IIdentityStore",
    "UserCreatedListener",
    # Models
    "Account",
    "Session",
    "SessionUser",
    "SessionView",
    "SignInResult",
    "User",
    "VerificationToken",
    # Session enrichment
    "enrich_session",
    # Exceptions
    "InvalidOrExpiredTokenError",
    "InvalidCSRFTokenError",
]
