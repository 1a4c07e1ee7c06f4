"""
Session materialization helpers.

enrich_session() runs on every session read and is the only place the
stable user ID is attached to the outward session. The JWT helpers back
the "jwt" session strategy, where the cookie itself carries the session.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt  # PyJWT

from .models import SessionUser, SessionView, User

logger = logging.getLogger(__name__)

SESSION_JWT_ALGORITHM = "HS256"


def enrich_session(session: Optional[SessionView], user: Optional[User]) -> Optional[SessionView]:
    """
    Copy the stored user's ID onto the session.

    Returns the session unchanged when either side is missing or the
    session carries no user.
    """
    if session is None or user is None or session.user is None:
        return session

    return session.model_copy(
        update={"user": session.user.model_copy(update={"id": user.id})}
    )


def session_view_for(user: User, expires: datetime) -> SessionView:
    """Un-enriched session for a stored user (profile fields only)."""
    return SessionView(
        user=SessionUser(name=user.name, email=user.email, image=user.image),
        expires=expires,
    )


def should_extend(expires: datetime, now: datetime, max_age: int, update_age: int) -> bool:
    """
    Whether a database session is due for a sliding-expiry refresh.

    Sessions are extended at most once per ``update_age`` seconds.
    """
    issued_or_refreshed = expires - timedelta(seconds=max_age)
    return now - issued_or_refreshed >= timedelta(seconds=update_age)


def encode_session_jwt(user: User, secret: str, max_age: int, now: Optional[datetime] = None) -> str:
    """Sign a session token for the jwt strategy."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "name": user.name,
        "email": user.email,
        "picture": user.image,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=max_age)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=SESSION_JWT_ALGORITHM)


def decode_session_jwt(token: str, secret: str) -> Optional[dict[str, Any]]:
    """
    Verify a session token.

    Returns:
        The claims, or None if the token is expired or invalid
    """
    try:
        return jwt.decode(token, secret, algorithms=[SESSION_JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug("Invalid session token: %s", e)
        return None


def session_view_from_claims(claims: dict[str, Any]) -> SessionView:
    """Un-enriched session built from JWT claims."""
    return SessionView(
        user=SessionUser(
            name=claims.get("name"),
            email=claims.get("email"),
            image=claims.get("picture"),
        ),
        expires=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
