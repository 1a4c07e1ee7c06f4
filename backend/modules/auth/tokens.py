"""
Magic-link token issuing and request-forgery protection.

Tokens are random and single-use. Only their hash (salted with the auth
secret) is stored, so a leaked token collection cannot be replayed.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode, urlsplit

TOKEN_BYTES = 32
CALLBACK_PATH = "/api/auth/callback/email"


def generate_token() -> str:
    """Random hex token for a magic link."""
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str, secret: str) -> str:
    """Digest stored in place of the clear token."""
    return hashlib.sha256(f"{token}{secret}".encode("utf-8")).hexdigest()


def token_expiry(now: datetime, max_age: int) -> datetime:
    """Expiry for a token issued at ``now`` valid for ``max_age`` seconds."""
    return now + timedelta(seconds=max_age)


def normalize_email(email: str) -> str:
    """Lower-case and trim so one address maps to one user."""
    return email.strip().lower()


def build_verification_url(
    base_url: str,
    token: str,
    email: str,
    callback_url: str,
) -> str:
    """
    Compose the link mailed to the user.

    Example:
        >>> build_verification_url("https://app.test", "abc", "a@b.c", "https://app.test/")
        'https://app.test/api/auth/callback/email?callbackUrl=https%3A%2F%2Fapp.test%2F&token=abc&email=a%40b.c'
    """
    query = urlencode({"callbackUrl": callback_url, "token": token, "email": email})
    return f"{base_url.rstrip('/')}{CALLBACK_PATH}?{query}"


def resolve_redirect(url: Optional[str], base_url: str) -> str:
    """
    Keep relative and same-origin redirect targets; anything else goes home.
    """
    base_url = base_url.rstrip("/")
    if not url:
        return base_url
    if url.startswith("/") and not url.startswith("//"):
        return f"{base_url}{url}"

    target, base = urlsplit(url), urlsplit(base_url)
    if (target.scheme, target.netloc) == (base.scheme, base.netloc):
        return url
    return base_url


# -----------------------------------------------------------------------------
# CSRF (double submit cookie)
# -----------------------------------------------------------------------------


def create_csrf_token(secret: str) -> tuple[str, str]:
    """
    Create a CSRF token.

    Returns:
        (token, cookie value) where the cookie is ``token|hash``
    """
    token = secrets.token_hex(TOKEN_BYTES)
    return token, f"{token}|{hash_token(token, secret)}"


def verify_csrf_token(
    cookie_value: Optional[str],
    submitted: Optional[str],
    secret: str,
) -> bool:
    """Check that the cookie was issued by us and matches the submitted token."""
    if not cookie_value or not submitted or "|" not in cookie_value:
        return False

    token, digest = cookie_value.split("|", 1)
    return hmac.compare_digest(digest, hash_token(token, secret)) and hmac.compare_digest(
        token, submitted
    )
