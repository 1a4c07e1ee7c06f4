"""
Authentication service implementation.

Runs the magic-link flow on top of an identity store and a mailer:

    request_sign_in -> token stored (hashed) -> email sent
    complete_sign_in -> token consumed -> user loaded or created -> session
    get_session -> stored session + user -> enriched session view
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from shared.config import Settings
from modules.mail.interfaces import IMailer
from modules.mail.templates import compose_sign_in_message

from .interfaces import IAuthService, IIdentityStore
from .models import Account, Session, SessionView, SignInResult, User, VerificationToken
from .exceptions import InvalidCSRFTokenError, InvalidOrExpiredTokenError
from .sessions import (
    decode_session_jwt,
    encode_session_jwt,
    enrich_session,
    session_view_for,
    session_view_from_claims,
    should_extend,
)
from .tokens import (
    build_verification_url,
    create_csrf_token,
    generate_token,
    hash_token,
    normalize_email,
    resolve_redirect,
    token_expiry,
    verify_csrf_token,
)

logger = logging.getLogger(__name__)

EMAIL_PROVIDER = "email"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Session storage follows ``settings.session_strategy``: "database"
    keeps sessions in the identity store, "jwt" signs them into the
    cookie with the auth secret.
    """

    def __init__(self, store: IIdentityStore, mailer: IMailer, settings: Settings):
        self._store = store
        self._mailer = mailer
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    # -------------------------------------------------------------------------
    # CSRF
    # -------------------------------------------------------------------------

    def create_csrf_token(self) -> tuple[str, str]:
        return create_csrf_token(self._settings.auth_secret)

    def verify_csrf_token(self, cookie_value: Optional[str], submitted: Optional[str]) -> None:
        if not verify_csrf_token(cookie_value, submitted, self._settings.auth_secret):
            raise InvalidCSRFTokenError()

    # -------------------------------------------------------------------------
    # Sign-in
    # -------------------------------------------------------------------------

    async def request_sign_in(self, email: str, callback_url: Optional[str] = None) -> str:
        settings = self._settings
        email = normalize_email(email)

        token = generate_token()
        expires = token_expiry(_utcnow(), settings.verification_token_max_age)
        await self._store.create_verification_token(
            VerificationToken(
                identifier=email,
                token=hash_token(token, settings.auth_secret),
                expires=expires,
            )
        )

        url = build_verification_url(
            settings.auth_url,
            token,
            email,
            resolve_redirect(callback_url, settings.auth_url),
        )
        message = compose_sign_in_message(email, settings.email_from, url)
        await self._mailer.send(message)

        logger.info("Sign-in link issued for %s, expires %s", email, expires.isoformat())
        return f"{settings.auth_url.rstrip('/')}{settings.verify_request_page}?provider=email&type=email"

    async def complete_sign_in(self, email: str, token: str) -> SignInResult:
        settings = self._settings
        email = normalize_email(email)
        now = _utcnow()

        # The token must be consumed before the user is touched
        record = await self._store.use_verification_token(
            email, hash_token(token, settings.auth_secret)
        )
        if record is None:
            logger.warning("Sign-in token for %s not found or already used", email)
            raise InvalidOrExpiredTokenError(email, reason="not found")
        if record.is_expired(now):
            logger.warning("Sign-in token for %s expired at %s", email, record.expires.isoformat())
            raise InvalidOrExpiredTokenError(email, reason="expired")

        user = await self._store.get_user_by_email(email)
        if user is None:
            user = await self._store.create_user(email=email, email_verified=now)
            await self._store.link_account(
                Account(
                    user_id=user.id,
                    type=EMAIL_PROVIDER,
                    provider=EMAIL_PROVIDER,
                    provider_account_id=email,
                )
            )
        elif user.email_verified is None:
            user = await self._store.update_user(user.id, email_verified=now) or user

        session_token, expires = await self._open_session(user, now)
        logger.info("User %s signed in", user.id)
        return SignInResult(user=user, session_token=session_token, expires=expires)

    async def _open_session(self, user: User, now: datetime) -> tuple[str, datetime]:
        settings = self._settings
        expires = now + timedelta(seconds=settings.session_max_age)

        if settings.session_strategy == "jwt":
            token = encode_session_jwt(user, settings.auth_secret, settings.session_max_age, now)
            return token, expires

        session = await self._store.create_session(
            Session(session_token=str(uuid.uuid4()), user_id=user.id, expires=expires)
        )
        return session.session_token, expires

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def get_session(self, session_token: Optional[str]) -> Optional[SessionView]:
        if not session_token:
            return None

        if self._settings.session_strategy == "jwt":
            return await self._get_jwt_session(session_token)
        return await self._get_database_session(session_token)

    async def _get_database_session(self, session_token: str) -> Optional[SessionView]:
        settings = self._settings
        now = _utcnow()

        found = await self._store.get_session_and_user(session_token)
        if found is None:
            return None
        session, user = found

        if session.expires <= now:
            logger.debug("Session for user %s expired, deleting", user.id)
            await self._store.delete_session(session_token)
            return None

        expires = session.expires
        if should_extend(expires, now, settings.session_max_age, settings.session_update_age):
            expires = now + timedelta(seconds=settings.session_max_age)
            await self._store.update_session(session_token, expires)

        return enrich_session(session_view_for(user, expires), user)

    async def _get_jwt_session(self, session_token: str) -> Optional[SessionView]:
        claims = decode_session_jwt(session_token, self._settings.auth_secret)
        if claims is None:
            return None

        user = await self._store.get_user(str(claims.get("sub", "")))
        return enrich_session(session_view_from_claims(claims), user)

    async def sign_out(self, session_token: Optional[str]) -> None:
        if session_token and self._settings.session_strategy == "database":
            await self._store.delete_session(session_token)
