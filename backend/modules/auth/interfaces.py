"""
Authentication module interface.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with fakes and swapping the
identity store.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from shared.config import Settings

from .models import (
    Account,
    Session,
    SessionView,
    SignInResult,
    User,
    VerificationToken,
)

# Listener for the "user created" lifecycle event. Runs before
# create_user returns.
UserCreatedListener = Callable[[User], Awaitable[None]]


@runtime_checkable
class IIdentityStore(Protocol):
    """
    Persistence for users, accounts, sessions and verification tokens.
    """

    async def create_verification_token(self, token: VerificationToken) -> VerificationToken:
        ...

    async def use_verification_token(
        self, identifier: str, token: str
    ) -> Optional[VerificationToken]:
        """
        Atomically consume a token.

        Returns:
            The consumed token, or None if it did not exist (or another
            caller consumed it first). Expiry is checked by the caller.
        """
        ...

    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    async def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    async def create_user(
        self,
        email: str,
        name: Optional[str] = None,
        image: Optional[str] = None,
        email_verified: Optional[datetime] = None,
    ) -> User:
        """
        Create a user and dispatch the user-created event.

        If a user with the email already exists, that user is returned
        and no event is dispatched.
        """
        ...

    async def update_user(self, user_id: str, **fields) -> Optional[User]:
        ...

    async def link_account(self, account: Account) -> Account:
        ...

    async def create_session(self, session: Session) -> Session:
        ...

    async def get_session_and_user(
        self, session_token: str
    ) -> Optional[tuple[Session, User]]:
        ...

    async def update_session(self, session_token: str, expires: datetime) -> None:
        ...

    async def delete_session(self, session_token: str) -> None:
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the passwordless sign-in flow.
    """

    @property
    def settings(self) -> Settings:
        """Settings the flow was configured with (cookie names, URLs)."""
        ...

    def create_csrf_token(self) -> tuple[str, str]:
        """Return (token, cookie value)."""
        ...

    def verify_csrf_token(self, cookie_value: Optional[str], submitted: Optional[str]) -> None:
        """
        Raises:
            InvalidCSRFTokenError: If the token does not match the cookie
        """
        ...

    async def request_sign_in(self, email: str, callback_url: Optional[str] = None) -> str:
        """
        Issue a magic link and email it.

        Returns:
            URL of the "check your email" page

        Raises:
            DeliveryFailedError: If the email could not be sent
        """
        ...

    async def complete_sign_in(self, email: str, token: str) -> SignInResult:
        """
        Redeem a magic link, load or create the user, and open a session.

        Raises:
            InvalidOrExpiredTokenError: If the token is unknown, used or expired
        """
        ...

    async def get_session(self, session_token: Optional[str]) -> Optional[SessionView]:
        """Materialize the enriched session, or None."""
        ...

    async def sign_out(self, session_token: Optional[str]) -> None:
        ...
