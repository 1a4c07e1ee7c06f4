"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class User(BaseModel):
    """A stored user account."""

    id: str = Field(..., description="User ID (hex ObjectId)")
    email: str = Field(..., description="Email address, lower-cased")
    name: Optional[str] = Field(None, description="Display name")
    image: Optional[str] = Field(None, description="Avatar URL")
    email_verified: Optional[datetime] = Field(None, description="When the email was verified")


class Account(BaseModel):
    """Link between a user and the provider they signed in with."""

    user_id: str
    type: str = "email"
    provider: str = "email"
    provider_account_id: str


class VerificationToken(BaseModel):
    """
    A pending magic-link token.

    ``token`` holds the hashed value; the clear token only ever exists
    in the emailed URL.
    """

    identifier: str = Field(..., description="Email the token was issued to")
    token: str = Field(..., description="sha256 of the token and the auth secret")
    expires: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires <= now


class Session(BaseModel):
    """A stored database session."""

    session_token: str
    user_id: str
    expires: datetime


class SessionUser(BaseModel):
    """User fields exposed on the session."""

    id: Optional[str] = Field(None, description="Stable user ID, set by session enrichment")
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None

    model_config = {"frozen": True}


class SessionView(BaseModel):
    """
    The outward-facing session.

    Recomputed on every read; never stored.
    """

    user: Optional[SessionUser] = None
    expires: datetime

    model_config = {"frozen": True}


class SignInResult(BaseModel):
    """Outcome of a successful magic-link redemption."""

    user: User
    session_token: str = Field(..., description="Value for the session cookie")
    expires: datetime


class SignInRequest(BaseModel):
    """Body of POST /api/auth/signin/email."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    csrf_token: str = Field(..., alias="csrfToken")
    callback_url: Optional[str] = Field(None, alias="callbackUrl")


class SignOutRequest(BaseModel):
    """Body of POST /api/auth/signout."""

    model_config = ConfigDict(populate_by_name=True)

    csrf_token: str = Field(..., alias="csrfToken")
