"""
MongoDB identity store.

Encapsulates all queries and data mapping for the identity collections:
- users
- accounts
- sessions
- verification_tokens

Documents use the camelCase field names shared with the frontend's auth
library (``emailVerified``, ``userId``, ``sessionToken``, ...), so both
sides can read the same collections.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from shared.repository import BaseRepository
from .interfaces import IIdentityStore, UserCreatedListener
from .models import Account, Session, User, VerificationToken

logger = logging.getLogger(__name__)

USERS = "users"
ACCOUNTS = "accounts"
SESSIONS = "sessions"
VERIFICATION_TOKENS = "verification_tokens"

# Model field -> document field for updatable user fields
_USER_FIELDS = {
    "name": "name",
    "email": "email",
    "image": "image",
    "email_verified": "emailVerified",
}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoIdentityStore(BaseRepository[User], IIdentityStore):
    """
    Identity store backed by MongoDB.

    Also the dispatch point for the "user created" event: the listener
    passed as ``on_user_created`` runs once per newly inserted user,
    before create_user returns.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        on_user_created: Optional[UserCreatedListener] = None,
    ) -> None:
        super().__init__(db)
        self._on_user_created = on_user_created

    def set_user_created_listener(self, listener: Optional[UserCreatedListener]) -> None:
        self._on_user_created = listener

    async def ensure_indexes(self) -> None:
        """
        Create indexes.

        - users.email unique (one user per address)
        - sessions.sessionToken unique
        - verification_tokens (identifier, token) unique
        - verification_tokens.expires TTL (expired tokens are swept)
        - accounts (provider, providerAccountId) unique
        """
        await self._db[USERS].create_index(
            [("email", ASCENDING)], unique=True, name="unique_email"
        )
        await self._db[SESSIONS].create_index(
            [("sessionToken", ASCENDING)], unique=True, name="unique_session_token"
        )
        await self._db[VERIFICATION_TOKENS].create_index(
            [("identifier", ASCENDING), ("token", ASCENDING)],
            unique=True,
            name="unique_identifier_token",
        )
        await self._db[VERIFICATION_TOKENS].create_index(
            "expires", expireAfterSeconds=0, name="ttl_expires"
        )
        await self._db[ACCOUNTS].create_index(
            [("provider", ASCENDING), ("providerAccountId", ASCENDING)],
            unique=True,
            name="unique_provider_account",
        )

    # -------------------------------------------------------------------------
    # Verification tokens
    # -------------------------------------------------------------------------

    async def create_verification_token(self, token: VerificationToken) -> VerificationToken:
        await self._db[VERIFICATION_TOKENS].insert_one(
            {
                "identifier": token.identifier,
                "token": token.token,
                "expires": token.expires,
            }
        )
        return token

    async def use_verification_token(
        self, identifier: str, token: str
    ) -> Optional[VerificationToken]:
        # find_one_and_delete is atomic: of two concurrent redemptions,
        # only one gets the document back.
        doc = await self._db[VERIFICATION_TOKENS].find_one_and_delete(
            {"identifier": identifier, "token": token}
        )
        if doc is None:
            return None
        return VerificationToken(
            identifier=doc["identifier"],
            token=doc["token"],
            expires=_as_utc(doc["expires"]),
        )

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: str) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = await self._db[USERS].find_one({"_id": oid})
        return self._map_to_user(doc) if doc else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        doc = await self._db[USERS].find_one({"email": email})
        return self._map_to_user(doc) if doc else None

    async def create_user(
        self,
        email: str,
        name: Optional[str] = None,
        image: Optional[str] = None,
        email_verified: Optional[datetime] = None,
    ) -> User:
        doc: dict[str, Any] = {
            "name": name,
            "email": email,
            "image": image,
            "emailVerified": email_verified,
        }
        try:
            result = await self._db[USERS].insert_one(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent sign-in for the same address
            existing = await self.get_user_by_email(email)
            if existing is None:
                raise
            logger.info("User %s already exists, not dispatching user-created", existing.id)
            return existing

        doc["_id"] = result.inserted_id
        user = self._map_to_user(doc)
        logger.info("Created user %s", user.id)

        if self._on_user_created is not None:
            await self._on_user_created(user)
        return user

    async def update_user(self, user_id: str, **fields) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None

        unknown = set(fields) - set(_USER_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        update = {_USER_FIELDS[key]: value for key, value in fields.items()}
        doc = await self._db[USERS].find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        return self._map_to_user(doc) if doc else None

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def link_account(self, account: Account) -> Account:
        try:
            await self._db[ACCOUNTS].insert_one(
                {
                    "userId": ObjectId(account.user_id),
                    "type": account.type,
                    "provider": account.provider,
                    "providerAccountId": account.provider_account_id,
                }
            )
        except DuplicateKeyError:
            logger.debug(
                "Account %s/%s already linked",
                account.provider,
                account.provider_account_id,
            )
        return account

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def create_session(self, session: Session) -> Session:
        await self._db[SESSIONS].insert_one(
            {
                "sessionToken": session.session_token,
                "userId": ObjectId(session.user_id),
                "expires": session.expires,
            }
        )
        return session

    async def get_session_and_user(
        self, session_token: str
    ) -> Optional[tuple[Session, User]]:
        session_doc = await self._db[SESSIONS].find_one({"sessionToken": session_token})
        if session_doc is None:
            return None

        user_doc = await self._db[USERS].find_one({"_id": session_doc["userId"]})
        if user_doc is None:
            return None

        return self._map_to_session(session_doc), self._map_to_user(user_doc)

    async def update_session(self, session_token: str, expires: datetime) -> None:
        await self._db[SESSIONS].update_one(
            {"sessionToken": session_token},
            {"$set": {"expires": expires}},
        )

    async def delete_session(self, session_token: str) -> None:
        await self._db[SESSIONS].find_one_and_delete({"sessionToken": session_token})

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _map_to_user(doc: dict[str, Any]) -> User:
        return User(
            id=str(doc["_id"]),
            email=doc["email"],
            name=doc.get("name"),
            image=doc.get("image"),
            email_verified=_as_utc(doc.get("emailVerified")),
        )

    @staticmethod
    def _map_to_session(doc: dict[str, Any]) -> Session:
        return Session(
            session_token=doc["sessionToken"],
            user_id=str(doc["userId"]),
            expires=_as_utc(doc["expires"]),
        )
