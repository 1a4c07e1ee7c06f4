"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
an in-memory stand-in for a Motor database that records every operation
(so tests can assert that no query was made) and enforces unique indexes,
a mailer that captures messages instead of sending them, and settings /
container fixtures.
"""

import asyncio
import copy
import re
from types import SimpleNamespace
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from shared.config import Settings, get_settings
from api.dependencies import init_container, reset_container
from modules.mail.models import MailMessage


TEST_AUTH_SECRET = "test-auth-secret-for-testing-only"


# =============================================================================
# Fake Motor database
# =============================================================================


def _matches(doc: dict[str, Any], query: Optional[dict[str, Any]]) -> bool:
    for key, expected in (query or {}).items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]):
        self._docs = docs

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration

    async def to_list(self, length: Optional[int] = None) -> list[dict[str, Any]]:
        return self._docs[:length] if length else list(self._docs)


class FakeCollection:
    """
    Subset of AsyncIOMotorCollection used by the repositories.

    Each operation yields to the event loop once before running, then
    runs to completion without yielding, which mirrors single-document
    atomicity in MongoDB.
    """

    def __init__(self, name: str, db: "FakeDatabase"):
        self.name = name
        self._db = db
        self.docs: list[dict[str, Any]] = []
        self.unique_indexes: list[tuple[str, ...]] = []
        self.indexes: dict[str, dict[str, Any]] = {}
        self.fail_with: dict[str, Exception] = {}

    async def _enter(self, op: str) -> None:
        self._db.calls.append((self.name, op))
        await asyncio.sleep(0)
        if op in self.fail_with:
            raise self.fail_with[op]

    async def create_index(self, keys, unique: bool = False, name: Optional[str] = None, **kwargs):
        await self._enter("create_index")
        fields = (keys,) if isinstance(keys, str) else tuple(field for field, _ in keys)
        index_name = name or "_".join(fields)
        self.indexes[index_name] = {"fields": fields, "unique": unique, **kwargs}
        if unique and fields not in self.unique_indexes:
            self.unique_indexes.append(fields)
        return index_name

    async def insert_one(self, doc: dict[str, Any]):
        await self._enter("insert_one")
        doc.setdefault("_id", ObjectId())
        for existing in self.docs:
            if existing["_id"] == doc["_id"]:
                raise DuplicateKeyError("E11000 duplicate key error: _id")
            for fields in self.unique_indexes:
                if all(existing.get(f) == doc.get(f) for f in fields):
                    raise DuplicateKeyError(f"E11000 duplicate key error: {fields}")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: Optional[dict[str, Any]] = None, projection=None):
        await self._enter("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: Optional[dict[str, Any]] = None, projection=None) -> FakeCursor:
        self._db.calls.append((self.name, "find"))
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def find_one_and_delete(self, query: dict[str, Any]):
        await self._enter("find_one_and_delete")
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                return self.docs.pop(index)
        return None

    async def find_one_and_update(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        return_document: bool = ReturnDocument.BEFORE,
    ):
        await self._enter("find_one_and_update")
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(update.get("$set", {}))
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]):
        await self._enter("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query: dict[str, Any]) -> int:
        await self._enter("count_documents")
        return sum(1 for doc in self.docs if _matches(doc, query))


class FakeDatabase:
    """Subset of AsyncIOMotorDatabase; ``calls`` doubles as a query counter."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []
        self._collections: dict[str, FakeCollection] = {}
        self.ping_error: Optional[Exception] = None

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self)
        return self._collections[name]

    async def command(self, name: str):
        self.calls.append(("$cmd", name))
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}

    def writes(self) -> list[tuple[str, str]]:
        write_ops = {"insert_one", "update_one", "find_one_and_update", "find_one_and_delete"}
        return [call for call in self.calls if call[1] in write_ops]


# =============================================================================
# Fake mailer
# =============================================================================


class CapturingMailer:
    """IMailer that records messages; set ``fail_with`` to simulate relay failure."""

    def __init__(self):
        self.messages: list[MailMessage] = []
        self.fail_with: Optional[Exception] = None

    async def send(self, message: MailMessage) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append(message)


_LINK_PATTERN = re.compile(r"Click this link to sign in: (\S+)")


def extract_sign_in_link(message: MailMessage) -> dict[str, str]:
    """Pull the verification URL's query parameters out of a sign-in email."""
    match = _LINK_PATTERN.search(message.text)
    assert match, "sign-in email has no link"
    url = match.group(1)
    params = {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}
    params["url"] = url
    return params


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the settings cache and service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Complete settings for tests (no .env lookup)."""
    return Settings(
        _env_file=None,
        mongodb_uri="mongodb://localhost:27017",
        mongodb_database="ResumeTailorTest",
        email_server_host="smtp.test",
        email_server_port=587,
        email_server_user="mailer",
        email_server_password="mail-password",
        email_from="ResumeTailor <noreply@resumetailor.test>",
        auth_secret=TEST_AUTH_SECRET,
        auth_url="http://localhost:3000",
    )


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def mailer() -> CapturingMailer:
    return CapturingMailer()


@pytest.fixture
def container(settings, fake_db, mailer):
    """Service container wired to the fake database and capturing mailer."""
    return init_container(settings, fake_db, mailer=mailer)


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "user@example.com"


@pytest.fixture
def read_sign_in_link():
    """Function returning the query parameters of a captured sign-in email's link."""
    return extract_sign_in_link
