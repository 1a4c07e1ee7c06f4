"""Tests for shared/repository.py."""

import pytest
from typing import Optional

from shared.repository import BaseRepository


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_handle(self, fake_db):
        """Should store the database handle in _db attribute."""
        repo = BaseRepository(fake_db)
        assert repo._db is fake_db

    @pytest.mark.asyncio
    async def test_ensure_indexes_defaults_to_noop(self, fake_db):
        await BaseRepository(fake_db).ensure_indexes()
        assert fake_db.calls == []

    @pytest.mark.asyncio
    async def test_subclass_can_access_db(self, fake_db):
        """Subclass should be able to query collections through _db."""
        await fake_db["notes"].insert_one({"_id": "n1", "body": "hello"})

        class NotesRepository(BaseRepository[dict]):
            async def get_by_id(self, note_id: str) -> Optional[dict]:
                return await self._db["notes"].find_one({"_id": note_id})

        repo = NotesRepository(fake_db)

        assert await repo.get_by_id("n1") == {"_id": "n1", "body": "hello"}
        assert await repo.get_by_id("missing") is None
