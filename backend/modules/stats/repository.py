"""
Stats repository for database access.

Documents live in the ``stats`` collection and use the field names the
frontend reads (``userId``, ``resume_created``, ...).
"""

from typing import Any, Optional

from pymongo import ASCENDING

from shared.repository import BaseRepository
from .models import UserStats

STATS_COLLECTION = "stats"
USERS_COLLECTION = "users"


class StatsRepository(BaseRepository[UserStats]):
    """Repository for per-user stats records."""

    async def ensure_indexes(self) -> None:
        # At most one stats record per user
        await self._db[STATS_COLLECTION].create_index(
            [("userId", ASCENDING)],
            unique=True,
            name="unique_user_id",
        )

    async def insert(self, stats: UserStats) -> None:
        """
        Insert a stats record.

        Raises:
            pymongo.errors.DuplicateKeyError: If the user already has one
        """
        await self._db[STATS_COLLECTION].insert_one(self._to_document(stats))

    async def get_by_user_id(self, user_id: str) -> Optional[UserStats]:
        doc = await self._db[STATS_COLLECTION].find_one({"userId": user_id})
        if doc is None:
            return None
        return self._map_to_stats(doc)

    async def find_user_ids_without_stats(self) -> list[str]:
        """IDs of users that have no stats record."""
        users = self._db[USERS_COLLECTION].find({}, {"_id": 1})
        user_ids = [str(doc["_id"]) async for doc in users]

        stats = self._db[STATS_COLLECTION].find({}, {"userId": 1})
        provisioned = {doc["userId"] async for doc in stats}

        return [user_id for user_id in user_ids if user_id not in provisioned]

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_document(stats: UserStats) -> dict[str, Any]:
        return {
            "userId": stats.user_id,
            "resume_created": stats.resume_created,
            "application_tailored": stats.application_tailored,
            "application_tracked": stats.application_tracked,
            "ai_credits": stats.ai_credits,
        }

    @staticmethod
    def _map_to_stats(doc: dict[str, Any]) -> UserStats:
        return UserStats(
            user_id=doc["userId"],
            resume_created=doc.get("resume_created", 0),
            application_tailored=doc.get("application_tailored", 0),
            application_tracked=doc.get("application_tracked", 0),
            ai_credits=doc.get("ai_credits", 0),
        )
