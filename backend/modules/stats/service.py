"""
Stats provisioning service.

Listens for the identity store's "user created" event and gives each new
user a stats record with zeroed counters and the starting AI credit
allowance. Provisioning is best effort: a failed insert is logged and the
account stays, and reconcile_missing() can backfill later.
"""

import logging
from typing import Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from modules.auth.models import User

from .interfaces import IStatsService
from .models import UserStats
from .repository import StatsRepository

logger = logging.getLogger(__name__)


class StatsService(IStatsService):
    """MongoDB-backed stats service."""

    def __init__(self, repository: StatsRepository):
        self._repository = repository

    async def provision(self, user: User) -> None:
        stats = UserStats.initial(user.id)
        try:
            await self._repository.insert(stats)
        except DuplicateKeyError:
            logger.info("Stats already exist for user %s, skipping", user.id)
            return
        except PyMongoError:
            logger.exception(
                "Failed to create stats for user %s; account kept without stats",
                user.id,
            )
            return

        logger.info(
            "Provisioned stats for user %s with %d AI credits",
            user.id,
            stats.ai_credits,
        )

    async def get_stats(self, user_id: str) -> Optional[UserStats]:
        return await self._repository.get_by_user_id(user_id)

    async def reconcile_missing(self) -> int:
        created = 0
        for user_id in await self._repository.find_user_ids_without_stats():
            try:
                await self._repository.insert(UserStats.initial(user_id))
            except DuplicateKeyError:
                # Provisioned concurrently
                continue
            created += 1

        if created:
            logger.warning("Reconciled stats for %d users", created)
        return created
