"""
Stats module interface.
"""

from typing import Protocol, Optional, runtime_checkable

from modules.auth.models import User
from .models import UserStats


@runtime_checkable
class IStatsService(Protocol):
    """Contract for per-user stats provisioning and reads."""

    async def provision(self, user: User) -> None:
        """
        Create the initial stats record for a newly created user.

        Never raises for database failures; they are logged instead so
        that account creation is not blocked.
        """
        ...

    async def get_stats(self, user_id: str) -> Optional[UserStats]:
        """Get a user's stats, or None if not provisioned."""
        ...

    async def reconcile_missing(self) -> int:
        """
        Provision stats for every user that lacks a record.

        Returns:
            Number of records created
        """
        ...
