"""
Stats module.

Provisions and reads the per-user stats record (usage counters and AI
credit balance).

Public API:
- IStatsService: Interface for stats operations
- StatsService: MongoDB implementation, also the user-created listener
- UserStats, INITIAL_AI_CREDITS
"""

from .interfaces import IStatsService
from .models import UserStats, INITIAL_AI_CREDITS
from .repository import StatsRepository
from .service import StatsService

__all__ = [
    "IStatsService",
    "StatsService",
    "StatsRepository",
    "UserStats",
    "INITIAL_AI_CREDITS",
]
