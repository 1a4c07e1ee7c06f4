"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
MongoDB database access and providing shared utilities for data operations.
"""

from typing import TypeVar, Generic

from motor.motor_asyncio import AsyncIOMotorDatabase


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - MongoDB database access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle document-to-Pydantic model mapping internally.

    Example:
        class AnalysisRepository(BaseRepository[dict]):
            async def get_by_id(self, analysis_id: str) -> Optional[dict]:
                return await self._db["analyses"].find_one({"_id": ObjectId(analysis_id)})
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        """
        Initialize the repository with a database handle.

        Args:
            db: Motor database instance for database operations.
        """
        self._db = db

    async def ensure_indexes(self) -> None:
        """Create the indexes this repository relies on. No-op by default."""
        return None
