"""
Analysis repository for database access.

Analyses are produced elsewhere; this repository only reads them.
"""

import re
from typing import Any, Optional

from bson import ObjectId

from shared.repository import BaseRepository

ANALYSES_COLLECTION = "analyses"

_OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


def is_valid_object_id(value: str) -> bool:
    """
    True for a 24-character hex string.

    Stricter than ObjectId.is_valid, which also accepts any 12-byte string.
    """
    return isinstance(value, str) and _OBJECT_ID_PATTERN.fullmatch(value) is not None


class AnalysisRepository(BaseRepository[dict]):
    """Read-only access to the ``analyses`` collection."""

    async def get_by_id(self, analysis_id: str) -> Optional[dict[str, Any]]:
        """
        Get an analysis document by its ID.

        Args:
            analysis_id: 24-character hex ObjectId

        Returns:
            The raw document, or None if not found
        """
        return await self._db[ANALYSES_COLLECTION].find_one({"_id": ObjectId(analysis_id)})
