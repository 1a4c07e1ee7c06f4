"""
Analysis lookup service.
"""

import logging
from typing import Any

from pymongo.errors import PyMongoError

from shared.exceptions import InternalError

from .exceptions import AnalysisNotFoundError, MalformedIdentifierError
from .interfaces import IAnalysisService
from .repository import ANALYSES_COLLECTION, AnalysisRepository, is_valid_object_id

logger = logging.getLogger(__name__)


class AnalysisService(IAnalysisService):
    """Validates identifiers and reads analyses through the repository."""

    def __init__(self, repository: AnalysisRepository):
        self._repository = repository

    async def get_analysis(self, analysis_id: str) -> dict[str, Any]:
        logger.debug("Received request for analysis %r", analysis_id)

        if not is_valid_object_id(analysis_id):
            logger.warning("Analysis ID %r is not a valid ObjectId", analysis_id)
            raise MalformedIdentifierError(analysis_id)

        logger.debug("Querying %s for _id=%s", ANALYSES_COLLECTION, analysis_id)
        try:
            analysis = await self._repository.get_by_id(analysis_id)
        except PyMongoError as e:
            logger.exception("Database error while fetching analysis %s", analysis_id)
            raise InternalError(details={"analysis_id": analysis_id}) from e

        if analysis is None:
            logger.warning("Analysis %s not found in %s", analysis_id, ANALYSES_COLLECTION)
            raise AnalysisNotFoundError(analysis_id)

        logger.info("Found analysis %s", analysis_id)
        return analysis
