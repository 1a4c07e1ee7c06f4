"""
Analysis API endpoints.
"""

from bson import ObjectId
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.dependencies import get_analysis_service

from .interfaces import IAnalysisService

router = APIRouter()


@router.get("/{analysis_id}")
async def get_analysis(
    analysis_id: str,
    service: IAnalysisService = Depends(get_analysis_service),
) -> JSONResponse:
    """
    Get a stored analysis document.

    The document is returned as stored, with ObjectIds rendered as hex
    strings. Errors come back as ``{"error": ...}`` with 400, 404 or 500.
    """
    analysis = await service.get_analysis(analysis_id)
    return JSONResponse(jsonable_encoder(analysis, custom_encoder={ObjectId: str}))
