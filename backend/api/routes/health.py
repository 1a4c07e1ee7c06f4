"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import ping_database
from ..dependencies import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Pings MongoDB; returns 503 if the database is unreachable or the
    application has not finished starting.
    """
    try:
        await ping_database(get_container().database)
    except (PyMongoError, RuntimeError):
        logger.warning("Readiness check failed", exc_info=True)
        return JSONResponse(
            ReadinessResponse(status="unavailable", database="disconnected").model_dump(),
            status_code=503,
        )
    return ReadinessResponse(status="ready", database="connected")
