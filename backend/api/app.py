"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from shared.config import get_settings, validate_settings
from shared.database import close_database, init_database
from shared.exceptions import InternalError, ResumeTailorError

from .dependencies import init_container, reset_container
from .routes import health
from modules.analysis.routes import router as analysis_router
from modules.auth.routes import router as auth_router

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Invalid request"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup refuses to complete (so the server never accepts connections)
    until every required setting is present.
    """
    # Startup
    settings = validate_settings(get_settings())
    database = init_database(settings)
    container = init_container(settings, database)
    # Resolve the relay configuration once, before serving
    container.mailer

    # Token, user and stats uniqueness depend on these indexes
    try:
        await container.ensure_indexes()
    except PyMongoError:
        logger.exception("Could not create database indexes; aborting startup")
        reset_container()
        close_database()
        raise

    if settings.reconcile_stats_on_startup:
        try:
            await container.stats.reconcile_missing()
        except PyMongoError:
            logger.exception("Stats reconciliation failed at startup; continuing")

    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    reset_container()
    close_database()


async def resumetailor_error_handler(request: Request, exc: ResumeTailorError) -> JSONResponse:
    """Translate module errors into their status and a generic body."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.to_dict())
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.to_dict())
    return JSONResponse(exc.to_response(), status_code=exc.status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies or query strings; details stay in the log."""
    logger.info("%s %s invalid request: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": INVALID_REQUEST_MESSAGE}, status_code=422)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: never leak a raw exception to the client."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(error.to_response(), status_code=error.status_code)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Passwordless sign-in and analysis lookup for ResumeTailor",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(ResumeTailorError, resumetailor_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(analysis_router, prefix="/api/analysis", tags=["analysis"])

    return app


# Application instance for uvicorn
app = create_app()
