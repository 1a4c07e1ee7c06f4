"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The container is built once during application startup with an explicit
database handle (see api.app.lifespan); nothing here connects on import.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase
    from modules.auth.adapter import MongoIdentityStore
    from modules.auth.interfaces import IAuthService
    from modules.analysis.interfaces import IAnalysisService
    from modules.mail.interfaces import IMailer
    from modules.stats.interfaces import IStatsService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(
        self,
        settings: Settings,
        database: "AsyncIOMotorDatabase",
        mailer: "Optional[IMailer]" = None,
    ) -> None:
        self.settings = settings
        self.database = database
        self._mailer: "IMailer | None" = mailer
        self._identity_store: "MongoIdentityStore | None" = None
        self._stats_service: "IStatsService | None" = None
        self._auth_service: "IAuthService | None" = None
        self._analysis_service: "IAnalysisService | None" = None

    @property
    def mailer(self) -> "IMailer":
        """Get the mailer instance."""
        if self._mailer is None:
            from modules.mail.models import SMTPConfig
            from modules.mail.service import SMTPMailer
            self._mailer = SMTPMailer(SMTPConfig.from_settings(self.settings))
        return self._mailer

    @property
    def stats(self) -> "IStatsService":
        """Get the stats service instance."""
        if self._stats_service is None:
            from modules.stats.repository import StatsRepository
            from modules.stats.service import StatsService
            self._stats_service = StatsService(StatsRepository(self.database))
        return self._stats_service

    @property
    def identity_store(self) -> "MongoIdentityStore":
        """Get the identity store, with stats provisioning as its user-created listener."""
        if self._identity_store is None:
            from modules.auth.adapter import MongoIdentityStore
            self._identity_store = MongoIdentityStore(
                self.database,
                on_user_created=self.stats.provision,
            )
        return self._identity_store

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                store=self.identity_store,
                mailer=self.mailer,
                settings=self.settings,
            )
        return self._auth_service

    @property
    def analyses(self) -> "IAnalysisService":
        """Get the analysis service instance."""
        if self._analysis_service is None:
            from modules.analysis.repository import AnalysisRepository
            from modules.analysis.service import AnalysisService
            self._analysis_service = AnalysisService(AnalysisRepository(self.database))
        return self._analysis_service

    async def ensure_indexes(self) -> None:
        """Create the indexes every repository relies on."""
        from modules.stats.repository import StatsRepository

        await self.identity_store.ensure_indexes()
        await StatsRepository(self.database).ensure_indexes()

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._identity_store = None
        self._stats_service = None
        self._auth_service = None
        self._analysis_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def init_container(
    settings: Settings,
    database: "AsyncIOMotorDatabase",
    mailer: "Optional[IMailer]" = None,
) -> ServiceContainer:
    """Build the container. Called once from the application lifespan."""
    global _container
    _container = ServiceContainer(settings, database, mailer)
    return _container


def get_container() -> ServiceContainer:
    """
    Get the service container.

    Raises:
        RuntimeError: If the application has not started up yet
    """
    if _container is None:
        raise RuntimeError("Service container not initialized. Call init_container() at startup.")
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_analysis_service() -> "IAnalysisService":
    """FastAPI dependency for analysis service."""
    return get_container().analyses
