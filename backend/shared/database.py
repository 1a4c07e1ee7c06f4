"""
Database client factory for MongoDB.

The process holds one Motor client. It is created exactly once, by
init_database() during application startup, and closed by close_database()
on shutdown. Components never reach for the client themselves; the
service container hands them the database handle.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .config import Settings

logger = logging.getLogger(__name__)

# Module-level client cache
_client: Optional[AsyncIOMotorClient] = None
_database_name: Optional[str] = None


def create_mongo_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Build a Motor client bounded by the configured timeouts.

    Motor connects lazily, so this does not perform any I/O.
    """
    if not settings.mongodb_uri:
        raise RuntimeError(
            "MongoDB configuration missing. Set the MONGODB_URI environment variable."
        )
    return AsyncIOMotorClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.db_timeout_ms,
        connectTimeoutMS=settings.db_timeout_ms,
        socketTimeoutMS=settings.db_timeout_ms,
        tz_aware=True,
    )


def init_database(settings: Settings) -> AsyncIOMotorDatabase:
    """
    Initialize the process-wide client (once) and return the database.

    Calling it again returns the same client's database.
    """
    global _client, _database_name

    if _client is None:
        _client = create_mongo_client(settings)
        _database_name = settings.mongodb_database
        logger.info("MongoDB client initialized for database %s", _database_name)

    return _client[_database_name]


def get_database() -> AsyncIOMotorDatabase:
    """
    Get the configured database.

    Raises:
        RuntimeError: If init_database() has not run yet
    """
    if _client is None:
        raise RuntimeError("Database not initialized. Call init_database() at startup.")
    return _client[_database_name]


async def ping_database(db: AsyncIOMotorDatabase) -> bool:
    """Check that the server answers within the configured timeout."""
    await db.command("ping")
    return True


def close_database() -> None:
    """Close the client. Safe to call when nothing was initialized."""
    global _client, _database_name

    if _client is not None:
        _client.close()
        logger.info("MongoDB client closed")
    _client = None
    _database_name = None


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    close_database()
