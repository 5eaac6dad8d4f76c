"""MongoDB client construction and request-scoped access to the users DAO."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, Request, status
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from accounts.core.config import Settings, settings as default_settings

if TYPE_CHECKING:
    from accounts.dao.users import UsersDAO

logger = logging.getLogger(__name__)


def create_client(settings: Settings = default_settings) -> AsyncMongoClient:
    """Build the process-wide client. The driver owns pooling and reconnects."""
    return AsyncMongoClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
    )


async def check_db_connected(client: AsyncMongoClient | None) -> bool:
    """Run a ping to verify the database is reachable."""
    if client is None:
        return False
    try:
        await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("Database ping failed: %s", e)
        return False


def get_client(request: Request) -> AsyncMongoClient | None:
    """Dependency that returns the client created at startup, if any."""
    return getattr(request.app.state, "mongo_client", None)


def get_users_dao(request: Request) -> UsersDAO:
    """Dependency that returns the DAO initialized at startup. Raises 503 if it is not ready."""
    dao: UsersDAO | None = getattr(request.app.state, "users_dao", None)
    if dao is None or not dao.is_initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User store is not initialized",
        )
    return dao
