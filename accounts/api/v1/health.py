"""Health check endpoint: MongoDB ping plus users DAO readiness."""

from fastapi import APIRouter, Depends, Request
from pymongo import AsyncMongoClient

from accounts.core.config import settings
from accounts.core.database import check_db_connected, get_client
from accounts.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
async def get_health(
    request: Request,
    client: AsyncMongoClient | None = Depends(get_client),
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if await check_db_connected(client) else "disconnected"
    dao = getattr(request.app.state, "users_dao", None)
    store_status = "ready" if dao is not None and dao.is_initialized else "unavailable"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        namespace=settings.MFLIX_NS,
        users_store=store_status,
    )
