"""FastAPI application entrypoint. No business logic; only wiring, startup and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accounts.api.v1 import router as v1_router
from accounts.core.config import settings
from accounts.core.database import create_client
from accounts.dao.users import UsersDAO

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the Mongo client and initialize the users DAO once, before traffic arrives."""
    client = create_client(settings)
    dao = UsersDAO(settings)
    result = dao.inject_db(client)
    if result.success:
        indexes = await dao.ensure_indexes()
        if not indexes.success:
            logger.warning("Index creation skipped: %s", indexes.error)
    else:
        logger.error("Users DAO unavailable: %s", result.error)
    app.state.mongo_client = client
    app.state.users_dao = dao
    try:
        yield
    finally:
        await client.close()


app = FastAPI(
    title="mflix accounts",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "mflix accounts"}
