"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of pinging MongoDB",
    )
    namespace: str = Field(description="Database holding the users and sessions collections")
    users_store: Literal["ready", "unavailable"] = Field(
        description="Whether the users DAO resolved its collections at startup",
    )
