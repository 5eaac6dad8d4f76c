"""Pydantic models for user and session documents."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserInfo(BaseModel):
    """Fields accepted when creating a user. The password is already hashed."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address; unique per user")
    password: str = Field(..., description="Password hash produced by the caller")


class UserRecord(BaseModel):
    """A document from the `users` collection (Mongo's `_id` is dropped)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    email: str
    password: str
    preferences: dict[str, Any] | None = None
    is_admin: bool | None = Field(default=None, alias="isAdmin")


class SessionRecord(BaseModel):
    """A document from the `sessions` collection, keyed by the user's email."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., description="Email of the session owner")
    jwt: str = Field(..., description="Opaque bearer token")


class UpdateSummary(BaseModel):
    """Counts reported by the store for a single-document update."""

    matched_count: int
    modified_count: int
    upserted_id: Any | None = None
