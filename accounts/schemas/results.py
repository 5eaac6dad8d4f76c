"""Uniform result shape returned by every DAO operation."""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Classification of a failed DAO operation."""

    NOT_INITIALIZED = "not_initialized"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    DRIVER = "driver"
    DELETION_UNCONFIRMED = "deletion_unconfirmed"
    MALFORMED_DOCUMENT = "malformed_document"


class DAOResult(BaseModel, Generic[T]):
    """
    Tagged success/error result.

    On success `value` carries the typed payload (None for operations with
    nothing to return, or for lookups that matched nothing). On failure
    `error` is a caller-safe message and `kind` says what went wrong.
    """

    success: bool = Field(..., description="True when the operation completed")
    value: T | None = Field(default=None, description="Payload on success")
    error: str | None = Field(default=None, description="Caller-safe error message")
    kind: ErrorKind | None = Field(default=None, description="Error classification")

    @classmethod
    def ok(cls, value: T | None = None) -> "DAOResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "DAOResult[T]":
        return cls(success=False, kind=kind, error=error)

    def as_response(self) -> dict[str, Any]:
        """Render as {"success": True} or {"error": message} for HTTP handlers."""
        if self.success:
            return {"success": True}
        return {"error": self.error}
