"""Pydantic request/response schemas."""

from accounts.schemas.health import HealthResponse
from accounts.schemas.results import DAOResult, ErrorKind
from accounts.schemas.users import (
    SessionRecord,
    UpdateSummary,
    UserInfo,
    UserRecord,
)

__all__ = [
    "DAOResult",
    "ErrorKind",
    "HealthResponse",
    "SessionRecord",
    "UpdateSummary",
    "UserInfo",
    "UserRecord",
]
