"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for MONGODB_URI (module-level so validators can use it).
VALID_MONGODB_URI_PREFIXES = (
    "mongodb://",
    "mongodb+srv://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # MongoDB: the database named by MFLIX_NS holds the users and sessions collections
    MONGODB_URI: str = "mongodb://localhost:27017"
    MFLIX_NS: str = "sample_mflix"
    MONGODB_TIMEOUT_MS: int = 5000

    # Write concern for account creation; 2 nodes by default, "majority" also accepted
    ADD_USER_WRITE_CONCERN_W: int | Literal["majority"] = 2

    @field_validator("MONGODB_URI")
    @classmethod
    def validate_mongodb_uri(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("MONGODB_URI must be set and non-empty")
        if not any(v.strip().startswith(prefix) for prefix in VALID_MONGODB_URI_PREFIXES):
            raise ValueError(
                "MONGODB_URI must be a MongoDB URL (e.g. mongodb:// or mongodb+srv://)"
            )
        return v.strip()

    @field_validator("MFLIX_NS")
    @classmethod
    def validate_mflix_ns(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("MFLIX_NS must be set and non-empty")
        if any(ch in v for ch in ' ./\\"$'):
            raise ValueError("MFLIX_NS must be a valid MongoDB database name")
        return v.strip()

    @field_validator("MONGODB_TIMEOUT_MS")
    @classmethod
    def validate_mongodb_timeout(cls, v: int) -> int:
        if v < 1 or v > 60000:
            raise ValueError("MONGODB_TIMEOUT_MS must be between 1 and 60000")
        return v

    @field_validator("ADD_USER_WRITE_CONCERN_W")
    @classmethod
    def validate_write_concern(cls, v: int | str) -> int | str:
        if isinstance(v, int) and v < 1:
            raise ValueError(
                "ADD_USER_WRITE_CONCERN_W must be at least 1 or 'majority'"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
