"""Core app configuration and database."""

from accounts.core.config import get_settings, settings
from accounts.core.database import get_users_dao

__all__ = ["get_settings", "settings", "get_users_dao"]
