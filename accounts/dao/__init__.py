"""Data-access objects over MongoDB collections."""

from accounts.dao.users import DAONotInitializedError, UsersDAO

__all__ = ["DAONotInitializedError", "UsersDAO"]
