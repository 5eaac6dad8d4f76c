"""
Data access for user accounts and their session tokens.

Two collections live in the database named by MFLIX_NS:

  users     {name, email, password, preferences?, isAdmin?}   unique on email
  sessions  {user_id, jwt}                                     user_id is the user's email

Every operation issues its driver calls one at a time and converts failures
into a DAOResult; nothing raised by the driver reaches the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import WriteConcern
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from accounts.core.config import get_settings
from accounts.schemas.results import DAOResult, ErrorKind
from accounts.schemas.users import SessionRecord, UpdateSummary, UserInfo, UserRecord

if TYPE_CHECKING:
    from pymongo import AsyncMongoClient
    from pymongo.asynchronous.collection import AsyncCollection
    from pymongo.results import UpdateResult

    from accounts.core.config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
SESSIONS_COLLECTION = "sessions"

DUPLICATE_EMAIL_MESSAGE = "A user with the given email already exists."
USER_NOT_FOUND_MESSAGE = "No user found with that email"
DELETION_UNSUCCESSFUL_MESSAGE = "Deletion unsuccessful"
NOT_INITIALIZED_MESSAGE = "UsersDAO is not initialized; call inject_db() at startup."


class DAONotInitializedError(Exception):
    """Raised when an operation runs before inject_db() resolved both collections."""

    def __init__(self, message: str = NOT_INITIALIZED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


def _summarize(result: UpdateResult) -> UpdateSummary:
    return UpdateSummary(
        matched_count=result.matched_count,
        modified_count=result.modified_count,
        upserted_id=result.upserted_id,
    )


class UsersDAO:
    """Façade over the `users` and `sessions` collections."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._users: AsyncCollection | None = None
        self._sessions: AsyncCollection | None = None

    @property
    def is_initialized(self) -> bool:
        return self._users is not None and self._sessions is not None

    def inject_db(self, client: AsyncMongoClient, db_name: str | None = None) -> DAOResult[None]:
        """
        Resolve both collection handles from the client. Idempotent: once both
        handles are held, later calls return success without re-resolving.
        On failure the handles stay unset and the error is logged.
        """
        if self.is_initialized:
            return DAOResult[None].ok()
        name = db_name or self._settings.MFLIX_NS
        try:
            db = client.get_database(name)
            users = db.get_collection(USERS_COLLECTION)
            sessions = db.get_collection(SESSIONS_COLLECTION)
        except Exception as e:
            logger.error("Unable to establish collection handles in UsersDAO: %s", e)
            return DAOResult[None].fail(
                ErrorKind.NOT_INITIALIZED,
                "Unable to establish collection handles.",
            )
        self._users = users
        self._sessions = sessions
        logger.info("UsersDAO initialized against database %s", name)
        return DAOResult[None].ok()

    def _collections(self) -> tuple[AsyncCollection, AsyncCollection]:
        if self._users is None or self._sessions is None:
            raise DAONotInitializedError()
        return self._users, self._sessions

    @staticmethod
    def _driver_failure(action: str, e: Exception) -> tuple[ErrorKind, str]:
        logger.error("Error occurred while %s: %s", action, e, exc_info=e)
        return ErrorKind.DRIVER, f"Error occurred while {action}."

    @staticmethod
    def _malformed(collection: str, e: ValidationError) -> tuple[ErrorKind, str]:
        fields = sorted(".".join(str(part) for part in err["loc"]) for err in e.errors())
        logger.error("Malformed document in %s: invalid fields %s", collection, fields)
        return ErrorKind.MALFORMED_DOCUMENT, f"Stored {collection} document is malformed."

    async def ensure_indexes(self) -> DAOResult[None]:
        """Create the unique indexes on users.email and sessions.user_id."""
        try:
            users, sessions = self._collections()
            await users.create_index("email", unique=True)
            await sessions.create_index("user_id", unique=True)
            return DAOResult[None].ok()
        except DAONotInitializedError as e:
            return DAOResult[None].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[None].fail(*self._driver_failure("creating indexes", e))

    async def get_user(self, email: str) -> DAOResult[UserRecord]:
        """Find a user by email. value is None when no user matches."""
        try:
            users, _ = self._collections()
            doc = await users.find_one({"email": email})
        except DAONotInitializedError as e:
            return DAOResult[UserRecord].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[UserRecord].fail(*self._driver_failure("retrieving user", e))
        if doc is None:
            return DAOResult[UserRecord].ok(None)
        try:
            return DAOResult[UserRecord].ok(UserRecord.model_validate(doc))
        except ValidationError as e:
            return DAOResult[UserRecord].fail(*self._malformed(USERS_COLLECTION, e))

    async def add_user(self, user_info: UserInfo) -> DAOResult[None]:
        """
        Insert a new user with name, email and password only.

        The write waits for acknowledgment from ADD_USER_WRITE_CONCERN_W nodes.
        A unique-index violation on email is reported as a duplicate.
        """
        document = {
            "name": user_info.name,
            "email": user_info.email,
            "password": user_info.password,
        }
        try:
            users, _ = self._collections()
            durable = users.with_options(
                write_concern=WriteConcern(w=self._settings.ADD_USER_WRITE_CONCERN_W)
            )
            await durable.insert_one(document)
            return DAOResult[None].ok()
        except DAONotInitializedError as e:
            return DAOResult[None].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except DuplicateKeyError:
            return DAOResult[None].fail(ErrorKind.DUPLICATE, DUPLICATE_EMAIL_MESSAGE)
        except PyMongoError as e:
            return DAOResult[None].fail(*self._driver_failure("adding new user", e))

    async def login_user(self, email: str, jwt: str) -> DAOResult[None]:
        """Create or replace the session for email with the given token."""
        try:
            _, sessions = self._collections()
            await sessions.update_one(
                {"user_id": email},
                {"$set": {"jwt": jwt}},
                upsert=True,
            )
            return DAOResult[None].ok()
        except DAONotInitializedError as e:
            return DAOResult[None].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[None].fail(*self._driver_failure("logging in user", e))

    async def logout_user(self, email: str) -> DAOResult[None]:
        """Remove the session for email. Succeeds when there was none."""
        try:
            _, sessions = self._collections()
            await sessions.delete_one({"user_id": email})
            return DAOResult[None].ok()
        except DAONotInitializedError as e:
            return DAOResult[None].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[None].fail(*self._driver_failure("logging out user", e))

    async def get_user_session(self, email: str) -> DAOResult[SessionRecord]:
        """
        Find the session for email. A missing session is a success with
        value None; a driver failure is an error result.
        """
        try:
            _, sessions = self._collections()
            doc = await sessions.find_one({"user_id": email})
        except DAONotInitializedError as e:
            return DAOResult[SessionRecord].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[SessionRecord].fail(
                *self._driver_failure("retrieving user session", e)
            )
        if doc is None:
            return DAOResult[SessionRecord].ok(None)
        try:
            return DAOResult[SessionRecord].ok(SessionRecord.model_validate(doc))
        except ValidationError as e:
            return DAOResult[SessionRecord].fail(*self._malformed(SESSIONS_COLLECTION, e))

    async def delete_user(self, email: str) -> DAOResult[None]:
        """
        Delete the user and their session, then read both back. Not atomic:
        the user may be gone while the session survives.
        """
        try:
            users, sessions = self._collections()
            await users.delete_one({"email": email})
            await sessions.delete_one({"user_id": email})
        except DAONotInitializedError as e:
            return DAOResult[None].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[None].fail(*self._driver_failure("deleting user", e))

        user = await self.get_user(email)
        if not user.success:
            return DAOResult[None].fail(user.kind, user.error)
        session = await self.get_user_session(email)
        if not session.success:
            return DAOResult[None].fail(session.kind, session.error)
        if user.value is not None or session.value is not None:
            logger.error(
                "Deletion unsuccessful for %s: user_present=%s session_present=%s",
                email,
                user.value is not None,
                session.value is not None,
            )
            return DAOResult[None].fail(
                ErrorKind.DELETION_UNCONFIRMED, DELETION_UNSUCCESSFUL_MESSAGE
            )
        return DAOResult[None].ok()

    async def update_preferences(
        self,
        email: str,
        preferences: dict[str, Any] | None = None,
    ) -> DAOResult[UpdateSummary]:
        """Replace (not merge) the user's preferences. None stores an empty mapping."""
        preferences = preferences or {}
        try:
            users, _ = self._collections()
            result = await users.update_one(
                {"email": email},
                {"$set": {"preferences": preferences}},
            )
        except DAONotInitializedError as e:
            return DAOResult[UpdateSummary].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[UpdateSummary].fail(
                *self._driver_failure("updating this user's preferences", e)
            )
        if result.matched_count == 0:
            return DAOResult[UpdateSummary].fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND_MESSAGE)
        return DAOResult[UpdateSummary].ok(_summarize(result))

    async def check_admin(self, email: str) -> DAOResult[bool]:
        """Return the user's isAdmin flag, False when the flag is absent."""
        user = await self.get_user(email)
        if not user.success:
            return DAOResult[bool].fail(user.kind, user.error)
        if user.value is None:
            return DAOResult[bool].fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND_MESSAGE)
        return DAOResult[bool].ok(bool(user.value.is_admin))

    async def make_admin(self, email: str) -> DAOResult[UpdateSummary]:
        """Set isAdmin on the user. matched_count is 0 when no user has that email."""
        try:
            users, _ = self._collections()
            result = await users.update_one(
                {"email": email},
                {"$set": {"isAdmin": True}},
            )
        except DAONotInitializedError as e:
            return DAOResult[UpdateSummary].fail(ErrorKind.NOT_INITIALIZED, e.message)
        except PyMongoError as e:
            return DAOResult[UpdateSummary].fail(
                *self._driver_failure("granting admin rights", e)
            )
        return DAOResult[UpdateSummary].ok(_summarize(result))
