"""
Create a user account (e.g. first admin). Run from project root:
  python -m accounts.scripts.create_user NAME EMAIL PASSWORD [--admin]
Example:
  python -m accounts.scripts.create_user "Ada Lovelace" ada@example.com your-secure-password --admin
"""
import argparse
import asyncio
import logging
import sys

from accounts.core.config import get_settings
from accounts.core.database import create_client
from accounts.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from accounts.dao.users import UsersDAO
from accounts.schemas.users import UserInfo

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


async def create_user(dao: UsersDAO, name: str, email: str, password: str, admin: bool) -> int:
    """Insert the account through the DAO; returns a process exit code."""
    added = await dao.add_user(
        UserInfo(name=name, email=email, password=hash_password(password))
    )
    if not added.success:
        print(added.error, file=sys.stderr)
        return 1
    if admin:
        granted = await dao.make_admin(email)
        if not granted.success:
            print(granted.error, file=sys.stderr)
            return 1
    role = "admin" if admin else "user"
    print(f"Created {role} '{email}'.")
    return 0


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = create_client(settings)
    try:
        dao = UsersDAO(settings)
        injected = dao.inject_db(client)
        if not injected.success:
            print(injected.error, file=sys.stderr)
            return 1
        return await create_user(dao, args.name, args.email, args.password, args.admin)
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an mflix user account.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Email address, unique per account")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("--admin", action="store_true", help="Flag the account as admin")
    args = parser.parse_args(argv)

    args.name = args.name.strip()
    args.email = args.email.strip()
    if not (NAME_MIN_LEN <= len(args.name) <= NAME_MAX_LEN):
        print("Invalid name length.", file=sys.stderr)
        return 1
    if not args.email or len(args.email) > EMAIL_MAX_LEN or "@" not in args.email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_run(args))
    except Exception as e:
        logger.exception("User creation failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
