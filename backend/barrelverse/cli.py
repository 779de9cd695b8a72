"""
Barrel + Verse Backend — Admin Command Line
=============================================

No HTTP route can grant admin rights, so the first admin is created here,
against whatever storage DATABASE_URL selects:

    python -m barrelverse.cli create-admin --email owner@example.com --name "Owner"

The password is prompted for when --password is omitted. An existing
account with that email is promoted instead of duplicated.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError as SchemaValidationError

from barrelverse.config import settings
from barrelverse.schemas.user import NewUser, RegisterRequest
from barrelverse.security import hash_password
from barrelverse.storage import Storage, create_storage

logger = logging.getLogger("barrelverse.cli")


async def create_admin(storage: Storage, email: str, name: str, password: str) -> str:
    """
    Create an admin account, or promote the existing account with `email`.

    Returns:
        The admin user's id.

    Raises:
        pydantic.ValidationError: malformed email, short password or empty name
    """
    payload = RegisterRequest(email=email, password=password, name=name)
    existing = await storage.get_user_by_email(payload.email)
    if existing is not None:
        await storage.set_user_admin(existing.id, True)
        logger.info("Promoted existing user %s to admin", existing.id)
        return existing.id

    user = await storage.create_user(
        NewUser(
            email=payload.email,
            password=await hash_password(payload.password),
            name=payload.name,
        ),
        is_admin=True,
    )
    logger.info("Created admin user %s", user.id)
    return user.id


async def _run_create_admin(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Admin password: ")
    storage = create_storage(settings)
    try:
        user_id = await create_admin(storage, args.email, args.name, password)
    except SchemaValidationError as e:
        for err in e.errors():
            print(f"error: {'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 2
    finally:
        await storage.close()
    if storage.kind == "memory":
        print("warning: DATABASE_URL is not set; this admin only existed in memory", file=sys.stderr)
    print(user_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="barrelverse", description="Barrel + Verse admin tasks")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create-admin", help="create or promote an admin account")
    create.add_argument("--email", required=True)
    create.add_argument("--name", required=True)
    create.add_argument("--password", help="prompted for when omitted")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    if args.command == "create-admin":
        return asyncio.run(_run_create_admin(args))
    return 1


if __name__ == "__main__":
    sys.exit(main())
