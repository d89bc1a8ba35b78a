#!/usr/bin/env python3
"""
Create an admin user.

Usage: python create_admin.py admin@example.com 'a-strong-password' --name Admin
"""

import argparse
import asyncio
import logging

from streamcms import database
from streamcms.exceptions import DuplicateResourceError
from streamcms.models.user import RoleEnum
from streamcms.services.auth_service import register_user

logger = logging.getLogger("streamcms.create_admin")


async def create_admin_user(email: str, password: str, name: str | None, role: str) -> int:
    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)

    async with database.AsyncSessionLocal() as db:
        try:
            user = await register_user(email, password, db, name=name, role=role)
        except DuplicateResourceError as e:
            logger.error(e.message)
            return 1

    logger.info(f"Created {role} user {user.email} (id={user.id})")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--role",
        default=RoleEnum.admin.value,
        choices=[RoleEnum.admin.value, RoleEnum.superadmin.value],
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    return asyncio.run(create_admin_user(args.email, args.password, args.name, args.role))


if __name__ == "__main__":
    raise SystemExit(main())
