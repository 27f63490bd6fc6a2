"""Seed the admin account and default categories and tags."""

from __future__ import annotations

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.password import hash_password
from newsdesk.database import AsyncSessionLocal, init_db
from newsdesk.models.category import Category
from newsdesk.models.tag import Tag
from newsdesk.models.user import Role, User
from newsdesk.services.identity_store import IdentityStore
from newsdesk.services.slugs import slugify
from newsdesk.services.taxonomy import CategoryStore, TagStore

DEFAULT_CATEGORIES = ["Investasi", "Teknologi", "Ekonomi", "Update"]
DEFAULT_TAGS = ["Crypto", "Blockchain", "Trading", "Fintech"]


async def seed(session: AsyncSession, admin_username: str, admin_password: str) -> list[str]:
    """Create whatever is missing and return a line per created row."""
    created: list[str] = []

    identities = IdentityStore(session)
    if await identities.get_by_username(admin_username) is None:
        await identities.create(
            User(
                username=admin_username,
                name="Administrator",
                email=f"{admin_username}@xinxun.news",
                password_hash=hash_password(admin_password),
                role=Role.ADMIN,
            )
        )
        created.append(f"user {admin_username}")

    categories = CategoryStore(session)
    for order, name in enumerate(DEFAULT_CATEGORIES, start=1):
        exists = await session.execute(select(Category.id).where(Category.slug == slugify(name)))
        if exists.scalar_one_or_none() is None:
            await categories.create(name, display_order=order)
            created.append(f"category {name}")

    tags = TagStore(session)
    for name in DEFAULT_TAGS:
        exists = await session.execute(select(Tag.id).where(Tag.slug == slugify(name)))
        if exists.scalar_one_or_none() is None:
            await tags.create(name)
            created.append(f"tag {name}")

    await session.commit()
    return created


async def main(args: argparse.Namespace) -> int:
    if args.migrate:
        await init_db()

    async with AsyncSessionLocal() as session:
        created = await seed(session, args.admin_username, args.admin_password)

    if not created:
        print("Nothing to seed.")
    for line in created:
        print(f"Created {line}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed default Newsdesk data")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Upgrade the schema to head before seeding",
    )
    if len(sys.argv) == 1:
        print("Seeding with the default admin password; change it after first login.")
    raise SystemExit(asyncio.run(main(parser.parse_args())))
