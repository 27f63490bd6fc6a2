"""Fail if the database is behind Alembic head or drifts from the SQLAlchemy models."""

from __future__ import annotations

import argparse
import asyncio

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory

from newsdesk import models  # noqa: F401  # Ensure models are registered
from newsdesk.config import settings
from newsdesk.database import Base, _alembic_config, build_engine, migrate_db


def _inspect(connection) -> tuple[str | None, list[object]]:
    context = MigrationContext.configure(connection, opts={"compare_type": True})
    return context.get_current_revision(), compare_metadata(context, Base.metadata)


async def main(database_url: str, upgrade: bool) -> int:
    if upgrade:
        await migrate_db("head", database_url)

    head = ScriptDirectory.from_config(_alembic_config()).get_current_head()

    engine = build_engine(database_url)
    async with engine.connect() as conn:
        current, diffs = await conn.run_sync(_inspect)
    await engine.dispose()

    status = 0
    if current != head:
        print(f"Database is at revision {current}, head is {head}.")
        status = 1

    if diffs:
        print("Detected schema differences between models and database:")
        for diff in diffs:
            print(diff)
        status = 1

    if status == 0:
        print(f"Database at head ({head}); no schema differences detected.")
    return status


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument(
        "--upgrade",
        action="store_true",
        help="Upgrade to head before comparing (e.g. against a scratch database in CI)",
    )
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.database_url, args.upgrade)))
