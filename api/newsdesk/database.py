"""Database engine, sessions and Alembic migrations."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from alembic.command import downgrade, upgrade
from alembic.config import Config
from newsdesk.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, **options: Any) -> AsyncEngine:
    """
    Create an async engine for ``url``.

    In-memory SQLite keeps one shared connection so every session sees the
    same database; other backends check connections before use.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        options.setdefault("poolclass", StaticPool)
        options.setdefault("connect_args", {"check_same_thread": False})
    elif "poolclass" not in options:
        options.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Objects stay readable after commit; flushes happen only when asked
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url)
AsyncSessionLocal = build_session_factory(engine)

Base = declarative_base()


def _alembic_config(db_url: str | None = None) -> Config:
    root = Path(__file__).resolve().parents[1]
    config = Config(str(root / "alembic.ini"))
    config.set_main_option("script_location", str(root / "alembic"))
    # Keep the application's logging setup when migrating at startup
    config.attributes["configure_logger"] = False
    if db_url:
        config.set_main_option("sqlalchemy.url", db_url)
    return config


def run_migrations(revision: str = "head", db_url: str | None = None) -> None:
    """Upgrade to ``revision``, or downgrade everything for ``"base"``."""
    config = _alembic_config(db_url)
    if revision == "base":
        downgrade(config, revision)
    else:
        upgrade(config, revision)


async def migrate_db(revision: str = "head", db_url: str | None = None) -> None:
    """Run migrations in a worker thread; Alembic's API is synchronous."""
    url = db_url or settings.database_url
    logger.info("Migrating database to %s", revision)
    await asyncio.to_thread(run_migrations, revision, url)


async def init_db(db_url: str | None = None) -> None:
    await migrate_db("head", db_url)


async def dispose_db() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Commits when the endpoint returns normally; any exception rolls back
    whatever the request wrote and propagates to the error handlers.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
