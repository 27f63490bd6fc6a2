"""Fire-and-forget view counting."""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsdesk.database import AsyncSessionLocal
from newsdesk.services.article_store import ArticleStore

logger = logging.getLogger(__name__)


class ViewCounter:
    """
    Increments article view counts in the background.

    Each increment runs in its own task with its own session, so the request
    that triggered it never waits for or observes the write.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        # Strong references so pending tasks are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, article_id: int) -> None:
        task = asyncio.create_task(self._increment(article_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _increment(self, article_id: int) -> None:
        try:
            async with self.session_factory() as session:
                await ArticleStore(session).increment_views(article_id)
                await session.commit()
        except Exception:
            logger.debug("View increment failed for article %s", article_id, exc_info=True)

    async def drain(self) -> None:
        """Wait for in-flight increments, used on shutdown."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


_view_counter = ViewCounter(AsyncSessionLocal)


def get_view_counter() -> ViewCounter:
    """Dependency that provides the process-wide view counter."""
    return _view_counter
