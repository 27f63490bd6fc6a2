"""Tests for background view counting."""

from sqlalchemy import select

from newsdesk.models import Article
from newsdesk.services.views import ViewCounter


async def _views(db_session, article_id: int) -> int:
    result = await db_session.execute(
        select(Article.views)
        .where(Article.id == article_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestViewCounter:
    """ViewCounter tests."""

    async def test_scheduled_increments_are_applied(
        self, db_session, session_factory, publisher_user, category, make_article
    ):
        article = await make_article(publisher_user, category, views=5)
        counter = ViewCounter(session_factory)

        counter.schedule(article.id)
        counter.schedule(article.id)
        await counter.drain()

        assert await _views(db_session, article.id) == 7

    async def test_missing_article_is_ignored(self, db_session, session_factory):
        counter = ViewCounter(session_factory)

        counter.schedule(999)
        await counter.drain()

        assert counter._tasks == set()
