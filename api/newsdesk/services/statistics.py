"""Dashboard statistics for admins and publishers."""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.models.article import Article, ArticleStatus
from newsdesk.services.article_store import ArticleStore
from newsdesk.services.identity_store import IdentityStore

TOP_ARTICLES = 5


@dataclass
class Statistics:
    total: int
    draft: int
    pending: int
    published: int
    rejected: int
    total_views: int
    top_articles: list[Article] = field(default_factory=list)
    publishers: int | None = None


async def collect_statistics(db: AsyncSession, author_id: int | None = None) -> Statistics:
    """
    Article counts per status, total views and the most viewed published articles.

    With ``author_id`` the figures cover only that author's articles; without
    it they are global and include the number of publishers.
    """
    store = ArticleStore(db)
    counts = {s: await store.count(status=s, author_id=author_id) for s in ArticleStatus}

    stats = Statistics(
        total=sum(counts.values()),
        draft=counts[ArticleStatus.DRAFT],
        pending=counts[ArticleStatus.PENDING],
        published=counts[ArticleStatus.PUBLISHED],
        rejected=counts[ArticleStatus.REJECTED],
        total_views=await store.total_views(author_id=author_id),
        top_articles=await store.top_viewed(TOP_ARTICLES, author_id=author_id),
    )
    if author_id is None:
        stats.publishers = await IdentityStore(db).count_publishers()
    return stats
