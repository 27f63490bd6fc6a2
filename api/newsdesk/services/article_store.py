"""Persistence and read queries over articles."""

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsdesk.errors import ConflictError
from newsdesk.models.article import Article, ArticleStatus
from newsdesk.models.category import Category
from newsdesk.models.tag import article_tags


def _with_relations(query: Select) -> Select:
    return query.options(
        selectinload(Article.category),
        selectinload(Article.author),
        selectinload(Article.tags),
    )


@dataclass
class ArticlePage:
    """One page of a filtered article listing."""

    items: list[Article]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


class ArticleStore:
    """
    Queries over live articles.

    Every loader eagerly fetches category, author and tags, since lazy
    loading is not available on an async session.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _live(self) -> Select:
        return _with_relations(select(Article).where(Article.deleted_at.is_(None)))

    async def get(self, article_id: int, refresh: bool = False) -> Article | None:
        """Load one live article; ``refresh`` re-reads rows already in the session."""
        query = self._live().where(Article.id == article_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_published_by_slug(self, slug: str) -> Article | None:
        result = await self.db.execute(
            self._live()
            .where(Article.slug == slug)
            .where(Article.status == ArticleStatus.PUBLISHED)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category_slug: str | None = None,
        status: ArticleStatus | None = None,
        author_id: int | None = None,
    ) -> ArticlePage:
        """
        Paginated listing, newest first.

        Args:
            search: Case-insensitive substring match on title or excerpt
            category_slug: Restrict to one category
            status: Restrict to one status; ``None`` returns every status
            author_id: Restrict to one author
        """
        filters = [Article.deleted_at.is_(None)]
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Article.title.ilike(pattern), Article.excerpt.ilike(pattern)))
        if status is not None:
            filters.append(Article.status == status)
        if author_id is not None:
            filters.append(Article.author_id == author_id)

        count_query = select(func.count(Article.id)).where(*filters)
        query = self._live().where(*filters)
        if category_slug:
            count_query = count_query.join(Category, Category.id == Article.category_id).where(
                Category.slug == category_slug
            )
            query = query.join(Category, Category.id == Article.category_id).where(
                Category.slug == category_slug
            )

        total = (await self.db.execute(count_query)).scalar_one()

        offset = (page - 1) * limit
        result = await self.db.execute(
            query.order_by(Article.created_at.desc(), Article.id.desc()).limit(limit).offset(offset)
        )
        return ArticlePage(items=list(result.scalars().all()), total=total, page=page, limit=limit)

    async def top_viewed(self, limit: int, author_id: int | None = None) -> list[Article]:
        query = self._live().where(Article.status == ArticleStatus.PUBLISHED)
        if author_id is not None:
            query = query.where(Article.author_id == author_id)
        result = await self.db.execute(
            query.order_by(Article.views.desc(), Article.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def newest(self, limit: int) -> list[Article]:
        result = await self.db.execute(
            self._live()
            .where(Article.status == ArticleStatus.PUBLISHED)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def pending(self, revisions: bool) -> list[Article]:
        """Pending new submissions, or pending revisions when ``revisions`` is true."""
        revision_filter = Article.revision_of.is_not(None) if revisions else Article.revision_of.is_(None)
        result = await self.db.execute(
            self._live()
            .where(Article.status == ArticleStatus.PENDING)
            .where(revision_filter)
            .order_by(Article.created_at.desc(), Article.id.desc())
        )
        return list(result.scalars().all())

    async def count(
        self,
        status: ArticleStatus | None = None,
        author_id: int | None = None,
        revisions: bool | None = None,
    ) -> int:
        query = select(func.count(Article.id)).where(Article.deleted_at.is_(None))
        if status is not None:
            query = query.where(Article.status == status)
        if author_id is not None:
            query = query.where(Article.author_id == author_id)
        if revisions is True:
            query = query.where(Article.revision_of.is_not(None))
        elif revisions is False:
            query = query.where(Article.revision_of.is_(None))
        return (await self.db.execute(query)).scalar_one()

    async def total_views(self, author_id: int | None = None) -> int:
        query = select(func.coalesce(func.sum(Article.views), 0)).where(Article.deleted_at.is_(None))
        if author_id is not None:
            query = query.where(Article.author_id == author_id)
        return int((await self.db.execute(query)).scalar_one())

    async def _flush_slug(self, slug: str) -> None:
        """Flush pending writes; a live-slug clash rolls the transaction back."""
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(
                f"Slug '{slug}' is already in use; retry the request",
                slug=slug,
            ) from exc

    async def create(self, article: Article) -> Article:
        self.db.add(article)
        await self._flush_slug(article.slug)
        return article

    async def save(self, article: Article) -> Article:
        await self._flush_slug(article.slug)
        return article

    async def soft_delete(self, article: Article) -> None:
        article.deleted_at = datetime.now(timezone.utc)
        article.tags = []
        await self.db.flush()

    async def transition(
        self,
        article_id: int,
        from_status: ArticleStatus,
        **values,
    ) -> bool:
        """
        Conditionally update a live article still in ``from_status``.

        Returns False when no row matched, i.e. another request already moved
        the article out of ``from_status``.
        """
        result = await self.db.execute(
            update(Article)
            .where(Article.id == article_id)
            .where(Article.status == from_status)
            .where(Article.deleted_at.is_(None))
            .values(updated_at=datetime.now(timezone.utc), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_rewarded(self, article_id: int) -> bool:
        """Flip ``is_rewarded`` to true; it never goes back."""
        result = await self.db.execute(
            update(Article)
            .where(Article.id == article_id)
            .where(Article.is_rewarded.is_(False))
            .values(is_rewarded=True, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def increment_views(self, article_id: int, delta: int = 1) -> None:
        await self.db.execute(
            update(Article)
            .where(Article.id == article_id)
            .values(views=Article.views + delta)
            .execution_options(synchronize_session=False)
        )

    async def clear_tags(self, article_id: int) -> None:
        await self.db.execute(delete(article_tags).where(article_tags.c.article_id == article_id))

    async def discard_revisions(self, original_id: int) -> int:
        """Soft-delete every live revision pointing at ``original_id``."""
        result = await self.db.execute(
            update(Article)
            .where(Article.revision_of == original_id)
            .where(Article.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
