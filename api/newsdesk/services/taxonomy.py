"""Category and tag persistence with restore-or-create semantics."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.errors import ConflictError, NotFoundError
from newsdesk.models.article import Article
from newsdesk.models.category import Category
from newsdesk.models.tag import Tag, article_tags
from newsdesk.services.slugs import slugify

logger = logging.getLogger(__name__)


class CategoryStore:
    """Categories, ordered for display."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self, include_admin_only: bool = True) -> list[Category]:
        query = select(Category).where(Category.deleted_at.is_(None))
        if not include_admin_only:
            query = query.where(Category.is_admin_only.is_(False))
        result = await self.db.execute(query.order_by(Category.display_order.asc(), Category.id.asc()))
        return list(result.scalars().all())

    async def get(self, category_id: int) -> Category | None:
        result = await self.db.execute(
            select(Category)
            .where(Category.id == category_id)
            .where(Category.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def require(self, category_id: int) -> Category:
        category = await self.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    async def _next_order(self) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Category.display_order), 0)).where(
                Category.deleted_at.is_(None)
            )
        )
        return result.scalar_one() + 1

    async def create(self, name: str, is_admin_only: bool = False, display_order: int = 0) -> Category:
        """
        Create a category, or bring back a soft-deleted one with the same slug.

        A non-positive ``display_order`` places the category last.
        """
        slug = slugify(name)
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        existing = result.scalar_one_or_none()

        if existing is not None and existing.deleted_at is None:
            raise ConflictError(f"Category '{slug}' already exists", slug=slug)

        order = display_order if display_order > 0 else await self._next_order()

        if existing is not None:
            logger.info("Restoring deleted category %s", slug)
            existing.deleted_at = None
            existing.name = name
            existing.is_admin_only = is_admin_only
            existing.display_order = order
            await self.db.flush()
            return existing

        category = Category(
            name=name,
            slug=slug,
            is_admin_only=is_admin_only,
            display_order=order,
        )
        self.db.add(category)
        await self.db.flush()
        return category

    async def update(
        self,
        category: Category,
        name: str | None = None,
        is_admin_only: bool | None = None,
        display_order: int | None = None,
    ) -> Category:
        if name:
            slug = slugify(name)
            result = await self.db.execute(
                select(Category.id).where(Category.slug == slug).where(Category.id != category.id)
            )
            if result.scalar_one_or_none() is not None:
                raise ConflictError(f"Category '{slug}' already exists", slug=slug)
            category.name = name
            category.slug = slug
        if is_admin_only is not None:
            category.is_admin_only = is_admin_only
        if display_order is not None:
            category.display_order = display_order
        await self.db.flush()
        return category

    async def article_count(self, category_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Article.id))
            .where(Article.category_id == category_id)
            .where(Article.deleted_at.is_(None))
        )
        return result.scalar_one()

    async def delete(self, category: Category) -> None:
        """Soft-delete a category that no live article uses."""
        in_use = await self.article_count(category.id)
        if in_use:
            raise ConflictError(
                "Cannot delete a category that still has articles",
                entity_id=category.id,
                article_count=in_use,
            )
        category.deleted_at = datetime.now(timezone.utc)
        await self.db.flush()


class TagStore:
    """Tags, ordered by name."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[Tag]:
        result = await self.db.execute(
            select(Tag).where(Tag.deleted_at.is_(None)).order_by(Tag.name.asc(), Tag.id.asc())
        )
        return list(result.scalars().all())

    async def get(self, tag_id: int) -> Tag | None:
        result = await self.db.execute(
            select(Tag).where(Tag.id == tag_id).where(Tag.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def require(self, tag_id: int) -> Tag:
        tag = await self.get(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def get_many(self, tag_ids: list[int]) -> list[Tag]:
        """Fetch live tags by id, preserving request order and dropping duplicates."""
        ids = list(dict.fromkeys(tag_ids))
        if not ids:
            return []
        result = await self.db.execute(
            select(Tag).where(Tag.id.in_(ids)).where(Tag.deleted_at.is_(None))
        )
        by_id = {tag.id: tag for tag in result.scalars().all()}
        return [by_id[i] for i in ids if i in by_id]

    async def create(self, name: str) -> Tag:
        """Create a tag, or bring back a soft-deleted one with the same slug."""
        slug = slugify(name)
        result = await self.db.execute(select(Tag).where(Tag.slug == slug))
        existing = result.scalar_one_or_none()

        if existing is not None and existing.deleted_at is None:
            raise ConflictError(f"Tag '{slug}' already exists", slug=slug)

        if existing is not None:
            logger.info("Restoring deleted tag %s", slug)
            existing.deleted_at = None
            existing.name = name
            await self.db.flush()
            return existing

        tag = Tag(name=name, slug=slug)
        self.db.add(tag)
        await self.db.flush()
        return tag

    async def update(self, tag: Tag, name: str | None = None) -> Tag:
        if name:
            slug = slugify(name)
            result = await self.db.execute(
                select(Tag.id).where(Tag.slug == slug).where(Tag.id != tag.id)
            )
            if result.scalar_one_or_none() is not None:
                raise ConflictError(f"Tag '{slug}' already exists", slug=slug)
            tag.name = name
            tag.slug = slug
        await self.db.flush()
        return tag

    async def article_count(self, tag_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Article.id))
            .join(article_tags, article_tags.c.article_id == Article.id)
            .where(article_tags.c.tag_id == tag_id)
            .where(Article.deleted_at.is_(None))
        )
        return result.scalar_one()

    async def delete(self, tag: Tag) -> None:
        """Soft-delete a tag that no live article uses."""
        in_use = await self.article_count(tag.id)
        if in_use:
            raise ConflictError(
                "Cannot delete a tag that is still attached to articles",
                entity_id=tag.id,
                article_count=in_use,
            )
        tag.deleted_at = datetime.now(timezone.utc)
        await self.db.flush()
