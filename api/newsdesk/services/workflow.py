"""Article submission, revision and approval workflow."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.database import get_db
from newsdesk.errors import (
    AuthorizationError,
    ExternalServiceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from newsdesk.models.article import Article, ArticleStatus
from newsdesk.models.category import Category
from newsdesk.models.tag import Tag
from newsdesk.models.user import Role, User
from newsdesk.services.article_store import ArticleStore
from newsdesk.services.policy import can_assign_category, can_bypass_approval, can_edit_article
from newsdesk.services.rewards import RewardsClient, get_rewards_client
from newsdesk.services.slugs import unique_article_slug
from newsdesk.services.taxonomy import CategoryStore, TagStore

logger = logging.getLogger(__name__)

MAX_TITLE_WORDS = 100
MAX_EXCERPT_WORDS = 200

# Statuses an admin may set directly through an edit
EDITABLE_STATUSES = (ArticleStatus.DRAFT, ArticleStatus.PUBLISHED)

PendingKind = Literal["new", "revisions"]


@dataclass
class ArticleDraft:
    title: str
    content: str
    category_id: int
    excerpt: str = ""
    thumbnail: str = ""
    tag_ids: list[int] = field(default_factory=list)
    status: ArticleStatus | None = None


@dataclass
class ArticlePatch:
    """Partial update; ``None`` and empty strings leave a field unchanged."""

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    thumbnail: str | None = None
    category_id: int | None = None
    tag_ids: list[int] | None = None
    status: ArticleStatus | None = None


@dataclass
class EditResult:
    article: Article
    is_revision: bool


@dataclass
class RewardOutcome:
    amount: float
    success: bool
    message: str = ""
    error: str | None = None


@dataclass
class ApprovalResult:
    article: Article
    reward: RewardOutcome | None = None
    merged_revision_id: int | None = None


def word_count(text: str) -> int:
    return len(text.split())


def check_word_limits(title: str, excerpt: str) -> None:
    if not title or not title.strip():
        raise ValidationError("Title is required", field="title")
    if word_count(title) > MAX_TITLE_WORDS:
        raise ValidationError(
            f"Title must be at most {MAX_TITLE_WORDS} words",
            field="title",
            words=word_count(title),
        )
    if word_count(excerpt or "") > MAX_EXCERPT_WORDS:
        raise ValidationError(
            f"Excerpt must be at most {MAX_EXCERPT_WORDS} words",
            field="excerpt",
            words=word_count(excerpt),
        )


def _given(value):
    return value is not None and value != ""


class ArticleWorkflow:
    """
    State machine over article statuses.

    New publisher articles start ``pending`` and reach ``published`` only
    through :meth:`approve`. Edits a publisher makes to their own published
    article are stored as a separate pending revision and merged into the
    original on approval. Admin articles start ``draft`` (or ``published``
    when requested) and never wait for review.

    Rewards are dispatched only after the publish has been committed, and
    ``is_rewarded`` is set only when the rewards API confirms success.
    """

    def __init__(self, db: AsyncSession, rewards: RewardsClient):
        self.db = db
        self.rewards = rewards
        self.articles = ArticleStore(db)
        self.categories = CategoryStore(db)
        self.tags = TagStore(db)

    async def _category_for(self, role: Role, category_id: int) -> Category:
        category = await self.categories.get(category_id)
        if category is None:
            raise ValidationError(
                f"Category '{category_id}' does not exist",
                field="category_id",
                category_id=category_id,
            )
        if not can_assign_category(role, category):
            raise AuthorizationError(
                f"Category '{category.name}' is reserved for admins",
                category_id=category.id,
            )
        return category

    async def _tags_for(self, tag_ids: list[int]) -> list[Tag]:
        tags = await self.tags.get_many(tag_ids)
        missing = sorted(set(tag_ids) - {tag.id for tag in tags})
        if missing:
            raise ValidationError("Unknown tag ids", field="tag_ids", missing=missing)
        return tags

    async def submit(self, author: User, draft: ArticleDraft) -> Article:
        """
        Create a new article.

        Raises:
            ValidationError: Word limits exceeded, unknown category or tags
            AuthorizationError: Publisher using an admin-only category
        """
        check_word_limits(draft.title, draft.excerpt)
        if not draft.content or not draft.content.strip():
            raise ValidationError("Content is required", field="content")
        category = await self._category_for(author.role, draft.category_id)
        tags = await self._tags_for(draft.tag_ids)

        if can_bypass_approval(author.role):
            status = (
                ArticleStatus.PUBLISHED
                if draft.status == ArticleStatus.PUBLISHED
                else ArticleStatus.DRAFT
            )
        else:
            status = ArticleStatus.PENDING

        article = Article(
            title=draft.title,
            slug=await unique_article_slug(self.db, draft.title),
            content=draft.content,
            excerpt=draft.excerpt or "",
            thumbnail=draft.thumbnail or "",
            category_id=category.id,
            author_id=author.id,
            status=status,
            published_at=datetime.now(timezone.utc) if status == ArticleStatus.PUBLISHED else None,
            tags=tags,
        )
        await self.articles.create(article)
        logger.info(
            "Article %s submitted by user %s as %s", article.id, author.id, status.value
        )
        return await self.articles.get(article.id, refresh=True)

    async def edit(self, article: Article, editor: User, patch: ArticlePatch) -> EditResult:
        """
        Apply ``patch`` to ``article``.

        A publisher editing their own published article gets a new pending
        revision instead; the live article stays untouched until approval.

        Raises:
            AuthorizationError: Not the author, or a non-admin setting status
            InvalidStateError: The article was rejected
            ValidationError: Bad status or field values
        """
        if not can_edit_article(editor.role, article, editor.id):
            raise AuthorizationError("You can only edit your own articles", entity_id=article.id)
        if patch.status is not None and not can_bypass_approval(editor.role):
            raise AuthorizationError("Only admins can change article status", entity_id=article.id)
        if article.status == ArticleStatus.REJECTED:
            raise InvalidStateError(
                "Rejected articles cannot be edited; submit a new article instead",
                entity_id=article.id,
                actual=article.status.value,
            )

        if (
            editor.role == Role.PUBLISHER
            and article.author_id == editor.id
            and article.status == ArticleStatus.PUBLISHED
        ):
            revision = await self._create_revision(article, editor, patch)
            return EditResult(article=revision, is_revision=True)

        return EditResult(article=await self._edit_in_place(article, editor, patch), is_revision=False)

    async def _create_revision(self, original: Article, editor: User, patch: ArticlePatch) -> Article:
        title = patch.title if _given(patch.title) else original.title
        excerpt = patch.excerpt if _given(patch.excerpt) else original.excerpt
        check_word_limits(title, excerpt)

        category_id = patch.category_id if _given(patch.category_id) else original.category_id
        category = await self._category_for(editor.role, category_id)
        if patch.tag_ids is not None:
            tags = await self._tags_for(patch.tag_ids)
        else:
            tags = list(original.tags)

        revision = Article(
            title=title,
            slug=await unique_article_slug(self.db, title),
            content=patch.content if _given(patch.content) else original.content,
            excerpt=excerpt,
            thumbnail=patch.thumbnail if _given(patch.thumbnail) else original.thumbnail,
            category_id=category.id,
            author_id=original.author_id,
            status=ArticleStatus.PENDING,
            revision_of=original.id,
            tags=tags,
        )
        await self.articles.create(revision)
        logger.info("Revision %s created for article %s", revision.id, original.id)
        return await self.articles.get(revision.id, refresh=True)

    async def _edit_in_place(self, article: Article, editor: User, patch: ArticlePatch) -> Article:
        title = patch.title if _given(patch.title) else article.title
        excerpt = patch.excerpt if _given(patch.excerpt) else article.excerpt
        check_word_limits(title, excerpt)

        if _given(patch.category_id) and patch.category_id != article.category_id:
            category = await self._category_for(editor.role, patch.category_id)
            article.category_id = category.id
        if patch.tag_ids is not None:
            article.tags = await self._tags_for(patch.tag_ids)

        if title != article.title:
            article.slug = await unique_article_slug(self.db, title, exclude_ids=(article.id,))
            article.title = title
        article.excerpt = excerpt
        if _given(patch.content):
            article.content = patch.content
        if _given(patch.thumbnail):
            article.thumbnail = patch.thumbnail

        if patch.status is not None:
            if patch.status not in EDITABLE_STATUSES:
                raise ValidationError(
                    "Status can only be set to draft or published",
                    field="status",
                    actual=patch.status.value,
                )
            article.status = patch.status
            if patch.status == ArticleStatus.PUBLISHED and article.published_at is None:
                article.published_at = datetime.now(timezone.utc)

        await self.articles.save(article)
        return await self.articles.get(article.id, refresh=True)

    async def _load_pending(self, article_id: int) -> Article:
        article = await self.articles.get(article_id)
        if article is None:
            raise NotFoundError("Article", article_id)
        if article.status != ArticleStatus.PENDING:
            raise InvalidStateError(
                f"Article is {article.status.value}, not pending",
                entity_id=article.id,
                expected=ArticleStatus.PENDING.value,
                actual=article.status.value,
            )
        return article

    def _not_pending(self, article_id: int) -> InvalidStateError:
        return InvalidStateError(
            "Article is no longer pending",
            entity_id=article_id,
            expected=ArticleStatus.PENDING.value,
        )

    async def approve(self, article_id: int, reward_amount: float | None = None) -> ApprovalResult:
        """
        Publish a pending article, or merge a pending revision into its original.

        Args:
            article_id: Pending article or revision
            reward_amount: Reward to record and pay out; revisions pay only
                when this is given explicitly

        Raises:
            NotFoundError: Article, author or original missing
            InvalidStateError: Not pending, including losing a concurrent approve
            ValidationError: Author is not a publisher or has no external identity
        """
        if reward_amount is not None and reward_amount < 0:
            raise ValidationError("Reward amount cannot be negative", field="reward_amount")

        article = await self._load_pending(article_id)

        author = article.author
        if author is None or author.deleted_at is not None:
            raise NotFoundError("User", article.author_id)
        if author.role != Role.PUBLISHER:
            raise ValidationError(
                "Only publisher articles can be approved",
                field="author_id",
                author_id=author.id,
            )
        if author.external_id is None:
            raise ValidationError(
                "Author has no external account for rewards",
                field="author_id",
                author_id=author.id,
            )

        if article.is_revision:
            return await self._merge_revision(article, author, reward_amount)

        amount = reward_amount or 0.0
        published = await self.articles.transition(
            article.id,
            ArticleStatus.PENDING,
            status=ArticleStatus.PUBLISHED,
            published_at=article.published_at or datetime.now(timezone.utc),
            reward_amount=amount,
        )
        if not published:
            raise self._not_pending(article.id)
        await self.db.commit()
        logger.info("Article %s approved", article.id)

        reward = None
        if amount > 0 and not article.is_rewarded:
            reward = await self._dispatch_reward(article.id, author, amount)

        return ApprovalResult(
            article=await self.articles.get(article.id, refresh=True),
            reward=reward,
        )

    async def _merge_revision(
        self,
        revision: Article,
        author: User,
        reward_amount: float | None,
    ) -> ApprovalResult:
        original = await self.articles.get(revision.revision_of)
        if original is None:
            raise NotFoundError("Article", revision.revision_of)

        slug = original.slug
        if revision.title != original.title:
            slug = await unique_article_slug(
                self.db, revision.title, exclude_ids=(original.id, revision.id)
            )

        # Retire the revision first so its slug is free for the original
        retired = await self.articles.transition(
            revision.id,
            ArticleStatus.PENDING,
            deleted_at=datetime.now(timezone.utc),
        )
        if not retired:
            raise self._not_pending(revision.id)
        await self.articles.clear_tags(revision.id)

        original.title = revision.title
        original.slug = slug
        original.content = revision.content
        original.excerpt = revision.excerpt
        original.thumbnail = revision.thumbnail
        original.category_id = revision.category_id
        original.tags = list(revision.tags)
        original.status = ArticleStatus.PUBLISHED
        original.published_at = datetime.now(timezone.utc)
        if reward_amount:
            original.reward_amount = reward_amount
        await self.articles.save(original)
        await self.db.commit()
        logger.info("Revision %s merged into article %s", revision.id, original.id)

        reward = None
        if reward_amount and reward_amount > 0 and not original.is_rewarded:
            reward = await self._dispatch_reward(original.id, author, reward_amount)

        return ApprovalResult(
            article=await self.articles.get(original.id, refresh=True),
            reward=reward,
            merged_revision_id=revision.id,
        )

    async def _dispatch_reward(self, article_id: int, author: User, amount: float) -> RewardOutcome:
        try:
            receipt = await self.rewards.send_reward(author.external_id, amount)
        except ExternalServiceError as exc:
            logger.warning("Reward for article %s failed: %s", article_id, exc.message)
            return RewardOutcome(amount=amount, success=False, error=exc.message)

        if not receipt.success:
            logger.warning("Reward for article %s declined: %s", article_id, receipt.message)
            return RewardOutcome(
                amount=amount,
                success=False,
                message=receipt.message,
                error=receipt.message or "Reward was not accepted",
            )

        await self.articles.mark_rewarded(article_id)
        await self.db.commit()
        logger.info("Reward of %s paid for article %s", amount, article_id)
        return RewardOutcome(amount=amount, success=True, message=receipt.message)

    async def reject(self, article_id: int) -> Article:
        """
        Reject a pending article or revision.

        Raises:
            NotFoundError: Article missing
            InvalidStateError: Not pending
        """
        article = await self._load_pending(article_id)
        rejected = await self.articles.transition(
            article.id,
            ArticleStatus.PENDING,
            status=ArticleStatus.REJECTED,
        )
        if not rejected:
            raise self._not_pending(article.id)
        logger.info("Article %s rejected", article.id)
        return await self.articles.get(article.id, refresh=True)

    async def list_pending(self, kind: PendingKind = "new") -> list[Article]:
        return await self.articles.pending(revisions=kind == "revisions")

    async def pending_counts(self) -> dict[str, int]:
        return {
            "pending_new": await self.articles.count(status=ArticleStatus.PENDING, revisions=False),
            "pending_revision": await self.articles.count(
                status=ArticleStatus.PENDING, revisions=True
            ),
        }

    async def delete(self, article: Article, actor: User) -> None:
        """Soft-delete an article together with any revisions still pointing at it."""
        if not can_edit_article(actor.role, article, actor.id):
            raise AuthorizationError("You can only delete your own articles", entity_id=article.id)
        await self.articles.soft_delete(article)
        discarded = await self.articles.discard_revisions(article.id)
        logger.info(
            "Article %s deleted by user %s (%d revisions discarded)", article.id, actor.id, discarded
        )


def get_workflow(
    db: AsyncSession = Depends(get_db),
    rewards: RewardsClient = Depends(get_rewards_client),
) -> ArticleWorkflow:
    """Dependency that provides a workflow bound to the request session."""
    return ArticleWorkflow(db, rewards)
