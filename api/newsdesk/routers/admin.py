"""Admin router for article review, statistics and publisher management."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import require_admin
from newsdesk.auth.password import hash_password
from newsdesk.database import get_db
from newsdesk.errors import ConflictError, NotFoundError
from newsdesk.models.user import Role, User
from newsdesk.schemas.admin import (
    ApprovalResponse,
    ApproveRequest,
    ListPublishersResponse,
    PendingArticlesResponse,
    PendingCountsResponse,
    RewardResponse,
    StatisticsResponse,
    UpdatePublisherRequest,
)
from newsdesk.schemas.articles import ArticleResponse, article_response
from newsdesk.schemas.users import UserMeResponse, user_response
from newsdesk.services.identity_store import IdentityStore
from newsdesk.services.statistics import Statistics, collect_statistics
from newsdesk.services.workflow import ArticleWorkflow, get_workflow

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


def statistics_response(stats: Statistics) -> StatisticsResponse:
    return StatisticsResponse(
        total=stats.total,
        draft=stats.draft,
        pending=stats.pending,
        published=stats.published,
        rejected=stats.rejected,
        total_views=stats.total_views,
        top_articles=[article_response(a) for a in stats.top_articles],
        publishers=stats.publishers,
    )


# --- Article review ---


@router.get(
    "/articles/pending",
    response_model=PendingArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_pending_articles(
    admin: User = Depends(require_admin),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> PendingArticlesResponse:
    """New articles waiting for review, newest first."""
    articles = await workflow.list_pending("new")
    return PendingArticlesResponse(items=[article_response(a) for a in articles])


@router.get(
    "/articles/pending/revisions",
    response_model=PendingArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_pending_revisions(
    admin: User = Depends(require_admin),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> PendingArticlesResponse:
    """Edits to published articles waiting for review, newest first."""
    articles = await workflow.list_pending("revisions")
    return PendingArticlesResponse(items=[article_response(a) for a in articles])


@router.get(
    "/articles/pending/counts",
    response_model=PendingCountsResponse,
    status_code=status.HTTP_200_OK,
)
async def pending_counts(
    admin: User = Depends(require_admin),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> PendingCountsResponse:
    return PendingCountsResponse(**await workflow.pending_counts())


@router.post(
    "/articles/{article_id}/approve",
    response_model=ApprovalResponse,
    status_code=status.HTTP_200_OK,
)
async def approve_article(
    article_id: int,
    data: ApproveRequest | None = None,
    admin: User = Depends(require_admin),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> ApprovalResponse:
    """
    Approve a pending article or revision.

    The article stays published even when the reward payout fails; the
    failure is reported in ``reward.error``.
    """
    reward_amount = data.reward_amount if data else None
    result = await workflow.approve(article_id, reward_amount)
    reward = None
    if result.reward is not None:
        reward = RewardResponse(
            amount=result.reward.amount,
            success=result.reward.success,
            message=result.reward.message,
            error=result.reward.error,
        )
    return ApprovalResponse(
        article=article_response(result.article),
        reward=reward,
        merged_revision_id=result.merged_revision_id,
    )


@router.post(
    "/articles/{article_id}/reject",
    response_model=ArticleResponse,
    status_code=status.HTTP_200_OK,
)
async def reject_article(
    article_id: int,
    admin: User = Depends(require_admin),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> ArticleResponse:
    """Reject a pending article or revision."""
    article = await workflow.reject(article_id)
    return article_response(article)


# --- Statistics ---


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    status_code=status.HTTP_200_OK,
)
async def admin_statistics(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> StatisticsResponse:
    """Site-wide article counts, views and top articles."""
    return statistics_response(await collect_statistics(db))


# --- Publishers ---


async def _load_publisher(store: IdentityStore, publisher_id: int) -> User:
    user = await store.get(publisher_id)
    if user is None or user.role != Role.PUBLISHER:
        raise NotFoundError("Publisher", publisher_id)
    return user


@router.get(
    "/publishers",
    response_model=ListPublishersResponse,
    status_code=status.HTTP_200_OK,
)
async def list_publishers(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ListPublishersResponse:
    publishers = await IdentityStore(db).list_publishers()
    return ListPublishersResponse(items=[user_response(u) for u in publishers])


@router.get(
    "/publishers/{publisher_id}",
    response_model=UserMeResponse,
    status_code=status.HTTP_200_OK,
)
async def get_publisher(
    publisher_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserMeResponse:
    return user_response(await _load_publisher(IdentityStore(db), publisher_id))


@router.patch(
    "/publishers/{publisher_id}",
    response_model=UserMeResponse,
    status_code=status.HTTP_200_OK,
)
async def update_publisher(
    publisher_id: int,
    data: UpdatePublisherRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserMeResponse:
    """
    Update a publisher account.

    Requires admin role. Only the fields present in the request change.
    """
    store = IdentityStore(db)
    user = await _load_publisher(store, publisher_id)

    if data.username and data.username != user.username:
        if await store.username_taken(data.username, exclude_id=user.id):
            raise ConflictError("Username already exists", username=data.username)
        user.username = data.username
    if data.name:
        user.name = data.name
    if data.password:
        user.password_hash = hash_password(data.password)
    if data.status is not None:
        user.status = data.status
    if data.balance is not None:
        user.balance = data.balance

    await store.save(user)
    return user_response(user)


@router.delete(
    "/publishers/{publisher_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_publisher(
    publisher_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> None:
    """Soft-delete a publisher; their articles are kept."""
    store = IdentityStore(db)
    await store.soft_delete(await _load_publisher(store, publisher_id))
