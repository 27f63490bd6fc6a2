"""Articles router for submitting, editing and deleting articles."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import get_current_user
from newsdesk.database import get_db
from newsdesk.errors import AuthorizationError, NotFoundError
from newsdesk.models.article import Article, ArticleStatus
from newsdesk.models.user import User
from newsdesk.schemas.articles import (
    ArticleResponse,
    CreateArticleRequest,
    EditArticleResponse,
    ListArticlesResponse,
    UpdateArticleRequest,
    article_response,
)
from newsdesk.services.article_store import ArticleStore
from newsdesk.services.policy import can_edit_article
from newsdesk.services.workflow import ArticleDraft, ArticlePatch, ArticleWorkflow, get_workflow

router = APIRouter(prefix="/api/v1/articles", tags=["Articles"])


async def _load(db: AsyncSession, article_id: int) -> Article:
    article = await ArticleStore(db).get(article_id)
    if article is None:
        raise NotFoundError("Article", article_id)
    return article


@router.get(
    "",
    response_model=ListArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_my_articles(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    q: str | None = Query(default=None),
    article_status: ArticleStatus | None = Query(default=None, alias="status"),
) -> ListArticlesResponse:
    """
    List the caller's own articles in any status, including pending revisions.

    Admins see every author's articles.
    """
    result = await ArticleStore(db).list_page(
        page=page,
        limit=limit,
        search=q,
        status=article_status,
        author_id=None if user.is_admin else user.id,
    )
    return ListArticlesResponse(
        items=[article_response(a) for a in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.post(
    "",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    data: CreateArticleRequest,
    user: User = Depends(get_current_user),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> ArticleResponse:
    """
    Submit a new article.

    Publisher articles wait for approval; admin articles are created as
    drafts unless ``status`` is ``published``.
    """
    article = await workflow.submit(user, ArticleDraft(**data.model_dump()))
    return article_response(article)


@router.get(
    "/{article_id}",
    response_model=ArticleResponse,
    status_code=status.HTTP_200_OK,
)
async def get_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> ArticleResponse:
    """Get any article the caller may edit, whatever its status."""
    article = await _load(db, article_id)
    if not can_edit_article(user.role, article, user.id):
        raise AuthorizationError("You can only view your own articles", entity_id=article_id)
    return article_response(article)


@router.patch(
    "/{article_id}",
    response_model=EditArticleResponse,
    status_code=status.HTTP_200_OK,
    responses={201: {"description": "Revision created and awaiting approval"}},
)
async def update_article(
    article_id: int,
    data: UpdateArticleRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> EditArticleResponse:
    """
    Edit an article.

    When a publisher edits their own published article the change is stored
    as a pending revision (201) and the live article is left as is.
    """
    article = await _load(db, article_id)
    result = await workflow.edit(article, user, ArticlePatch(**data.model_dump()))
    if result.is_revision:
        response.status_code = status.HTTP_201_CREATED
    return EditArticleResponse(
        article=article_response(result.article),
        is_revision=result.is_revision,
    )


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    workflow: ArticleWorkflow = Depends(get_workflow),
) -> None:
    """Soft-delete an article the caller owns (admins: any article)."""
    article = await _load(db, article_id)
    await workflow.delete(article, user)
