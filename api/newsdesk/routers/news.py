"""Public news router: listings, search, featured and syndication feeds."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.auth.dependencies import get_optional_user
from newsdesk.config import settings
from newsdesk.database import get_db
from newsdesk.errors import NotFoundError
from newsdesk.models.article import ArticleStatus
from newsdesk.models.user import User
from newsdesk.schemas.articles import (
    ArticleResponse,
    ListArticlesResponse,
    NewestArticlesResponse,
    article_response,
    syndicated_article,
)
from newsdesk.services.article_store import ArticleStore
from newsdesk.services.views import ViewCounter, get_view_counter

router = APIRouter(prefix="/api/v1/news", tags=["News"])

# Top-level site paths that can never be article slugs
RESERVED_SLUGS = frozenset({"news", "categories", "tags", "xinxun", "admin", "publisher", "health"})

FEATURED_MIN = 3
FEATURED_MAX = 5
NEWEST_LIMIT = 3


async def _list(
    db: AsyncSession,
    user: User | None,
    page: int,
    limit: int,
    q: str | None,
    category: str | None,
    article_status: ArticleStatus | None,
) -> ListArticlesResponse:
    # Anonymous readers only ever see published articles
    if user is None:
        article_status = ArticleStatus.PUBLISHED

    result = await ArticleStore(db).list_page(
        page=page,
        limit=limit,
        search=q,
        category_slug=category,
        status=article_status,
    )
    return ListArticlesResponse(
        items=[article_response(a) for a in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.get(
    "",
    response_model=ListArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_news(
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    q: str | None = Query(default=None, description="Search title and excerpt"),
    category: str | None = Query(default=None, description="Category slug"),
    article_status: ArticleStatus | None = Query(default=None, alias="status"),
) -> ListArticlesResponse:
    """
    List articles, newest first.

    Anonymous callers see published articles only; signed-in callers may
    filter by any status.
    """
    return await _list(db, user, page, limit, q, category, article_status)


@router.get(
    "/search",
    response_model=ListArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def search_news(
    q: str = Query(min_length=1),
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    category: str | None = Query(default=None),
) -> ListArticlesResponse:
    """Free-text search over title and excerpt."""
    return await _list(db, user, page, limit, q, category, None)


@router.get(
    "/featured",
    response_model=list[ArticleResponse],
    status_code=status.HTTP_200_OK,
)
async def featured_news(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(default=FEATURED_MIN),
) -> list[ArticleResponse]:
    """Most viewed published articles; ``limit`` is clamped to 3..5."""
    limit = max(FEATURED_MIN, min(FEATURED_MAX, limit))
    articles = await ArticleStore(db).top_viewed(limit)
    return [article_response(a) for a in articles]


@router.get(
    "/newest",
    response_model=NewestArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def newest_news(db: AsyncSession = Depends(get_db)) -> NewestArticlesResponse:
    """Latest published articles in the partner syndication format."""
    articles = await ArticleStore(db).newest(NEWEST_LIMIT)
    return NewestArticlesResponse(
        data=[syndicated_article(a, settings.public_site_url) for a in articles]
    )


@router.get(
    "/{slug}",
    response_model=ArticleResponse,
    status_code=status.HTTP_200_OK,
)
async def get_news(
    slug: str,
    db: AsyncSession = Depends(get_db),
    views: ViewCounter = Depends(get_view_counter),
) -> ArticleResponse:
    """
    Get a published article by slug.

    Each successful read schedules a background view increment; the
    returned count does not include it.
    """
    article = None
    if slug not in RESERVED_SLUGS:
        article = await ArticleStore(db).get_published_by_slug(slug)
    if article is None:
        raise NotFoundError("Article", slug)

    views.schedule(article.id)
    return article_response(article)
