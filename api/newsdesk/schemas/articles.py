"""Article-related Pydantic schemas."""

from pydantic import BaseModel, Field, field_validator

from newsdesk.models.article import Article, ArticleStatus


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


class CreateArticleRequest(BaseModel):
    """Request to submit a new article."""

    title: str
    content: str
    category_id: int
    excerpt: str = ""
    thumbnail: str = ""
    tag_ids: list[int] = Field(default_factory=list)
    status: ArticleStatus | None = None  # Honoured for admins only

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: ArticleStatus | None) -> ArticleStatus | None:
        if v is not None and v not in (ArticleStatus.DRAFT, ArticleStatus.PUBLISHED):
            raise ValueError("Status must be draft or published")
        return v


class UpdateArticleRequest(BaseModel):
    """Partial article update; omitted or empty fields are left unchanged."""

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    thumbnail: str | None = None
    category_id: int | None = None
    tag_ids: list[int] | None = None
    status: ArticleStatus | None = None


class CategoryRef(BaseModel):
    id: int
    name: str
    slug: str


class TagRef(BaseModel):
    id: int
    name: str
    slug: str


class AuthorRef(BaseModel):
    id: int
    username: str
    name: str


class ArticleResponse(BaseModel):
    """Full article response."""

    id: int
    title: str
    slug: str
    content: str
    excerpt: str
    thumbnail: str
    status: ArticleStatus
    views: int
    reward_amount: float
    is_rewarded: bool
    revision_of: int | None
    category: CategoryRef | None
    author: AuthorRef | None
    tags: list[TagRef]
    published_at: str | None
    created_at: str
    updated_at: str


class ListArticlesResponse(BaseModel):
    """Paginated article listing."""

    items: list[ArticleResponse]
    total: int
    page: int
    limit: int
    pages: int


class EditArticleResponse(BaseModel):
    """Result of an edit; ``is_revision`` means the change awaits approval."""

    article: ArticleResponse
    is_revision: bool


class SyndicatedArticle(BaseModel):
    """Article in the format consumed by partner sites."""

    title: str
    excerpt: str
    thumbnail: str
    categories: list[str]
    views: int
    href: str


class NewestArticlesResponse(BaseModel):
    success: bool = True
    message: str = "Successfully"
    data: list[SyndicatedArticle]


class UploadImageResponse(BaseModel):
    url: str
    path: str


def article_response(article: Article) -> ArticleResponse:
    """Build the response for an article loaded with its relations."""
    return ArticleResponse(
        id=article.id,
        title=article.title,
        slug=article.slug,
        content=article.content,
        excerpt=article.excerpt or "",
        thumbnail=article.thumbnail or "",
        status=article.status,
        views=article.views or 0,
        reward_amount=article.reward_amount or 0.0,
        is_rewarded=bool(article.is_rewarded),
        revision_of=article.revision_of,
        category=(
            CategoryRef(id=article.category.id, name=article.category.name, slug=article.category.slug)
            if article.category
            else None
        ),
        author=(
            AuthorRef(id=article.author.id, username=article.author.username, name=article.author.name)
            if article.author
            else None
        ),
        tags=[TagRef(id=t.id, name=t.name, slug=t.slug) for t in article.tags],
        published_at=_iso(article.published_at),
        created_at=article.created_at.isoformat(),
        updated_at=article.updated_at.isoformat(),
    )


def syndicated_article(article: Article, site_url: str) -> SyndicatedArticle:
    return SyndicatedArticle(
        title=article.title,
        excerpt=article.excerpt or "",
        thumbnail=article.thumbnail or "",
        categories=[article.category.name] if article.category else [],
        views=article.views or 0,
        href=f"{site_url.rstrip('/')}/{article.slug}",
    )
