"""Admin-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from newsdesk.schemas.articles import ArticleResponse
from newsdesk.schemas.users import UserMeResponse, validate_password, validate_username


class ApproveRequest(BaseModel):
    """Approve a pending article, optionally paying its author."""

    reward_amount: float | None = Field(default=None, ge=0)


class RewardResponse(BaseModel):
    amount: float
    success: bool
    message: str
    error: str | None


class ApprovalResponse(BaseModel):
    """Published article plus the outcome of any reward dispatch."""

    article: ArticleResponse
    reward: RewardResponse | None
    merged_revision_id: int | None


class PendingArticlesResponse(BaseModel):
    items: list[ArticleResponse]


class PendingCountsResponse(BaseModel):
    pending_new: int
    pending_revision: int


class ListPublishersResponse(BaseModel):
    """Response for GET /admin/publishers endpoint."""

    items: list[UserMeResponse]


class UpdatePublisherRequest(BaseModel):
    """Admin update of a publisher account."""

    username: str | None = None
    name: str | None = None
    password: str | None = None
    status: Literal["Active", "Suspend"] | None = None
    balance: float | None = Field(default=None, ge=0)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        return validate_username(v) if v is not None else None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        return validate_password(v) if v is not None else None


class StatisticsResponse(BaseModel):
    """Dashboard figures; ``publishers`` is only present for admins."""

    total: int
    draft: int
    pending: int
    published: int
    rejected: int
    total_views: int
    top_articles: list[ArticleResponse]
    publishers: int | None = None
