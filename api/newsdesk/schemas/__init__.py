"""Pydantic schemas for request/response validation."""

from newsdesk.schemas.articles import (
    ArticleResponse,
    CreateArticleRequest,
    EditArticleResponse,
    ListArticlesResponse,
    UpdateArticleRequest,
)
from newsdesk.schemas.auth import LoginRequest, PublisherLoginRequest, TokenResponse
from newsdesk.schemas.users import UpdateMeRequest, UserMeResponse

__all__ = [
    "ArticleResponse",
    "CreateArticleRequest",
    "EditArticleResponse",
    "ListArticlesResponse",
    "UpdateArticleRequest",
    "LoginRequest",
    "PublisherLoginRequest",
    "TokenResponse",
    "UpdateMeRequest",
    "UserMeResponse",
]
