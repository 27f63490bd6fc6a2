"""Database models for the Newsdesk API."""

from newsdesk.models.article import Article, ArticleStatus
from newsdesk.models.category import Category
from newsdesk.models.tag import Tag, article_tags
from newsdesk.models.user import Role, User

__all__ = [
    "Article",
    "ArticleStatus",
    "Category",
    "Tag",
    "article_tags",
    "Role",
    "User",
]
