"""Role-based access rules used by the article workflow."""

from newsdesk.models.article import Article
from newsdesk.models.category import Category
from newsdesk.models.user import Role


def can_assign_category(role: Role, category: Category) -> bool:
    """Admin-only categories may not be used by other roles."""
    return not (category.is_admin_only and role != Role.ADMIN)


def can_edit_article(role: Role, article: Article, acting_user_id: int) -> bool:
    """Admins edit anything; publishers only their own articles."""
    if role == Role.ADMIN:
        return True
    return article.author_id == acting_user_id


def can_bypass_approval(role: Role) -> bool:
    """Only admins publish without review."""
    return role == Role.ADMIN
