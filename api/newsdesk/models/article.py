"""Article model and its publication status."""

import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from newsdesk.database import Base
from newsdesk.models.mixins import SoftDeleteMixin, TimestampMixin
from newsdesk.models.tag import Tag, article_tags


class ArticleStatus(str, enum.Enum):
    """Lifecycle states of an article."""

    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class Article(TimestampMixin, SoftDeleteMixin, Base):
    """
    A news article.

    A row with ``revision_of`` set is a pending edit of another (published)
    article and is merged into it on approval.
    """

    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=False, default="")
    thumbnail = Column(Text, nullable=False, default="")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(
        Enum(
            ArticleStatus,
            name="article_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
            length=16,
        ),
        nullable=False,
        default=ArticleStatus.DRAFT,
    )
    published_at = Column(DateTime(timezone=True), nullable=True)
    views = Column(Integer, nullable=False, default=0)
    reward_amount = Column(Float, nullable=False, default=0.0)
    is_rewarded = Column(Boolean, nullable=False, default=False)
    revision_of = Column(Integer, ForeignKey("articles.id"), nullable=True)

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_articles_views_non_negative"),
        CheckConstraint("reward_amount >= 0", name="ck_articles_reward_non_negative"),
        # Slugs only need to be unique among live rows
        Index(
            "uq_articles_live_slug",
            "slug",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("idx_articles_status", "status"),
        Index("idx_articles_revision_of", "revision_of"),
        Index("idx_articles_author", "author_id"),
    )

    category = relationship("Category", back_populates="articles")
    author = relationship("User", back_populates="articles", foreign_keys=[author_id])
    tags = relationship(
        "Tag",
        secondary=article_tags,
        back_populates="articles",
        order_by=Tag.id,
    )

    @property
    def is_revision(self) -> bool:
        return self.revision_of is not None

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, slug='{self.slug}', status='{self.status}')>"
