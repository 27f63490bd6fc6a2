"""Tag model and the article/tag join table."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from newsdesk.database import Base
from newsdesk.models.mixins import SoftDeleteMixin, TimestampMixin

article_tags = Table(
    "article_tags",
    Base.metadata,
    Column("article_id", Integer, ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(TimestampMixin, SoftDeleteMixin, Base):
    """Free-form label attached to articles."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)

    articles = relationship("Article", secondary=article_tags, back_populates="tags")

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, slug='{self.slug}')>"
