"""Category model."""

from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from newsdesk.database import Base
from newsdesk.models.mixins import SoftDeleteMixin, TimestampMixin


class Category(TimestampMixin, SoftDeleteMixin, Base):
    """Article grouping. ``is_admin_only`` restricts who may assign it."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    is_admin_only = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)

    articles = relationship("Article", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"
