"""User model and the closed set of account roles."""

import enum

from sqlalchemy import Column, Enum, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from newsdesk.database import Base
from newsdesk.models.mixins import SoftDeleteMixin, TimestampMixin


class Role(str, enum.Enum):
    """Account role. Publishers need approval and receive rewards."""

    ADMIN = "admin"
    PUBLISHER = "publisher"


class User(TimestampMixin, SoftDeleteMixin, Base):
    """Admin or publisher account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False)
    name = Column(Text, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
            length=16,
        ),
        nullable=False,
        default=Role.ADMIN,
    )

    # Identity in the external rewards system (publishers only)
    external_id = Column(Integer, nullable=True)
    external_number = Column(String(32), nullable=True, index=True)
    balance = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default="Active")
    referral_code = Column(String(64), nullable=True)

    articles = relationship("Article", back_populates="author", foreign_keys="Article.author_id")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_publisher(self) -> bool:
        return self.role == Role.PUBLISHER

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
