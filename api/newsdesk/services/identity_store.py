"""Persistence operations over user accounts."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.models.user import Role, User
from newsdesk.services.rewards import ExternalProfile


class IdentityStore:
    """Lookups and writes for live (non-deleted) users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _live(self):
        return select(User).where(User.deleted_at.is_(None))

    async def get(self, user_id: int) -> User | None:
        result = await self.db.execute(self._live().where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(self._live().where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_external_number(self, number: str) -> User | None:
        result = await self.db.execute(self._live().where(User.external_number == number))
        return result.scalar_one_or_none()

    async def username_taken(self, username: str, exclude_id: int | None = None) -> bool:
        query = select(User.id).where(User.username == username)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_publishers(self) -> list[User]:
        result = await self.db.execute(
            self._live().where(User.role == Role.PUBLISHER).order_by(User.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_publishers(self) -> int:
        result = await self.db.execute(
            select(func.count(User.id))
            .where(User.role == Role.PUBLISHER)
            .where(User.deleted_at.is_(None))
        )
        return result.scalar_one()

    async def create(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user

    async def save(self, user: User) -> User:
        await self.db.flush()
        return user

    async def soft_delete(self, user: User) -> None:
        user.deleted_at = datetime.now(timezone.utc)
        await self.db.flush()

    async def upsert_publisher(
        self,
        number: str,
        password_hash: str,
        profile: ExternalProfile,
    ) -> User:
        """
        Create or refresh the local account for an externally authenticated publisher.

        Matches on the external phone number first, then on the derived
        username ``publisher_{number}``; otherwise a new publisher is created.
        A soft-deleted account holding the derived username is restored.
        """
        user = await self.get_by_external_number(number)
        if user is None:
            result = await self.db.execute(
                select(User).where(User.username == f"publisher_{number}")
            )
            user = result.scalar_one_or_none()
            if user is not None:
                user.deleted_at = None

        if user is None:
            user = User(
                username=f"publisher_{number}",
                email=f"{number}@xinxun.news",
                role=Role.PUBLISHER,
                name=profile.name,
                password_hash=password_hash,
            )
            self.db.add(user)

        user.external_number = number
        user.external_id = profile.external_id
        user.name = profile.name or user.name
        user.balance = profile.balance
        user.status = profile.status or user.status
        user.referral_code = profile.referral_code
        user.password_hash = password_hash

        await self.db.flush()
        return user
