"""
Shared test fixtures for Newsdesk API tests.

Provides database session management, test clients, users, and fakes for
the rewards API, object storage and view counter.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from newsdesk.auth.jwt import create_access_token
from newsdesk.auth.password import hash_password
from newsdesk.config import settings
from newsdesk.database import Base, build_engine, build_session_factory, get_db
from newsdesk.errors import ExternalServiceError, StorageError
from newsdesk.main import app
from newsdesk.middleware.rate_limit import reset_limiter

# Import models so they're registered with Base.metadata before table creation
from newsdesk.models import Article, ArticleStatus, Category, Role, Tag, User
from newsdesk.services.rewards import ExternalProfile, RewardReceipt, get_rewards_client
from newsdesk.services.storage import get_object_storage
from newsdesk.services.views import get_view_counter

TEST_DATABASE_URL = settings.test_database_url

# In-memory SQLite shares one connection; other backends get a fresh one per checkout
if TEST_DATABASE_URL.startswith("sqlite"):
    test_engine = build_engine(TEST_DATABASE_URL)
else:
    test_engine = build_engine(TEST_DATABASE_URL, poolclass=NullPool)

TestSessionLocal = build_session_factory(test_engine)


# --- Fakes for external collaborators ---


class FakeRewardsClient:
    """Records calls and answers with canned results."""

    def __init__(self):
        self.rewards: list[tuple[int, float]] = []
        self.logins: list[tuple[str, str]] = []
        self.reward_success = True
        self.reward_message = "Reward sent"
        self.reward_error: Exception | None = None
        self.login_profile = ExternalProfile(
            success=True,
            message="Login success",
            external_id=42,
            name="Budi Santoso",
            number="81234567890",
            balance=1500.0,
            status="Active",
            referral_code="BUDI42",
        )
        self.login_error: Exception | None = None

    async def send_reward(self, external_id: int, amount: float) -> RewardReceipt:
        self.rewards.append((external_id, amount))
        if self.reward_error is not None:
            raise self.reward_error
        return RewardReceipt(success=self.reward_success, message=self.reward_message)

    async def login(self, number: str, password: str) -> ExternalProfile:
        self.logins.append((number, password))
        if self.login_error is not None:
            raise self.login_error
        return self.login_profile


class FakeObjectStorage:
    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail = False

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageError("Upload failed: bucket unavailable", key=key)
        self.objects[key] = (data, content_type)
        return f"https://test-bucket.s3.amazonaws.com/{key}"


class FakeViewCounter:
    def __init__(self):
        self.scheduled: list[int] = []

    def schedule(self, article_id: int) -> None:
        self.scheduled.append(article_id)


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory(db_session: AsyncSession) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, for code that opens its own sessions."""
    return TestSessionLocal


@pytest.fixture
def rewards() -> FakeRewardsClient:
    return FakeRewardsClient()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def view_counter() -> FakeViewCounter:
    return FakeViewCounter()


@pytest_asyncio.fixture(scope="function")
async def async_client(
    db_session: AsyncSession,
    rewards: FakeRewardsClient,
    storage: FakeObjectStorage,
    view_counter: FakeViewCounter,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides the database and external collaborators with test doubles.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rewards_client] = lambda: rewards
    app.dependency_overrides[get_object_storage] = lambda: storage
    app.dependency_overrides[get_view_counter] = lambda: view_counter

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Authentication Helper Fixtures ---


@pytest.fixture
def auth_headers():
    """Factory fixture for creating bearer token headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _auth_headers


# --- User Fixtures ---


async def _create_user(db_session: AsyncSession, **fields: Any) -> User:
    password = fields.pop("password", "secret123")
    user = User(password_hash=hash_password(password), **fields)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Admin account with password ``admin123``."""
    return await _create_user(
        db_session,
        username="admin",
        name="Administrator",
        email="admin@xinxun.news",
        password="admin123",
        role=Role.ADMIN,
    )


@pytest_asyncio.fixture
async def publisher_user(db_session: AsyncSession) -> User:
    """Publisher linked to external account 42."""
    return await _create_user(
        db_session,
        username="publisher_81234567890",
        name="Budi Santoso",
        email="81234567890@xinxun.news",
        password="secret123",
        role=Role.PUBLISHER,
        external_id=42,
        external_number="81234567890",
    )


@pytest_asyncio.fixture
async def second_publisher(db_session: AsyncSession) -> User:
    """Another publisher for ownership scenarios."""
    return await _create_user(
        db_session,
        username="publisher_81111111111",
        name="Siti Aminah",
        email="81111111111@xinxun.news",
        role=Role.PUBLISHER,
        external_id=77,
        external_number="81111111111",
    )


# --- Taxonomy and article fixtures ---


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Investasi", slug="investasi", display_order=1)
    db_session.add(category)
    await db_session.commit()
    return category


@pytest_asyncio.fixture
async def admin_category(db_session: AsyncSession) -> Category:
    category = Category(name="Update", slug="update", is_admin_only=True, display_order=2)
    db_session.add(category)
    await db_session.commit()
    return category


@pytest_asyncio.fixture
async def tags(db_session: AsyncSession) -> list[Tag]:
    created = [Tag(name="Crypto", slug="crypto"), Tag(name="Fintech", slug="fintech")]
    db_session.add_all(created)
    await db_session.commit()
    return created


@pytest.fixture
def make_article(db_session: AsyncSession):
    """Factory fixture inserting an article directly, bypassing the workflow."""

    async def _make_article(
        author: User,
        category: Category,
        title: str = "Harga Bitcoin naik tajam",
        status: ArticleStatus = ArticleStatus.PUBLISHED,
        **fields: Any,
    ) -> Article:
        fields.setdefault("slug", title.lower().replace(" ", "-"))
        fields.setdefault("content", "Isi berita lengkap.")
        fields.setdefault("excerpt", "Ringkasan berita.")
        fields.setdefault("thumbnail", "https://cdn.example.com/old.jpg")
        fields.setdefault("tags", [])
        article = Article(
            title=title,
            author_id=author.id,
            category_id=category.id,
            status=status,
            **fields,
        )
        db_session.add(article)
        await db_session.commit()
        return article

    return _make_article


@pytest.fixture
def external_failure():
    """Build the error the rewards client raises when the API is unreachable."""
    return ExternalServiceError("rewards_api", "Rewards API timed out after 10.0s", path="/reward")


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-02-01 12:00:00"):
            # time is frozen
    """
    from freezegun import freeze_time

    return freeze_time
