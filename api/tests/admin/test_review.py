"""
Tests for admin review endpoints:
- GET /api/v1/admin/articles/pending
- GET /api/v1/admin/articles/pending/revisions
- GET /api/v1/admin/articles/pending/counts
- POST /api/v1/admin/articles/{id}/approve
- POST /api/v1/admin/articles/{id}/reject
- GET /api/v1/admin/statistics
"""

from httpx import AsyncClient

from newsdesk.models import ArticleStatus


class TestReviewAccess:
    """Review endpoints are admin-only."""

    async def test_publisher_gets_403(
        self, async_client: AsyncClient, publisher_user, auth_headers
    ):
        response = await async_client.get(
            "/api/v1/admin/articles/pending", headers=auth_headers(publisher_user)
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error"]["code"] == "FORBIDDEN"

    async def test_anonymous_gets_401(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/admin/articles/1/approve")
        assert response.status_code == 401


class TestPendingQueues:
    """Pending listings and counts."""

    async def test_new_and_revision_queues(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        auth_headers,
    ):
        original = await make_article(publisher_user, category, title="Asli")
        new = await make_article(
            publisher_user, category, title="Baru", status=ArticleStatus.PENDING
        )
        revision = await make_article(
            publisher_user,
            category,
            title="Asli",
            slug="asli-1769947200",
            status=ArticleStatus.PENDING,
            revision_of=original.id,
        )
        headers = auth_headers(admin_user)

        pending = await async_client.get("/api/v1/admin/articles/pending", headers=headers)
        revisions = await async_client.get(
            "/api/v1/admin/articles/pending/revisions", headers=headers
        )
        counts = await async_client.get("/api/v1/admin/articles/pending/counts", headers=headers)

        assert [a["id"] for a in pending.json()["items"]] == [new.id]
        assert [a["id"] for a in revisions.json()["items"]] == [revision.id]
        assert counts.json() == {"pending_new": 1, "pending_revision": 1}


class TestApproveEndpoint:
    """POST /api/v1/admin/articles/{id}/approve tests."""

    async def test_approve_with_reward(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        rewards,
        auth_headers,
    ):
        article = await make_article(publisher_user, category, status=ArticleStatus.PENDING)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/approve",
            json={"reward_amount": 10},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["article"]["status"] == "published"
        assert data["article"]["is_rewarded"] is True
        assert data["article"]["published_at"] is not None
        assert data["reward"] == {
            "amount": 10.0,
            "success": True,
            "message": "Reward sent",
            "error": None,
        }
        assert rewards.rewards == [(42, 10.0)]

    async def test_approve_without_body_sends_no_reward(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        rewards,
        auth_headers,
    ):
        article = await make_article(publisher_user, category, status=ArticleStatus.PENDING)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/approve",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        assert response.json()["reward"] is None
        assert rewards.rewards == []

    async def test_reward_failure_reported_not_raised(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        rewards,
        external_failure,
        auth_headers,
    ):
        rewards.reward_error = external_failure
        article = await make_article(publisher_user, category, status=ArticleStatus.PENDING)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/approve",
            json={"reward_amount": 10},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["article"]["status"] == "published"
        assert data["article"]["is_rewarded"] is False
        assert data["reward"]["success"] is False
        assert "timed out" in data["reward"]["error"]

    async def test_approve_revision_merges(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        auth_headers,
    ):
        original = await make_article(publisher_user, category, title="Asli")
        revision = await make_article(
            publisher_user,
            category,
            title="Asli",
            slug="asli-1769947200",
            status=ArticleStatus.PENDING,
            revision_of=original.id,
            thumbnail="https://cdn.example.com/new.jpg",
        )

        response = await async_client.post(
            f"/api/v1/admin/articles/{revision.id}/approve",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["article"]["id"] == original.id
        assert data["article"]["slug"] == "asli"
        assert data["article"]["thumbnail"] == "https://cdn.example.com/new.jpg"
        assert data["merged_revision_id"] == revision.id

    async def test_approve_published_returns_409(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        auth_headers,
    ):
        article = await make_article(publisher_user, category)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/approve",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE"

    async def test_approve_missing_returns_404(
        self, async_client: AsyncClient, admin_user, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/admin/articles/999/approve", headers=auth_headers(admin_user)
        )
        assert response.status_code == 404

    async def test_negative_reward_returns_422(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        auth_headers,
    ):
        article = await make_article(publisher_user, category, status=ArticleStatus.PENDING)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/approve",
            json={"reward_amount": -5},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 422


class TestRejectEndpoint:
    """POST /api/v1/admin/articles/{id}/reject tests."""

    async def test_reject_pending(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        rewards,
        auth_headers,
    ):
        article = await make_article(publisher_user, category, status=ArticleStatus.PENDING)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/reject",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert rewards.rewards == []

    async def test_reject_draft_returns_409(
        self,
        async_client: AsyncClient,
        admin_user,
        category,
        make_article,
        auth_headers,
    ):
        article = await make_article(admin_user, category, status=ArticleStatus.DRAFT)

        response = await async_client.post(
            f"/api/v1/admin/articles/{article.id}/reject",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 409


class TestStatistics:
    """GET /api/v1/admin/statistics tests."""

    async def test_counts_views_and_top_articles(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        second_publisher,
        category,
        make_article,
        auth_headers,
    ):
        popular = await make_article(publisher_user, category, title="Populer", views=50)
        await make_article(second_publisher, category, title="Biasa", views=5)
        await make_article(publisher_user, category, title="Menunggu", status=ArticleStatus.PENDING)
        await make_article(admin_user, category, title="Konsep", status=ArticleStatus.DRAFT)
        await make_article(
            publisher_user, category, title="Ditolak", status=ArticleStatus.REJECTED, views=2
        )

        response = await async_client.get(
            "/api/v1/admin/statistics", headers=auth_headers(admin_user)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert data["draft"] == 1
        assert data["pending"] == 1
        assert data["published"] == 2
        assert data["rejected"] == 1
        assert data["total_views"] == 57
        assert data["publishers"] == 2
        assert data["top_articles"][0]["id"] == popular.id
