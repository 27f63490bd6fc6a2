"""
Tests for admin publisher management:
- GET /api/v1/admin/publishers
- GET /api/v1/admin/publishers/{id}
- PATCH /api/v1/admin/publishers/{id}
- DELETE /api/v1/admin/publishers/{id}
"""

from httpx import AsyncClient


class TestListPublishers:
    """GET /api/v1/admin/publishers tests."""

    async def test_lists_publishers_only(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        second_publisher,
        auth_headers,
    ):
        response = await async_client.get(
            "/api/v1/admin/publishers", headers=auth_headers(admin_user)
        )

        assert response.status_code == 200
        ids = {u["id"] for u in response.json()["items"]}
        assert ids == {publisher_user.id, second_publisher.id}

    async def test_requires_admin(
        self, async_client: AsyncClient, publisher_user, auth_headers
    ):
        response = await async_client.get(
            "/api/v1/admin/publishers", headers=auth_headers(publisher_user)
        )
        assert response.status_code == 403


class TestGetPublisher:
    """GET /api/v1/admin/publishers/{id} tests."""

    async def test_returns_account(
        self, async_client: AsyncClient, admin_user, publisher_user, auth_headers
    ):
        response = await async_client.get(
            f"/api/v1/admin/publishers/{publisher_user.id}", headers=auth_headers(admin_user)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "publisher_81234567890"
        assert data["external_id"] == 42
        assert data["role"] == "publisher"

    async def test_admin_account_is_not_a_publisher(
        self, async_client: AsyncClient, admin_user, auth_headers
    ):
        response = await async_client.get(
            f"/api/v1/admin/publishers/{admin_user.id}", headers=auth_headers(admin_user)
        )

        assert response.status_code == 404
        assert response.json()["error"]["details"]["entity"] == "Publisher"


class TestUpdatePublisher:
    """PATCH /api/v1/admin/publishers/{id} tests."""

    async def test_suspend_and_adjust_balance(
        self, async_client: AsyncClient, admin_user, publisher_user, auth_headers
    ):
        response = await async_client.patch(
            f"/api/v1/admin/publishers/{publisher_user.id}",
            json={"status": "Suspend", "balance": 250},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Suspend"
        assert data["balance"] == 250.0

    async def test_suspended_publisher_cannot_log_in(
        self, async_client: AsyncClient, admin_user, publisher_user, auth_headers
    ):
        await async_client.patch(
            f"/api/v1/admin/publishers/{publisher_user.id}",
            json={"status": "Suspend"},
            headers=auth_headers(admin_user),
        )

        response = await async_client.post(
            "/api/v1/auth/login",
            json={"username": "publisher_81234567890", "password": "secret123"},
        )

        assert response.status_code == 403
        assert response.json()["detail"]["error"]["code"] == "ACCOUNT_SUSPENDED"

    async def test_duplicate_username_returns_409(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        second_publisher,
        auth_headers,
    ):
        response = await async_client.patch(
            f"/api/v1/admin/publishers/{publisher_user.id}",
            json={"username": second_publisher.username},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_unknown_status_returns_422(
        self, async_client: AsyncClient, admin_user, publisher_user, auth_headers
    ):
        response = await async_client.patch(
            f"/api/v1/admin/publishers/{publisher_user.id}",
            json={"status": "Banned"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 422


class TestDeletePublisher:
    """DELETE /api/v1/admin/publishers/{id} tests."""

    async def test_soft_delete_keeps_articles(
        self,
        async_client: AsyncClient,
        admin_user,
        publisher_user,
        category,
        make_article,
        auth_headers,
    ):
        article = await make_article(publisher_user, category)
        headers = auth_headers(admin_user)

        response = await async_client.delete(
            f"/api/v1/admin/publishers/{publisher_user.id}", headers=headers
        )
        assert response.status_code == 204

        missing = await async_client.get(
            f"/api/v1/admin/publishers/{publisher_user.id}", headers=headers
        )
        assert missing.status_code == 404

        public = await async_client.get(f"/api/v1/news/{article.slug}")
        assert public.status_code == 200

    async def test_deleted_publisher_token_rejected(
        self, async_client: AsyncClient, admin_user, publisher_user, auth_headers
    ):
        await async_client.delete(
            f"/api/v1/admin/publishers/{publisher_user.id}", headers=auth_headers(admin_user)
        )

        response = await async_client.get("/api/v1/users/me", headers=auth_headers(publisher_user))

        assert response.status_code == 401
