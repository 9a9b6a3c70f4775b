"""
Tests for login, session lookup and logout.
"""
import pytest
from starlette.requests import Request
from app.config import settings
from app.api.deps import get_session_token


class TestLogin:
    """Tests for POST /api/auth/login."""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client, make_user):
        user = await make_user(email="owner@example.com", password="correct-horse-battery")

        response = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "correct-horse-battery"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"] == {"id": user.id, "email": "owner@example.com", "name": "Form Owner"}
        assert f"{settings.SESSION_COOKIE_NAME}=" in response.headers["set-cookie"]
        assert "httponly" in response.headers["set-cookie"].lower()

    @pytest.mark.asyncio
    async def test_login_email_is_case_insensitive(self, async_client, make_user):
        await make_user(email="owner@example.com", password="correct-horse-battery")

        response = await async_client.post(
            "/api/auth/login",
            json={"email": "Owner@Example.com", "password": "correct-horse-battery"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, async_client, make_user):
        await make_user(password="correct-horse-battery")

        response = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, async_client, db_session):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "whatever"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_invalid_email(self, async_client, db_session):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "not-an-email", "password": "whatever"}
        )

        assert response.status_code == 400


class TestSession:
    """Tests for GET /api/auth/session and POST /api/auth/logout."""

    @pytest.mark.asyncio
    async def test_session_with_token(self, async_client, make_user):
        await make_user(password="correct-horse-battery")
        login = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "correct-horse-battery"}
        )
        token = login.json()["access_token"]

        response = await async_client.get(
            "/api/auth/session",
            headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "owner@example.com"

    @pytest.mark.asyncio
    async def test_session_without_token(self, async_client, db_session):
        response = await async_client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json() == {"user": None}

    @pytest.mark.asyncio
    async def test_session_with_garbage_token(self, async_client, db_session):
        response = await async_client.get(
            "/api/auth/session",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.json() == {"user": None}

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, async_client, db_session):
        response = await async_client.post("/api/auth/logout")

        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"]
        assert f"{settings.SESSION_COOKIE_NAME}=" in set_cookie
        assert "Max-Age=0" in set_cookie


def _request(headers):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


class TestSessionToken:
    """Tests for token extraction from header or cookie."""

    def test_bearer_header(self):
        assert get_session_token(_request({"Authorization": "Bearer abc"})) == "abc"

    def test_cookie(self):
        request = _request({"Cookie": f"{settings.SESSION_COOKIE_NAME}=xyz"})
        assert get_session_token(request) == "xyz"

    def test_header_wins_over_cookie(self):
        request = _request({
            "Authorization": "Bearer from-header",
            "Cookie": f"{settings.SESSION_COOKIE_NAME}=from-cookie",
        })
        assert get_session_token(request) == "from-header"

    def test_non_bearer_scheme_ignored(self):
        assert get_session_token(_request({"Authorization": "Basic dXNlcjpwYXNz"})) is None

    def test_nothing(self):
        assert get_session_token(_request({})) is None
