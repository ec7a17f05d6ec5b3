"""Tests for authentication API endpoints."""

from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import create_access_token, decode_access_token, oauth_states
from src.auth.lark import LarkOAuthError
from src.auth.models import LarkUser
from src.config import get_settings
from src.models.user import User


def _redirect_params(response) -> tuple[str, dict[str, list[str]]]:
    location = urlparse(response.headers["location"])
    return f"{location.scheme}://{location.netloc}{location.path}", parse_qs(location.query)


class TestLarkLogin:
    """Tests for /api/auth/lark/login."""

    @pytest.mark.asyncio
    async def test_login_returns_authorize_url(self, client: AsyncClient):
        """Test login returns the Lark consent URL and its state."""
        response = await client.get("/api/auth/lark/login")
        assert response.status_code == 200
        data = response.json()

        url = urlparse(data["auth_url"])
        params = parse_qs(url.query)
        assert url.netloc == "open.larksuite.com"
        assert url.path == "/open-apis/authen/v1/authorize"
        assert params["app_id"] == ["cli_test_app"]
        assert params["redirect_uri"] == ["http://localhost:5000/api/auth/callback"]
        assert params["response_type"] == ["code"]
        assert params["state"] == [data["state"]]
        assert len(oauth_states) == 1

    @pytest.mark.asyncio
    async def test_login_generates_unique_states(self, client: AsyncClient):
        """Test every login attempt gets its own state."""
        first = (await client.get("/api/auth/lark/login")).json()["state"]
        second = (await client.get("/api/auth/lark/login")).json()["state"]
        assert first != second

    @pytest.mark.asyncio
    async def test_login_not_configured(self, client: AsyncClient, monkeypatch):
        """Test login is unavailable without Lark credentials."""
        monkeypatch.setattr(get_settings(), "lark_app_id", "")
        response = await client.get("/api/auth/lark/login")
        assert response.status_code == 501


class TestLarkCallback:
    """Tests for /api/auth/callback."""

    @pytest.mark.asyncio
    async def test_callback_without_state(self, client: AsyncClient):
        """Test callback without state redirects with invalid_state."""
        response = await client.get("/api/auth/callback?code=abc", follow_redirects=False)
        assert response.status_code == 302
        base, params = _redirect_params(response)
        assert base == "http://localhost:8080/auth/error"
        assert params["error"] == ["invalid_state"]

    @pytest.mark.asyncio
    async def test_callback_with_unknown_state(self, client: AsyncClient):
        """Test callback with a state that was never issued."""
        response = await client.get(
            "/api/auth/callback?code=abc&state=forged", follow_redirects=False
        )
        _, params = _redirect_params(response)
        assert params["error"] == ["invalid_state"]

    @pytest.mark.asyncio
    async def test_callback_without_code(self, client: AsyncClient):
        """Test state is checked before code."""
        state = oauth_states.issue()
        response = await client.get(f"/api/auth/callback?state={state}", follow_redirects=False)
        _, params = _redirect_params(response)
        assert params["error"] == ["invalid_code"]

    @pytest.mark.asyncio
    async def test_callback_creates_user(self, client: AsyncClient, db_session: AsyncSession):
        """Test a first login creates the user and redirects with a session token."""
        state = oauth_states.issue()
        lark_user = LarkUser(
            user_id="ou_new_user",
            name="New User",
            email="",
            avatar_url="https://example.com/new.png",
        )

        with (
            patch("src.api.auth.exchange_code", AsyncMock(return_value="u-access")) as exchange,
            patch("src.api.auth.fetch_user_info", AsyncMock(return_value=lark_user)),
        ):
            response = await client.get(
                f"/api/auth/callback?code=auth-code&state={state}", follow_redirects=False
            )

        exchange.assert_awaited_once_with("auth-code")
        assert response.status_code == 302
        base, params = _redirect_params(response)
        assert base == "http://localhost:8080/auth/success"

        claims = decode_access_token(params["token"][0])
        assert claims is not None
        assert claims["lark_id"] == "ou_new_user"
        assert claims["name"] == "New User"
        assert claims["email"] is None

        result = await db_session.execute(select(User).where(User.lark_id == "ou_new_user"))
        user = result.scalar_one()
        assert str(user.id) == claims["sub"]
        assert user.email is None
        assert user.lark_access_token == "u-access"

    @pytest.mark.asyncio
    async def test_callback_name_falls_back_to_user_id(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        """Test users without a display name are named after their Lark id."""
        state = oauth_states.issue()
        with (
            patch("src.api.auth.exchange_code", AsyncMock(return_value="u-access")),
            patch(
                "src.api.auth.fetch_user_info",
                AsyncMock(return_value=LarkUser(user_id="ou_nameless")),
            ),
        ):
            await client.get(f"/api/auth/callback?code=c&state={state}", follow_redirects=False)

        result = await db_session.execute(select(User).where(User.lark_id == "ou_nameless"))
        assert result.scalar_one().name == "ou_nameless"

    @pytest.mark.asyncio
    async def test_callback_existing_user_updates_token_only(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ):
        """Test a returning user keeps their profile and gets the new provider token."""
        state = oauth_states.issue()
        lark_user = LarkUser(user_id=test_user.lark_id, name="Renamed", email="new@example.com")

        with (
            patch("src.api.auth.exchange_code", AsyncMock(return_value="u-fresh")),
            patch("src.api.auth.fetch_user_info", AsyncMock(return_value=lark_user)),
        ):
            response = await client.get(
                f"/api/auth/callback?code=c&state={state}", follow_redirects=False
            )

        _, params = _redirect_params(response)
        assert decode_access_token(params["token"][0])["sub"] == str(test_user.id)

        await db_session.refresh(test_user)
        assert test_user.name == "Test User"
        assert test_user.email == "test@example.com"
        assert test_user.lark_access_token == "u-fresh"

    @pytest.mark.asyncio
    async def test_callback_state_is_single_use(self, client: AsyncClient):
        """Test a state cannot be replayed."""
        state = oauth_states.issue()
        with (
            patch("src.api.auth.exchange_code", AsyncMock(return_value="u-access")),
            patch(
                "src.api.auth.fetch_user_info",
                AsyncMock(return_value=LarkUser(user_id="ou_replay")),
            ),
        ):
            await client.get(f"/api/auth/callback?code=c&state={state}", follow_redirects=False)
            response = await client.get(
                f"/api/auth/callback?code=c&state={state}", follow_redirects=False
            )

        _, params = _redirect_params(response)
        assert params["error"] == ["invalid_state"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["token_exchange_failed", "user_info_failed"])
    async def test_callback_provider_failure(self, client: AsyncClient, code: str):
        """Test Lark failures redirect with their error code."""
        state = oauth_states.issue()
        with patch("src.api.auth.exchange_code", AsyncMock(side_effect=LarkOAuthError(code))):
            response = await client.get(
                f"/api/auth/callback?code=c&state={state}", follow_redirects=False
            )

        _, params = _redirect_params(response)
        assert params["error"] == [code]

    @pytest.mark.asyncio
    async def test_callback_unexpected_error(self, client: AsyncClient):
        """Test unexpected failures redirect with auth_failed."""
        state = oauth_states.issue()
        with patch("src.api.auth.exchange_code", AsyncMock(side_effect=RuntimeError("boom"))):
            response = await client.get(
                f"/api/auth/callback?code=c&state={state}", follow_redirects=False
            )

        assert response.status_code == 302
        _, params = _redirect_params(response)
        assert params["error"] == ["auth_failed"]


class TestCurrentUser:
    """Tests for /api/auth/me and /api/auth/logout."""

    @pytest.mark.asyncio
    async def test_me_authenticated(
        self, client: AsyncClient, auth_headers: dict, test_user: User
    ):
        """Test getting current user with a valid token."""
        response = await client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == test_user.id
        assert user["lark_id"] == "ou_test_user"
        assert user["name"] == "Test User"
        assert user["email"] == "test@example.com"
        assert "lark_access_token" not in user

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        """Test getting current user when not authenticated."""
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/auth/me", "/api/sites"])
    async def test_non_numeric_subject_rejected(self, client: AsyncClient, path: str):
        """Test a correctly signed token whose subject is not a user id."""
        settings = get_settings()
        token = jwt.encode(
            {"sub": "abc", "type": "access"}, settings.jwt_secret, algorithm=settings.jwt_algorithm
        )

        response = await client.get(path, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_user_deleted(self, client: AsyncClient):
        """Test a valid token for a user that no longer exists."""
        ghost = User(id=9999, lark_id="ou_ghost", name="Ghost", email=None)
        headers = {"Authorization": f"Bearer {create_access_token(ghost)}"}

        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_logout(self, client: AsyncClient):
        response = await client.post("/api/auth/logout")
        assert response.status_code == 204


class TestProtectedEndpoints:
    """Tests that data endpoints require a session token."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "/api/sites",
            "/api/services",
            "/api/assets",
            "/api/assessments",
            "/api/parameters/dimensions",
            "/api/risks",
            "/api/issues",
            "/api/dashboard/summary",
        ],
    )
    async def test_requires_auth(self, client: AsyncClient, path: str):
        response = await client.get(path)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_accepts_bearer_token(self, client: AsyncClient, auth_headers: dict):
        """Test the real token dependency (no override) accepts a valid token."""
        response = await client.get("/api/sites", headers=auth_headers)
        assert response.status_code == 200
