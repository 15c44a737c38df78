"""Tests for user admin and session API endpoints."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from catalog_api.infrastructure.auth_client import AuthClientError, AuthSession, AuthUser


@pytest.fixture
def mock_auth() -> Iterator[AsyncMock]:
    """Auth service client shared by the middleware and the services."""
    auth = AsyncMock()
    with (
        patch("catalog_api.api.middleware.get_auth_client", return_value=auth),
        patch("catalog_api.application.auth_service.get_auth_client", return_value=auth),
        patch("catalog_api.application.user_service.get_auth_client", return_value=auth),
    ):
        yield auth


def _new_user(**overrides: str) -> dict[str, str]:
    body = {
        "email": "Ana@Example.com",
        "password": "Secreta123",
        "confirm_password": "Secreta123",
        "full_name": "Ana García",
    }
    body.update(overrides)
    return body


class TestUserEndpoints:
    """Tests for /admin/users."""

    def test_create_and_list(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """A created user shows up with the email held by the auth service."""
        mock_auth.admin_create_user.return_value = AuthUser(id="u-1", email="ana@example.com")
        mock_auth.admin_list_users.return_value = [
            AuthUser(id="u-1", email="ana@example.com", created_at="2026-01-01T00:00:00Z")
        ]

        response = auth_client.post("/admin/users", json=_new_user())

        assert response.status_code == 201
        assert response.json() == {"user_id": "u-1"}
        assert mock_auth.admin_create_user.await_args.kwargs["email"] == "ana@example.com"

        users = auth_client.get("/admin/users")
        assert users.status_code == 200
        assert users.json()[0]["email"] == "ana@example.com"
        assert users.json()[0]["profile"]["full_name"] == "Ana García"
        assert "ETag" in users.headers

    def test_passwords_must_match(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """Validation runs before the auth service is called."""
        response = auth_client.post("/admin/users", json=_new_user(confirm_password="Otra1234"))

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        mock_auth.admin_create_user.assert_not_awaited()

    def test_email_taken(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """Registered emails are a conflict."""
        mock_auth.admin_create_user.side_effect = AuthClientError(
            "A user with this email address has already been registered", 422
        )

        response = auth_client.post("/admin/users", json=_new_user())

        assert response.status_code == 409
        assert response.json()["error_code"] == "EMAIL_TAKEN"

    def test_update_profile(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """PATCH updates the profile only."""
        mock_auth.admin_create_user.return_value = AuthUser(id="u-1", email="ana@example.com")
        auth_client.post("/admin/users", json=_new_user())

        response = auth_client.patch("/admin/users/u-1", json={"full_name": "Ana López"})

        assert response.status_code == 200
        assert response.json()["full_name"] == "Ana López"

    def test_update_missing(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """Unknown users are 404."""
        response = auth_client.patch("/admin/users/nobody", json={"full_name": "Ana López"})
        assert response.status_code == 404

    def test_delete(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """The identity and profile are removed."""
        mock_auth.admin_create_user.return_value = AuthUser(id="u-1", email="ana@example.com")
        mock_auth.admin_list_users.return_value = []
        auth_client.post("/admin/users", json=_new_user())

        response = auth_client.delete("/admin/users/u-1")

        assert response.json() == {"success": True}
        mock_auth.admin_delete_user.assert_awaited_once_with("u-1")
        assert auth_client.get("/admin/users").json() == []

    def test_delete_auth_failure(self, auth_client: TestClient, mock_auth: AsyncMock) -> None:
        """An auth service failure is a bad gateway."""
        mock_auth.admin_delete_user.side_effect = AuthClientError("boom", 500)

        response = auth_client.delete("/admin/users/u-1")

        assert response.status_code == 502
        assert response.json()["error_code"] == "AUTH_SERVICE_ERROR"


class TestSessionEndpoints:
    """Tests for login, logout and /admin/me."""

    def test_login(self, client: TestClient, mock_auth: AsyncMock) -> None:
        """Valid credentials return the session tokens."""
        mock_auth.sign_in_with_password.return_value = AuthSession(
            access_token="access",
            refresh_token="refresh",
            expires_in=3600,
            token_type="bearer",
            user=AuthUser(id="u-1", email="ana@example.com"),
        )

        response = client.post(
            "/admin/login",
            json={"email": "ana@example.com", "password": "Secreta123"},
        )

        assert response.status_code == 200
        assert response.json()["access_token"] == "access"
        assert response.json()["user"]["id"] == "u-1"

    def test_login_wrong_password(self, client: TestClient, mock_auth: AsyncMock) -> None:
        """Rejected credentials are 401 with a localized message."""
        mock_auth.sign_in_with_password.side_effect = AuthClientError(
            "Invalid login credentials", 400
        )

        response = client.post(
            "/admin/login",
            json={"email": "ana@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "error_code": "INVALID_CREDENTIALS",
            "message": "Email o contraseña incorrectos",
            "details": [],
            "request_id": response.headers["X-Request-ID"],
        }

    def test_me_with_user_token(self, client: TestClient, mock_auth: AsyncMock) -> None:
        """The current user comes back with a null profile when none exists."""
        mock_auth.get_user.return_value = AuthUser(id="u-1", email="ana@example.com")

        response = client.get("/admin/me", headers={"Authorization": "Bearer user-token"})

        assert response.status_code == 200
        assert response.json() == {
            "user": {"id": "u-1", "email": "ana@example.com", "created_at": None},
            "profile": None,
        }

    def test_logout(self, client: TestClient, mock_auth: AsyncMock) -> None:
        """Logout revokes the bearer token."""
        mock_auth.get_user.return_value = AuthUser(id="u-1", email="ana@example.com")

        response = client.post("/admin/logout", headers={"Authorization": "Bearer user-token"})

        assert response.json() == {"success": True}
        mock_auth.sign_out.assert_awaited_once_with("user-token")

    @pytest.mark.parametrize(
        "method,path",
        [("GET", "/admin/me"), ("POST", "/admin/logout")],
    )
    def test_admin_key_has_no_session(
        self,
        auth_client: TestClient,
        mock_auth: AsyncMock,
        method: str,
        path: str,
    ) -> None:
        """The admin API key carries no user session."""
        response = auth_client.request(method, path)

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
