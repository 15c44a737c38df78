"""Tests for the auth service HTTP client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from catalog_api.infrastructure.auth_client import AuthClient, AuthClientError


def _response(status_code: int, payload: object) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    return response


USER_PAYLOAD = {
    "id": "u-1",
    "email": "admin@example.com",
    "created_at": "2024-01-01T00:00:00Z",
    "user_metadata": {"full_name": "Admin"},
}


class TestAuthClient:
    """Tests for AuthClient."""

    @pytest.fixture
    def client(self) -> AuthClient:
        """Create a test client."""
        return AuthClient(
            base_url="http://auth.local/",
            anon_key="anon",
            service_role_key="service",
        )

    async def test_initialization(self, client: AuthClient) -> None:
        """Trailing slashes are dropped and no connection is opened yet."""
        assert client.base_url == "http://auth.local"
        assert client._client is None

    async def test_sign_in(self, client: AuthClient) -> None:
        """Password sign-in posts to the token endpoint with the anon key."""
        payload = {
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_in": 3600,
            "token_type": "bearer",
            "user": USER_PAYLOAD,
        }
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=_response(200, payload))
            mock_get_client.return_value = mock_http_client

            session = await client.sign_in_with_password("admin@example.com", "Secret123")

            assert session.access_token == "access"
            assert session.user.user_metadata == {"full_name": "Admin"}
            args, kwargs = mock_http_client.request.call_args
            assert args == ("POST", "/token")
            assert kwargs["params"] == {"grant_type": "password"}
            assert kwargs["headers"]["apikey"] == "anon"

    async def test_error_message_from_body(self, client: AuthClient) -> None:
        """Error bodies become AuthClientError with the service's message."""
        body = {"error": "invalid_grant", "error_description": "Invalid login credentials"}
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=_response(400, body))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(AuthClientError) as exc_info:
                await client.sign_in_with_password("admin@example.com", "wrong")

        assert exc_info.value.message == "Invalid login credentials"
        assert exc_info.value.status_code == 400

    async def test_transport_error(self, client: AuthClient) -> None:
        """Network failures have no status code."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(side_effect=httpx.ConnectError("refused"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(AuthClientError) as exc_info:
                await client.get_user("token")

        assert exc_info.value.status_code is None

    async def test_get_user_sends_token(self, client: AuthClient) -> None:
        """User lookups authenticate with the caller's token."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=_response(200, USER_PAYLOAD))
            mock_get_client.return_value = mock_http_client

            user = await client.get_user("user-token")

            assert user.email == "admin@example.com"
            headers = mock_http_client.request.call_args.kwargs["headers"]
            assert headers["Authorization"] == "Bearer user-token"

    async def test_admin_list_users(self, client: AuthClient) -> None:
        """Admin calls use the service role key."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(
                return_value=_response(200, {"users": [USER_PAYLOAD]})
            )
            mock_get_client.return_value = mock_http_client

            users = await client.admin_list_users()

            assert [u.id for u in users] == ["u-1"]
            headers = mock_http_client.request.call_args.kwargs["headers"]
            assert headers["Authorization"] == "Bearer service"

    async def test_admin_create_user_confirms_email(self, client: AuthClient) -> None:
        """Created users have a confirmed email."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=_response(200, USER_PAYLOAD))
            mock_get_client.return_value = mock_http_client

            await client.admin_create_user("admin@example.com", "Secret123", {"full_name": "Admin"})

            body = mock_http_client.request.call_args.kwargs["json"]
            assert body["email_confirm"] is True
            assert body["user_metadata"] == {"full_name": "Admin"}

    async def test_close(self, client: AuthClient) -> None:
        """Closing releases the HTTP client."""
        await client._get_client()
        assert client._client is not None

        await client.close()

        assert client._client is None
