"""HTTP client for the hosted authentication service.

Wraps the token endpoints used by the admin panel login and the admin
endpoints used for user provisioning (these bypass row level security and
are authenticated with the service role key).
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Response Models
# ============================================================================


@dataclass
class AuthUser:
    """User identity as returned by the auth service."""

    id: str
    email: str
    created_at: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "AuthUser":
        """Create from auth service response data."""
        return cls(
            id=data["id"],
            email=data.get("email") or "",
            created_at=data.get("created_at"),
            user_metadata=data.get("user_metadata") or {},
        )


@dataclass
class AuthSession:
    """Session tokens issued by a password sign-in."""

    access_token: str
    refresh_token: str | None
    expires_in: int | None
    token_type: str
    user: AuthUser

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "AuthSession":
        """Create from auth service response data."""
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type", "bearer"),
            user=AuthUser.from_api_response(data["user"]),
        )


class AuthClientError(Exception):
    """Error from an auth service call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ============================================================================
# Auth Client
# ============================================================================


class AuthClient:
    """HTTP client for the auth service.

    Example usage:
        client = get_auth_client()
        session = await client.sign_in_with_password("admin@example.com", "Secret123")
        users = await client.admin_list_users()
    """

    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        service_role_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize auth client.

        Args:
            base_url: Auth service base URL.
            anon_key: Public key used for user-scoped calls.
            service_role_key: Privileged key used for admin calls.
            timeout: Request timeout in seconds.
        """
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.anon_key = anon_key or settings.supabase_anon_key
        self.service_role_key = service_role_key or settings.supabase_service_role_key
        self.timeout = timeout or settings.auth_timeout_seconds
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/auth/v1",
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self, token: str | None = None, admin: bool = False) -> dict[str, str]:
        key = self.service_role_key if admin else self.anon_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {token or key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        admin: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise AuthClientError on failure.

        Raises:
            AuthClientError: On transport errors or non-2xx responses.
        """
        client = await self._get_client()
        try:
            response = await client.request(
                method,
                path,
                headers=self._headers(token=token, admin=admin),
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error("Auth service unreachable", path=path, error=str(e))
            raise AuthClientError(f"Auth service unreachable: {e}") from e

        if response.status_code >= 400:
            raise AuthClientError(
                self._error_message(response),
                response.status_code,
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(data, dict):
            for key in ("msg", "error_description", "message", "error"):
                if data.get(key):
                    return str(data[key])
        return response.text or f"HTTP {response.status_code}"

    # ------------------------------------------------------------------------
    # Session endpoints
    # ------------------------------------------------------------------------

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password.

        Returns:
            Session tokens and the signed-in user.

        Raises:
            AuthClientError: On invalid credentials or API error.
        """
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession.from_api_response(response.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        await self._request("POST", "/logout", token=access_token)

    async def get_user(self, access_token: str) -> AuthUser:
        """Resolve the user that owns an access token.

        Raises:
            AuthClientError: If the token is invalid or expired.
        """
        response = await self._request("GET", "/user", token=access_token)
        return AuthUser.from_api_response(response.json())

    # ------------------------------------------------------------------------
    # Admin endpoints
    # ------------------------------------------------------------------------

    async def admin_list_users(self, page: int = 1, per_page: int = 1000) -> list[AuthUser]:
        """List users registered in the auth service."""
        response = await self._request(
            "GET",
            "/admin/users",
            admin=True,
            params={"page": page, "per_page": per_page},
        )
        data = response.json()
        users = data.get("users", []) if isinstance(data, dict) else data
        return [AuthUser.from_api_response(u) for u in users]

    async def admin_create_user(
        self,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
        email_confirm: bool = True,
    ) -> AuthUser:
        """Create a user with a confirmed email."""
        response = await self._request(
            "POST",
            "/admin/users",
            admin=True,
            json={
                "email": email,
                "password": password,
                "email_confirm": email_confirm,
                "user_metadata": user_metadata or {},
            },
        )
        return AuthUser.from_api_response(response.json())

    async def admin_delete_user(self, user_id: str) -> None:
        """Delete a user identity."""
        await self._request("DELETE", f"/admin/users/{user_id}", admin=True)


# Global client instance
_auth_client: AuthClient | None = None


def get_auth_client() -> AuthClient:
    """Get the auth client singleton.

    Returns:
        AuthClient instance.
    """
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthClient()
    return _auth_client


async def close_auth_client() -> None:
    """Close the singleton's HTTP connections."""
    global _auth_client
    if _auth_client is not None:
        await _auth_client.close()
        _auth_client = None
