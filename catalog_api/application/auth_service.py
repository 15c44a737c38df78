"""Admin panel session service.

Password login and logout against the auth service, and resolution of the
user behind an access token.
"""

from typing import Any

import structlog

from catalog_api.application.results import (
    AUTH_SERVICE_ERROR,
    INVALID_CREDENTIALS,
    UNAUTHORIZED,
    ActionResult,
)
from catalog_api.domain.exceptions import InputValidationError
from catalog_api.domain.validation import LoginInput, validate_input
from catalog_api.infrastructure.auth_client import (
    AuthClient,
    AuthClientError,
    AuthSession,
    AuthUser,
    get_auth_client,
)

logger = structlog.get_logger()


class AuthService:
    """Service for admin panel sessions."""

    def __init__(self, auth_client: AuthClient | None = None, request_id: str | None = None) -> None:
        """Initialize auth service.

        Args:
            auth_client: Auth service client; defaults to the singleton.
            request_id: Request ID for correlation.
        """
        self.auth = auth_client or get_auth_client()
        self.request_id = request_id

    async def login(self, data: dict[str, Any]) -> ActionResult[AuthSession]:
        """Sign in with email and password.

        Args:
            data: ``{"email": ..., "password": ...}``.

        Returns:
            ActionResult with the session tokens.
        """
        try:
            payload = validate_input(LoginInput, data)
        except InputValidationError as e:
            return ActionResult.from_error(e)

        try:
            session = await self.auth.sign_in_with_password(payload.email, payload.password)
        except AuthClientError as e:
            logger.warning(
                "Login failed",
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )
            if "Invalid login credentials" in e.message:
                return ActionResult.fail("Email o contraseña incorrectos", INVALID_CREDENTIALS)
            if e.status_code is None:
                return ActionResult.fail("Error inesperado al iniciar sesión", AUTH_SERVICE_ERROR)
            return ActionResult.fail(e.message, AUTH_SERVICE_ERROR)

        logger.info("User logged in", user_id=session.user.id, request_id=self.request_id)
        return ActionResult.ok(session)

    async def logout(self, access_token: str) -> ActionResult[None]:
        """Revoke the session behind an access token."""
        try:
            await self.auth.sign_out(access_token)
        except AuthClientError as e:
            logger.error(
                "Logout failed",
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )
            return ActionResult.fail("Error al cerrar sesión", AUTH_SERVICE_ERROR)
        return ActionResult.ok()

    async def get_current_user(self, access_token: str | None) -> ActionResult[AuthUser]:
        """Resolve the user that owns an access token."""
        if not access_token:
            return ActionResult.fail("Usuario no autenticado", UNAUTHORIZED)
        try:
            user = await self.auth.get_user(access_token)
        except AuthClientError as e:
            logger.warning(
                "Token rejected",
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )
            return ActionResult.fail("Usuario no autenticado", UNAUTHORIZED)
        return ActionResult.ok(user)


def get_auth_service(request_id: str | None = None) -> AuthService:
    """Get auth service instance."""
    return AuthService(request_id=request_id)
