"""User application service.

Users are auth service identities joined with a local profile row:
- Listing merges profiles with the emails held by the auth service
- Creating provisions the identity first, then upserts its profile
- Deleting removes the identity first, then its profile
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import (
    AUTH_SERVICE_ERROR,
    DATA_ERROR,
    EMAIL_TAKEN,
    ActionResult,
)
from catalog_api.application.revalidation import USERS_ROUTE, get_route_invalidator
from catalog_api.catalog.models import Profile
from catalog_api.catalog.repository import ProfileRepository
from catalog_api.domain.exceptions import InputValidationError, NotFoundError
from catalog_api.domain.validation import CreateUserInput, UpdateProfileInput, validate_input
from catalog_api.infrastructure.auth_client import AuthClient, AuthClientError, AuthUser, get_auth_client

logger = structlog.get_logger()

# Auth service messages for an email that already has an identity.
DUPLICATE_EMAIL_MARKERS = ("already been registered", "already registered")


@dataclass
class UserDTO:
    """User with profile data transfer object."""

    id: str
    email: str
    created_at: str
    profile: Profile


def _isoformat(value: datetime | None) -> str:
    return value.isoformat() if value else ""


def merge_users(profiles: Sequence[Profile], auth_users: Sequence[AuthUser]) -> list[UserDTO]:
    """Attach auth emails to profiles, keeping the profiles' order.

    Profiles without an identity get an empty email and their own
    creation date.
    """
    by_id = {user.id: user for user in auth_users}
    users = []
    for profile in profiles:
        auth_user = by_id.get(profile.id)
        users.append(
            UserDTO(
                id=profile.id,
                email=auth_user.email if auth_user else "",
                created_at=(auth_user.created_at if auth_user else None)
                or _isoformat(profile.created_at),
                profile=profile,
            )
        )
    return users


class UserService(SessionService):
    """Service for managing admin panel users."""

    def __init__(
        self,
        session: AsyncSession,
        request_id: str | None = None,
        auth_client: AuthClient | None = None,
    ) -> None:
        super().__init__(session, request_id)
        self.repo = ProfileRepository(session)
        self.auth = auth_client or get_auth_client()

    async def get_users(self) -> ActionResult[list[UserDTO]]:
        """Every profile, newest first, with its email.

        A failing auth listing is logged and the users are returned
        without emails.
        """
        try:
            profiles = await self.repo.list_all()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to load profiles", error=str(e), request_id=self.request_id)
            return ActionResult.fail("Error al cargar los usuarios", DATA_ERROR)

        auth_users: list[AuthUser] = []
        try:
            auth_users = await self.auth.admin_list_users()
        except AuthClientError as e:
            logger.error(
                "Failed to list auth users",
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )

        return ActionResult.ok(merge_users(profiles, auth_users))

    async def create_user(self, data: dict[str, Any]) -> ActionResult[dict[str, str]]:
        """Provision an identity with a confirmed email and its profile.

        A failing profile write is logged but does not fail the call, since
        the identity already exists.

        Returns:
            ActionResult with ``{"user_id": ...}``.
        """
        try:
            payload = validate_input(CreateUserInput, data)
        except InputValidationError as e:
            return ActionResult.from_error(e)

        try:
            auth_user = await self.auth.admin_create_user(
                email=payload.email,
                password=payload.password,
                user_metadata={
                    "full_name": payload.full_name,
                    "avatar_url": payload.avatar_url,
                },
            )
        except AuthClientError as e:
            logger.error(
                "Failed to create auth user",
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )
            if any(marker in e.message for marker in DUPLICATE_EMAIL_MARKERS):
                return ActionResult.fail("Este email ya está registrado", EMAIL_TAKEN)
            return ActionResult.fail(e.message or "Error al crear el usuario", AUTH_SERVICE_ERROR)

        try:
            await self.repo.upsert(auth_user.id, payload.full_name, payload.avatar_url)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to create profile",
                user_id=auth_user.id,
                error=str(e),
                request_id=self.request_id,
            )

        get_route_invalidator().invalidate(USERS_ROUTE)
        logger.info("User created", user_id=auth_user.id, request_id=self.request_id)
        return ActionResult.ok({"user_id": auth_user.id})

    async def update_profile(self, user_id: str, data: dict[str, Any]) -> ActionResult[Profile]:
        """Update a user's full name and avatar."""

        async def operation() -> Profile:
            payload = validate_input(UpdateProfileInput, data)
            profile = await self.repo.get(Profile, user_id)
            if profile is None:
                raise NotFoundError("profile", user_id, "Usuario no encontrado")
            if payload.full_name is not None:
                profile.full_name = payload.full_name
            profile.avatar_url = payload.avatar_url
            await self.session.flush()
            return profile

        return await self._run(
            operation,
            error_message="Error al actualizar el perfil",
            event="Failed to update profile",
            invalidate=USERS_ROUTE,
            user_id=user_id,
        )

    async def delete_user(self, user_id: str) -> ActionResult[None]:
        """Delete the identity, then its profile.

        A failing profile delete is logged but does not fail the call.
        """
        try:
            await self.auth.admin_delete_user(user_id)
        except AuthClientError as e:
            logger.error(
                "Failed to delete auth user",
                user_id=user_id,
                error=e.message,
                status_code=e.status_code,
                request_id=self.request_id,
            )
            return ActionResult.fail("Error al eliminar el usuario", AUTH_SERVICE_ERROR)

        try:
            await self.repo.delete_by_id(Profile, user_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to delete profile",
                user_id=user_id,
                error=str(e),
                request_id=self.request_id,
            )

        get_route_invalidator().invalidate(USERS_ROUTE)
        logger.info("User deleted", user_id=user_id, request_id=self.request_id)
        return ActionResult.ok()

    async def get_profile(self, user_id: str) -> ActionResult[Profile]:
        """Profile of one user."""

        async def operation() -> Profile:
            profile = await self.repo.get(Profile, user_id)
            if profile is None:
                raise NotFoundError("profile", user_id, "Error al cargar el perfil")
            return profile

        return await self._run(
            operation,
            error_message="Error al cargar el perfil",
            event="Failed to load profile",
            user_id=user_id,
        )


def get_user_service(session: AsyncSession, request_id: str | None = None) -> UserService:
    """Get user service instance."""
    return UserService(session, request_id=request_id)
