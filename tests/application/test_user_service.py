"""Tests for the user service."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.revalidation import USERS_ROUTE, get_route_invalidator
from catalog_api.application.user_service import UserService, merge_users
from catalog_api.catalog.models import Profile
from catalog_api.infrastructure.auth_client import AuthClientError, AuthUser

USER_ID = "6f1c2a9e-0000-4000-8000-000000000001"


@pytest.fixture
def auth() -> AsyncMock:
    """Auth client double."""
    client = AsyncMock()
    client.admin_create_user.return_value = AuthUser(id=USER_ID, email="ana@example.com")
    client.admin_list_users.return_value = []
    return client


@pytest.fixture
def new_user() -> dict:
    """Valid user creation payload."""
    return {
        "email": "Ana@Example.com",
        "password": "Secret123",
        "confirm_password": "Secret123",
        "full_name": "Ana García",
    }


async def _add_profile(session: AsyncSession, user_id: str, name: str) -> None:
    session.add(Profile(id=user_id, full_name=name))
    await session.commit()


class TestMergeUsers:
    """Joining profiles with auth identities."""

    def test_missing_identity(self) -> None:
        """Profiles without an identity keep an empty email and their own date."""
        created = datetime(2024, 1, 2, tzinfo=timezone.utc)
        profiles = [Profile(id="a", created_at=created), Profile(id="b", created_at=created)]
        auth_users = [AuthUser(id="b", email="b@example.com", created_at="2024-01-01T00:00:00Z")]

        users = merge_users(profiles, auth_users)

        assert [u.email for u in users] == ["", "b@example.com"]
        assert users[0].created_at == created.isoformat()
        assert users[1].created_at == "2024-01-01T00:00:00Z"


class TestGetUsers:
    """Listing."""

    async def test_lists_with_emails(self, session: AsyncSession, auth: AsyncMock) -> None:
        """Emails come from the auth service."""
        await _add_profile(session, USER_ID, "Ana García")
        auth.admin_list_users.return_value = [AuthUser(id=USER_ID, email="ana@example.com")]

        result = await UserService(session, auth_client=auth).get_users()

        assert [(u.id, u.email) for u in result.data] == [(USER_ID, "ana@example.com")]
        assert result.data[0].profile.full_name == "Ana García"

    async def test_auth_failure_keeps_profiles(self, session: AsyncSession, auth: AsyncMock) -> None:
        """A failing auth listing still returns the profiles."""
        await _add_profile(session, USER_ID, "Ana García")
        auth.admin_list_users.side_effect = AuthClientError("boom", 500)

        result = await UserService(session, auth_client=auth).get_users()

        assert result.success
        assert result.data[0].email == ""


class TestCreateUser:
    """Provisioning."""

    async def test_creates_identity_and_profile(
        self,
        session: AsyncSession,
        auth: AsyncMock,
        new_user: dict,
    ) -> None:
        """The identity is created confirmed, then the profile is stored."""
        before = get_route_invalidator().version(USERS_ROUTE)

        result = await UserService(session, auth_client=auth).create_user(new_user)

        assert result.data == {"user_id": USER_ID}
        auth.admin_create_user.assert_awaited_once()
        assert auth.admin_create_user.await_args.kwargs["email"] == "ana@example.com"
        profile = await session.get(Profile, USER_ID)
        assert profile.full_name == "Ana García"
        assert get_route_invalidator().version(USERS_ROUTE) == before + 1

    async def test_validation_skips_auth(
        self,
        session: AsyncSession,
        auth: AsyncMock,
        new_user: dict,
    ) -> None:
        """Invalid input never reaches the auth service."""
        new_user["confirm_password"] = "Other1234"

        result = await UserService(session, auth_client=auth).create_user(new_user)

        assert result.error == "Las contraseñas no coinciden"
        auth.admin_create_user.assert_not_awaited()

    @pytest.mark.parametrize(
        "message",
        [
            "A user with this email address has already been registered",
            "User already registered",
        ],
    )
    async def test_email_taken(
        self,
        session: AsyncSession,
        auth: AsyncMock,
        new_user: dict,
        message: str,
    ) -> None:
        """Duplicate emails get a dedicated message."""
        auth.admin_create_user.side_effect = AuthClientError(message, 422)

        result = await UserService(session, auth_client=auth).create_user(new_user)

        assert result.error_code == "EMAIL_TAKEN"
        assert result.error == "Este email ya está registrado"

    async def test_other_auth_error(self, session: AsyncSession, auth: AsyncMock, new_user: dict) -> None:
        """Other auth failures pass their message through."""
        auth.admin_create_user.side_effect = AuthClientError("Password is too weak", 422)

        result = await UserService(session, auth_client=auth).create_user(new_user)

        assert result.error_code == "AUTH_SERVICE_ERROR"
        assert result.error == "Password is too weak"


class TestUpdateAndDelete:
    """Profile updates and deletion."""

    async def test_update_profile(self, session: AsyncSession, auth: AsyncMock) -> None:
        """Name and avatar are replaced."""
        await _add_profile(session, USER_ID, "Ana García")

        result = await UserService(session, auth_client=auth).update_profile(
            USER_ID,
            {"full_name": "Ana G.", "avatar_url": "https://cdn.example.com/ana.png"},
        )

        assert result.data.full_name == "Ana G."
        assert result.data.avatar_url == "https://cdn.example.com/ana.png"

    async def test_update_missing(self, session: AsyncSession, auth: AsyncMock) -> None:
        """Unknown users are not found."""
        result = await UserService(session, auth_client=auth).update_profile(
            "missing", {"full_name": "Ana G."}
        )

        assert result.error_code == "NOT_FOUND"
        assert result.error == "Usuario no encontrado"

    async def test_delete(self, session: AsyncSession, auth: AsyncMock) -> None:
        """Identity first, then the profile."""
        await _add_profile(session, USER_ID, "Ana García")

        result = await UserService(session, auth_client=auth).delete_user(USER_ID)

        assert result.success
        auth.admin_delete_user.assert_awaited_once_with(USER_ID)
        assert await session.get(Profile, USER_ID) is None

    async def test_delete_auth_failure_keeps_profile(
        self,
        session: AsyncSession,
        auth: AsyncMock,
    ) -> None:
        """The profile stays if the identity could not be deleted."""
        await _add_profile(session, USER_ID, "Ana García")
        auth.admin_delete_user.side_effect = AuthClientError("User not found", 404)

        result = await UserService(session, auth_client=auth).delete_user(USER_ID)

        assert result.error_code == "AUTH_SERVICE_ERROR"
        assert result.error == "Error al eliminar el usuario"
        assert await session.get(Profile, USER_ID) is not None

    async def test_get_profile(self, session: AsyncSession, auth: AsyncMock) -> None:
        """Profiles are read by user id."""
        await _add_profile(session, USER_ID, "Ana García")

        result = await UserService(session, auth_client=auth).get_profile(USER_ID)

        assert result.data.full_name == "Ana García"
