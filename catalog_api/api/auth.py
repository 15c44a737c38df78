"""Admin session API endpoints.

- POST /admin/login - password login (public)
- POST /admin/logout - revoke the current access token
- GET /admin/me - current user and profile
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, unwrap
from catalog_api.api.schemas import (
    AuthUserSchema,
    ErrorResponse,
    LoginRequest,
    MeResponse,
    ProfileSchema,
    SessionResponse,
    SuccessResponse,
)
from catalog_api.application.auth_service import AuthService, get_auth_service
from catalog_api.application.user_service import get_user_service
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin", tags=["Session"])


def get_service(request: Request) -> AuthService:
    """Get auth service with request ID."""
    return get_auth_service(request_id=get_request_id(request))


def require_access_token(request: Request) -> str:
    """Access token validated by the admin auth middleware.

    Raises:
        HTTPException: If the request was authenticated with the admin API
            key, which carries no user session.
    """
    token = getattr(request.state, "access_token", None)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "UNAUTHORIZED",
                "message": "Usuario no autenticado",
            },
        )
    return token


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Log in",
)
async def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_service)],
) -> SessionResponse:
    """Sign in with email and password and return session tokens."""
    return SessionResponse.model_validate(unwrap(await service.login(body.model_dump())))


@router.post(
    "/logout",
    response_model=SuccessResponse,
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Log out",
)
async def logout(
    token: Annotated[str, Depends(require_access_token)],
    service: Annotated[AuthService, Depends(get_service)],
) -> SuccessResponse:
    """Revoke the current session."""
    unwrap(await service.logout(token))
    return SuccessResponse()


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Current user",
)
async def me(
    request: Request,
    token: Annotated[str, Depends(require_access_token)],
    service: Annotated[AuthService, Depends(get_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MeResponse:
    """Current user with profile (``null`` when the profile is missing)."""
    user = unwrap(await service.get_current_user(token))
    profile_result = await get_user_service(
        session, request_id=get_request_id(request)
    ).get_profile(user.id)
    return MeResponse(
        user=AuthUserSchema.model_validate(user),
        profile=ProfileSchema.model_validate(profile_result.data)
        if profile_result.success
        else None,
    )
