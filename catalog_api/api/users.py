"""User admin API endpoints.

- GET /admin/users - users with profiles, newest first
- POST /admin/users - provision a user
- PATCH /admin/users/{id} - update a profile
- DELETE /admin/users/{id} - delete identity and profile
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, not_modified, unwrap
from catalog_api.api.schemas import (
    ErrorResponse,
    ProfileSchema,
    ProfileUpdateRequest,
    SuccessResponse,
    UserCreatedResponse,
    UserCreateRequest,
    UserSchema,
)
from catalog_api.application.revalidation import USERS_ROUTE
from catalog_api.application.user_service import UserService, get_user_service
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin/users", tags=["Users"])


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserService:
    """Get user service with request ID."""
    return get_user_service(session, request_id=get_request_id(request))


@router.get(
    "",
    response_model=list[UserSchema],
    summary="List users",
)
async def list_users(
    request: Request,
    response: Response,
    service: Annotated[UserService, Depends(get_service)],
) -> list[UserSchema] | Response:
    """Users with their profiles and emails."""
    cached = not_modified(request, response, USERS_ROUTE)
    if cached is not None:
        return cached
    users = unwrap(await service.get_users())
    return [UserSchema.model_validate(u) for u in users]


@router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Create user",
)
async def create_user(
    body: UserCreateRequest,
    service: Annotated[UserService, Depends(get_service)],
) -> UserCreatedResponse:
    """Provision a user with a confirmed email and a profile."""
    data = unwrap(await service.create_user(body.model_dump()))
    return UserCreatedResponse(user_id=data["user_id"])


@router.patch(
    "/{user_id}",
    response_model=ProfileSchema,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Update profile",
)
async def update_user(
    user_id: str,
    body: ProfileUpdateRequest,
    service: Annotated[UserService, Depends(get_service)],
) -> ProfileSchema:
    """Update a user's full name and avatar."""
    profile = unwrap(await service.update_profile(user_id, body.model_dump()))
    return ProfileSchema.model_validate(profile)


@router.delete(
    "/{user_id}",
    response_model=SuccessResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Delete user",
)
async def delete_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a user's identity and profile."""
    unwrap(await service.delete_user(user_id))
    return SuccessResponse()
