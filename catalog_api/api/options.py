"""Option and feature API endpoints.

- GET /admin/options - options with features
- POST /admin/options, PATCH/DELETE /admin/options/{id}
- POST /admin/features, PATCH/DELETE /admin/features/{id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, not_modified, unwrap
from catalog_api.api.schemas import (
    ErrorResponse,
    FeatureCreateRequest,
    FeatureSchema,
    FeatureUpdateRequest,
    OptionCreateRequest,
    OptionSchema,
    OptionWithFeaturesSchema,
    SuccessResponse,
)
from catalog_api.application.option_service import OptionService, get_option_service
from catalog_api.application.revalidation import PRODUCTS_ROUTE
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin", tags=["Options"])

MUTATION_ERRORS = {
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> OptionService:
    """Get option service with request ID."""
    return get_option_service(session, request_id=get_request_id(request))


# ============================================================================
# Options
# ============================================================================


@router.get(
    "/options",
    response_model=list[OptionWithFeaturesSchema],
    summary="List options with features",
)
async def list_options(
    request: Request,
    response: Response,
    service: Annotated[OptionService, Depends(get_service)],
) -> list[OptionWithFeaturesSchema] | Response:
    """Options ordered by name, each with features ordered by value."""
    cached = not_modified(request, response, PRODUCTS_ROUTE)
    if cached is not None:
        return cached
    options = unwrap(await service.get_options_with_features())
    return [OptionWithFeaturesSchema.model_validate(o) for o in options]


@router.post(
    "/options",
    response_model=OptionSchema,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
    summary="Create option",
)
async def create_option(
    body: OptionCreateRequest,
    service: Annotated[OptionService, Depends(get_service)],
) -> OptionSchema:
    """Create an option."""
    return OptionSchema.model_validate(unwrap(await service.create_option(body.model_dump())))


@router.patch(
    "/options/{option_id}",
    response_model=OptionSchema,
    responses=MUTATION_ERRORS,
    summary="Rename option",
)
async def update_option(
    option_id: int,
    body: OptionCreateRequest,
    service: Annotated[OptionService, Depends(get_service)],
) -> OptionSchema:
    """Rename an option."""
    option = unwrap(await service.update_option(option_id, body.model_dump()))
    return OptionSchema.model_validate(option)


@router.delete(
    "/options/{option_id}",
    response_model=SuccessResponse,
    responses={**MUTATION_ERRORS, 409: {"model": ErrorResponse}},
    summary="Delete option",
)
async def delete_option(
    option_id: int,
    service: Annotated[OptionService, Depends(get_service)],
) -> SuccessResponse:
    """Delete an option with no features and no products."""
    unwrap(await service.delete_option(option_id))
    return SuccessResponse()


# ============================================================================
# Features
# ============================================================================


@router.post(
    "/features",
    response_model=FeatureSchema,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
    summary="Create feature",
)
async def create_feature(
    body: FeatureCreateRequest,
    service: Annotated[OptionService, Depends(get_service)],
) -> FeatureSchema:
    """Create a feature under an option."""
    return FeatureSchema.model_validate(unwrap(await service.create_feature(body.model_dump())))


@router.patch(
    "/features/{feature_id}",
    response_model=FeatureSchema,
    responses=MUTATION_ERRORS,
    summary="Update feature",
)
async def update_feature(
    feature_id: int,
    body: FeatureUpdateRequest,
    service: Annotated[OptionService, Depends(get_service)],
) -> FeatureSchema:
    """Change a feature's value. An ``option_id`` in the body is ignored."""
    feature = unwrap(await service.update_feature(feature_id, body.model_dump()))
    return FeatureSchema.model_validate(feature)


@router.delete(
    "/features/{feature_id}",
    response_model=SuccessResponse,
    responses={**MUTATION_ERRORS, 409: {"model": ErrorResponse}},
    summary="Delete feature",
)
async def delete_feature(
    feature_id: int,
    service: Annotated[OptionService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a feature no variant uses."""
    unwrap(await service.delete_feature(feature_id))
    return SuccessResponse()
