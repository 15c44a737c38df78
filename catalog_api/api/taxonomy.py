"""Taxonomy API endpoints.

Provides endpoints for the Family → Category → Subcategory tree:
- GET /admin/families - whole tree ordered by name
- POST /admin/families - create a family
- PATCH/DELETE /admin/families/{id} - rename / delete a family
- POST, PATCH/DELETE /admin/categories[/{id}] - same for categories
- POST, PATCH/DELETE /admin/subcategories[/{id}] - same for subcategories

Deletes are refused with 409 while the node has children.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, not_modified, unwrap
from catalog_api.api.schemas import (
    CategoryCreateRequest,
    CategorySchema,
    CategoryUpdateRequest,
    ErrorResponse,
    FamilyCreateRequest,
    FamilySchema,
    FamilyTreeSchema,
    SubcategoryCreateRequest,
    SubcategorySchema,
    SubcategoryUpdateRequest,
    SuccessResponse,
)
from catalog_api.application.revalidation import FAMILIES_ROUTE
from catalog_api.application.taxonomy_service import TaxonomyService, get_taxonomy_service
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin", tags=["Taxonomy"])

MUTATION_ERRORS = {
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TaxonomyService:
    """Get taxonomy service with request ID."""
    return get_taxonomy_service(session, request_id=get_request_id(request))


# ============================================================================
# Families
# ============================================================================


@router.get(
    "/families",
    response_model=list[FamilyTreeSchema],
    responses={304: {"description": "Tree unchanged since the given ETag"}},
    summary="Get taxonomy tree",
)
async def list_families(
    request: Request,
    response: Response,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> list[FamilyTreeSchema] | Response:
    """Families with categories and subcategories, every level ordered by name."""
    cached = not_modified(request, response, FAMILIES_ROUTE)
    if cached is not None:
        return cached
    families = unwrap(await service.get_families_with_relations())
    return [FamilyTreeSchema.model_validate(f) for f in families]


@router.post(
    "/families",
    response_model=FamilySchema,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
    summary="Create family",
)
async def create_family(
    body: FamilyCreateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> FamilySchema:
    """Create a family."""
    family = unwrap(await service.create_family(body.model_dump()))
    return FamilySchema.model_validate(family)


@router.patch(
    "/families/{family_id}",
    response_model=FamilySchema,
    responses=MUTATION_ERRORS,
    summary="Rename family",
)
async def update_family(
    family_id: int,
    body: FamilyCreateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> FamilySchema:
    """Rename a family."""
    family = unwrap(await service.update_family(family_id, body.model_dump()))
    return FamilySchema.model_validate(family)


@router.delete(
    "/families/{family_id}",
    response_model=SuccessResponse,
    responses={**MUTATION_ERRORS, 409: {"model": ErrorResponse}},
    summary="Delete family",
)
async def delete_family(
    family_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a family that has no categories."""
    unwrap(await service.delete_family(family_id))
    return SuccessResponse()


# ============================================================================
# Categories
# ============================================================================


@router.post(
    "/categories",
    response_model=CategorySchema,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
    summary="Create category",
)
async def create_category(
    body: CategoryCreateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> CategorySchema:
    """Create a category under a family."""
    category = unwrap(await service.create_category(body.model_dump()))
    return CategorySchema.model_validate(category)


@router.patch(
    "/categories/{category_id}",
    response_model=CategorySchema,
    responses=MUTATION_ERRORS,
    summary="Rename category",
)
async def update_category(
    category_id: int,
    body: CategoryUpdateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> CategorySchema:
    """Rename a category. A ``family_id`` in the body is ignored."""
    category = unwrap(await service.update_category(category_id, body.model_dump()))
    return CategorySchema.model_validate(category)


@router.delete(
    "/categories/{category_id}",
    response_model=SuccessResponse,
    responses={**MUTATION_ERRORS, 409: {"model": ErrorResponse}},
    summary="Delete category",
)
async def delete_category(
    category_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a category that has no subcategories."""
    unwrap(await service.delete_category(category_id))
    return SuccessResponse()


# ============================================================================
# Subcategories
# ============================================================================


@router.post(
    "/subcategories",
    response_model=SubcategorySchema,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
    summary="Create subcategory",
)
async def create_subcategory(
    body: SubcategoryCreateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> SubcategorySchema:
    """Create a subcategory under a category."""
    subcategory = unwrap(await service.create_subcategory(body.model_dump()))
    return SubcategorySchema.model_validate(subcategory)


@router.patch(
    "/subcategories/{subcategory_id}",
    response_model=SubcategorySchema,
    responses=MUTATION_ERRORS,
    summary="Rename subcategory",
)
async def update_subcategory(
    subcategory_id: int,
    body: SubcategoryUpdateRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> SubcategorySchema:
    """Rename a subcategory. A ``category_id`` in the body is ignored."""
    subcategory = unwrap(await service.update_subcategory(subcategory_id, body.model_dump()))
    return SubcategorySchema.model_validate(subcategory)


@router.delete(
    "/subcategories/{subcategory_id}",
    response_model=SuccessResponse,
    responses={**MUTATION_ERRORS, 409: {"model": ErrorResponse}},
    summary="Delete subcategory",
)
async def delete_subcategory(
    subcategory_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a subcategory that has no products."""
    unwrap(await service.delete_subcategory(subcategory_id))
    return SuccessResponse()
