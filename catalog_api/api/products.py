"""Product admin API endpoints.

Provides endpoints for the product aggregate:
- GET /admin/products - product table
- POST /admin/products - create product with options and variants
- POST /admin/products/variants/generate - preview every combination
- GET /admin/products/{id} - product detail
- DELETE /admin/products/{id} - delete product, variants and option links
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, not_modified, unwrap
from catalog_api.api.schemas import (
    CategorySchema,
    ErrorResponse,
    FamilySchema,
    FeatureSchema,
    OptionWithFeaturesSchema,
    ProductCreateRequest,
    ProductDetailSchema,
    ProductListItemSchema,
    SubcategorySchema,
    SuccessResponse,
    VariantDraftSchema,
    VariantDraftsResponse,
    VariantFeatureSchema,
    VariantGenerateRequest,
    VariantSchema,
)
from catalog_api.application.product_service import ProductService, get_product_service
from catalog_api.application.revalidation import PRODUCTS_ROUTE
from catalog_api.catalog.models import Product
from catalog_api.catalog.slug import generate_product_slug
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProductService:
    """Get product service with request ID."""
    return get_product_service(session, request_id=get_request_id(request))


# ============================================================================
# Converters
# ============================================================================


def product_to_list_item(product: Product) -> ProductListItemSchema:
    """Convert a product (subcategory and variants loaded) to a table row."""
    return ProductListItemSchema(
        id=product.id,
        name=product.name,
        sku=product.sku,
        price=product.price,
        subcategory_id=product.subcategory_id,
        subcategory=SubcategorySchema.model_validate(product.subcategory)
        if product.subcategory
        else None,
        variant_count=len(product.variants),
        total_stock=sum(v.stock for v in product.variants),
        created_at=product.created_at,
    )


def product_to_detail(product: Product) -> ProductDetailSchema:
    """Convert a product loaded with all its relations to its detail schema."""
    subcategory = product.subcategory
    category = subcategory.category if subcategory else None
    family = category.family if category else None

    variants = [
        VariantSchema(
            id=variant.id,
            price=variant.price,
            stock=variant.stock,
            features=[
                VariantFeatureSchema(
                    id=feature.id,
                    value=feature.value,
                    option_id=feature.option_id,
                    option_name=feature.option.name if feature.option else None,
                )
                for feature in variant.features
            ],
        )
        for variant in product.variants
    ]

    options = [
        OptionWithFeaturesSchema(
            id=option.id,
            name=option.name,
            features=[FeatureSchema.model_validate(f) for f in option.features],
        )
        for option in product.options
    ]

    return ProductDetailSchema(
        id=product.id,
        name=product.name,
        slug=generate_product_slug(product.name, product.id),
        sku=product.sku,
        price=product.price,
        detail=product.detail,
        image_path=product.image_path,
        subcategory_id=product.subcategory_id,
        subcategory=SubcategorySchema.model_validate(subcategory) if subcategory else None,
        category=CategorySchema.model_validate(category) if category else None,
        family=FamilySchema.model_validate(family) if family else None,
        options=options,
        variants=variants,
        created_at=product.created_at,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[ProductListItemSchema],
    summary="List products",
)
async def list_products(
    request: Request,
    response: Response,
    service: Annotated[ProductService, Depends(get_service)],
) -> list[ProductListItemSchema] | Response:
    """Every product with its subcategory, newest first."""
    cached = not_modified(request, response, PRODUCTS_ROUTE)
    if cached is not None:
        return cached
    products = unwrap(await service.get_products())
    return [product_to_list_item(p) for p in products]


@router.post(
    "",
    response_model=ProductDetailSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Create product",
    description="Create a product with its option links and variants in one transaction.",
)
async def create_product(
    body: ProductCreateRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDetailSchema:
    """Create a product.

    Args:
        body: Basic info, selected options and variants.
        service: Product service.

    Returns:
        The created product with its relations.
    """
    product = unwrap(await service.create_product(body.model_dump()))
    return product_to_detail(product)


@router.post(
    "/variants/generate",
    response_model=VariantDraftsResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Generate variant drafts",
    description="One draft per combination of the selected options' features.",
)
async def generate_variants(
    body: VariantGenerateRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> VariantDraftsResponse:
    """Preview every feature combination of the selected options."""
    drafts = unwrap(
        await service.generate_variants(
            body.selected_options,
            base_price=body.base_price,
            existing_count=body.existing_count,
        )
    )
    return VariantDraftsResponse(
        variants=[VariantDraftSchema.model_validate(d) for d in drafts],
        count=len(drafts),
    )


@router.get(
    "/{product_id}",
    response_model=ProductDetailSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDetailSchema:
    """Product with subcategory, options and variants."""
    return product_to_detail(unwrap(await service.get_product_by_id(product_id)))


@router.delete(
    "/{product_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a product with its variants and option links."""
    unwrap(await service.delete_product(product_id))
    return SuccessResponse()
