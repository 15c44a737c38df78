"""Public storefront API endpoints.

- GET /products - filtered, paginated listing
- GET /products/count - number of products matching the filters
- GET /products/filters - filter panel data
- GET /products/{slug} - product detail with SEO metadata
- GET /sitemap.xml - sitemap of the public site

Filters use the query parameters ``familia``, ``categoria``,
``subcategoria``, ``precioMin`` and ``precioMax``.
"""

from typing import Annotated
from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, unwrap
from catalog_api.api.products import product_to_detail
from catalog_api.api.schemas import (
    ErrorResponse,
    FamilyTreeSchema,
    FiltersResponse,
    PriceRangeSchema,
    ProductCountResponse,
    ProductPageResponse,
    ProductSummarySchema,
    PublicProductResponse,
    SeoSchema,
)
from catalog_api.application.storefront_service import StorefrontService, get_storefront_service
from catalog_api.domain.value_objects import CatalogFilter
from catalog_api.infrastructure.database import get_session

router = APIRouter(tags=["Storefront"])


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> StorefrontService:
    """Get storefront service with request ID."""
    return get_storefront_service(session, request_id=get_request_id(request))


def get_filters(request: Request) -> CatalogFilter:
    """Parse the storefront filter from the query string."""
    return CatalogFilter.from_query_params(request.query_params)


@router.get(
    "/products",
    response_model=ProductPageResponse,
    summary="List products",
    description="Products ordered by name, filtered by taxonomy and base price.",
)
async def list_products(
    service: Annotated[StorefrontService, Depends(get_service)],
    filters: Annotated[CatalogFilter, Depends(get_filters)],
    offset: int = Query(default=0, ge=0, description="Products to skip"),
    limit: int | None = Query(default=None, ge=1, le=100, description="Page size"),
) -> ProductPageResponse:
    """One page of the public listing.

    A full page sets ``has_more``; request the next one with
    ``offset=next_offset``.
    """
    page = unwrap(await service.get_public_products(filters, offset=offset, limit=limit))
    return ProductPageResponse(
        items=[ProductSummarySchema.model_validate(item) for item in page.items],
        offset=page.offset,
        limit=page.limit,
        has_more=page.has_more,
        next_offset=page.next_offset,
        title=page.title,
        description=page.description,
    )


@router.get(
    "/products/count",
    response_model=ProductCountResponse,
    summary="Count products",
)
async def count_products(
    service: Annotated[StorefrontService, Depends(get_service)],
    filters: Annotated[CatalogFilter, Depends(get_filters)],
) -> ProductCountResponse:
    """Number of products matching the filters."""
    return ProductCountResponse(count=unwrap(await service.get_product_count(filters)))


@router.get(
    "/products/filters",
    response_model=FiltersResponse,
    summary="Filter panel data",
)
async def filters_data(
    service: Annotated[StorefrontService, Depends(get_service)],
) -> FiltersResponse:
    """Taxonomy tree and base price range."""
    data = unwrap(await service.get_filters_data())
    return FiltersResponse(
        families=[FamilyTreeSchema.model_validate(f) for f in data.families],
        price_range=PriceRangeSchema.model_validate(data.price_range),
    )


@router.get(
    "/products/{slug}",
    response_model=PublicProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get product by slug",
)
async def get_product(
    slug: str,
    service: Annotated[StorefrontService, Depends(get_service)],
) -> PublicProductResponse:
    """Product detail addressed by ``<name>-<id>``."""
    detail = unwrap(await service.get_product_by_slug(slug))
    return PublicProductResponse(
        product=product_to_detail(detail.product),
        summary=ProductSummarySchema.model_validate(detail.summary),
        seo=SeoSchema(
            title=detail.title,
            description=detail.description,
            canonical_url=detail.canonical_url,
            json_ld=detail.json_ld,
        ),
    )


@router.get(
    "/sitemap.xml",
    response_class=Response,
    summary="Sitemap",
)
async def sitemap(
    service: Annotated[StorefrontService, Depends(get_service)],
) -> Response:
    """Sitemap: home page plus one URL per product."""
    entries = unwrap(await service.get_sitemap_entries()).entries
    urls = "".join(
        "<url>"
        f"<loc>{escape(entry.loc)}</loc>"
        f"<changefreq>{entry.changefreq}</changefreq>"
        f"<priority>{entry.priority:.1f}</priority>"
        "</url>"
        for entry in entries
    )
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        f"{urls}"
        "</urlset>"
    )
    return Response(content=body, media_type="application/xml")
