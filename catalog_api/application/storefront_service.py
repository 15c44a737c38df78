"""Storefront application service.

Public read path of the catalog:
- Filtered, name-ordered, offset-paginated product listing
- Product detail addressed by slug, with SEO metadata
- Filter panel data (taxonomy tree and price range)
- Product counts and sitemap entries
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import ActionResult
from catalog_api.catalog import seo
from catalog_api.catalog.models import Category, Family, Product, Subcategory
from catalog_api.catalog.repository import ProductRepository, TaxonomyRepository
from catalog_api.catalog.slug import extract_id_from_slug, generate_product_slug
from catalog_api.domain.exceptions import NotFoundError
from catalog_api.domain.value_objects import CatalogFilter, PriceRange
from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()

# Filter panel range when the catalog has no products.
DEFAULT_PRICE_RANGE = PriceRange(min=0, max=1000)


# ============================================================================
# Storefront Data Transfer Objects
# ============================================================================


@dataclass
class ProductSummary:
    """Product card as shown in the public listing.

    Attributes:
        min_price: Lowest of the base price and every variant price set.
        max_price: Highest of the base price and every variant price set.
        has_stock: True if a variant has stock, or the product has none.
    """

    id: int
    name: str
    slug: str
    sku: str
    price: float
    detail: str | None
    image_path: str | None
    subcategory_id: int
    subcategory_name: str | None
    category_id: int | None
    category_name: str | None
    family_id: int | None
    family_name: str | None
    variant_count: int
    min_price: float
    max_price: float
    has_stock: bool


@dataclass
class ProductPage:
    """One page of the public listing."""

    items: list[ProductSummary]
    offset: int
    limit: int
    title: str
    description: str

    @property
    def has_more(self) -> bool:
        """A full page means there may be more products after it."""
        return len(self.items) == self.limit

    @property
    def next_offset(self) -> int | None:
        """Offset of the next page, if any."""
        return self.offset + len(self.items) if self.has_more else None


@dataclass
class ProductDetail:
    """Product detail page: the product, its summary and SEO metadata."""

    product: Product
    summary: ProductSummary
    title: str
    description: str
    canonical_url: str
    json_ld: dict[str, Any]


@dataclass
class FiltersData:
    """Filter panel: taxonomy tree and base price range."""

    families: Sequence[Family]
    price_range: PriceRange


@dataclass
class SitemapEntry:
    """One ``<url>`` of the sitemap."""

    loc: str
    changefreq: str
    priority: float


@dataclass
class Sitemap:
    """Sitemap entries, home page first."""

    entries: list[SitemapEntry] = field(default_factory=list)


def summarize_product(product: Product) -> ProductSummary:
    """Project a product (variants and taxonomy chain loaded) to a card.

    Variants without their own price fall back to the base price, so the
    base price always takes part in the min/max.

    Example:
        Base 10 with variant prices 8, 12 and unset gives min 8, max 12.
    """
    variants = product.variants
    prices = PriceRange.from_prices([product.price] + [v.price for v in variants])
    has_stock = not variants or any(v.stock > 0 for v in variants)

    subcategory = product.subcategory
    category = subcategory.category if subcategory else None
    family = category.family if category else None

    return ProductSummary(
        id=product.id,
        name=product.name,
        slug=generate_product_slug(product.name, product.id),
        sku=product.sku,
        price=product.price,
        detail=product.detail,
        image_path=product.image_path,
        subcategory_id=product.subcategory_id,
        subcategory_name=subcategory.name if subcategory else None,
        category_id=category.id if category else None,
        category_name=category.name if category else None,
        family_id=family.id if family else None,
        family_name=family.name if family else None,
        variant_count=len(variants),
        min_price=prices.min,
        max_price=prices.max,
        has_stock=has_stock,
    )


class StorefrontService(SessionService):
    """Service for the public catalog."""

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        super().__init__(session, request_id)
        self.products = ProductRepository(session)
        self.taxonomy = TaxonomyRepository(session)

    async def _filter_names(
        self,
        filters: CatalogFilter,
    ) -> tuple[str | None, str | None, str | None]:
        """Names of the family, category and subcategory a filter points at."""
        names: list[str | None] = []
        for model, entity_id in (
            (Family, filters.family_id),
            (Category, filters.category_id),
            (Subcategory, filters.subcategory_id),
        ):
            entity = await self.taxonomy.get(model, entity_id) if entity_id else None
            names.append(entity.name if entity else None)
        return names[0], names[1], names[2]

    async def get_public_products(
        self,
        filters: CatalogFilter,
        offset: int = 0,
        limit: int | None = None,
    ) -> ActionResult[ProductPage]:
        """One page of the public listing.

        Args:
            filters: Parsed storefront filter.
            offset: Number of products to skip.
            limit: Page size; defaults to the configured page size.
        """
        page_size = limit or settings.default_page_size

        async def operation() -> ProductPage:
            products = await self.products.find_public(filters, offset=offset, limit=page_size)
            family, category, subcategory = await self._filter_names(filters)
            return ProductPage(
                items=[summarize_product(p) for p in products],
                offset=offset,
                limit=page_size,
                title=seo.generate_products_title(family, category, subcategory),
                description=seo.generate_products_description(family, category, subcategory),
            )

        return await self._run(
            operation,
            error_message="Error al cargar los productos",
            event="Failed to load public products",
            filters=filters.to_query_params(),
        )

    async def get_product_count(self, filters: CatalogFilter) -> ActionResult[int]:
        """Number of products matching a storefront filter."""

        async def operation() -> int:
            return await self.products.count_public(filters)

        return await self._run(
            operation,
            error_message="Error al cargar los productos",
            event="Failed to count products",
            filters=filters.to_query_params(),
        )

    async def get_product_by_slug(self, slug: str) -> ActionResult[ProductDetail]:
        """Product detail addressed by ``<name>-<id>``.

        Only the trailing id is used for the lookup.
        """

        async def operation() -> ProductDetail:
            product_id = extract_id_from_slug(slug)
            product = await self.products.get_with_relations(product_id)
            if product is None:
                raise NotFoundError("product", product_id, "Producto no encontrado")

            summary = summarize_product(product)
            url = f"{settings.app_url.rstrip('/')}/{summary.slug}"
            description = seo.generate_product_description(
                product.name, product.detail, product.price, settings.currency
            )
            return ProductDetail(
                product=product,
                summary=summary,
                title=seo.generate_product_title(product.name, product.price, settings.currency),
                description=description,
                canonical_url=url,
                json_ld=seo.generate_product_json_ld(
                    name=product.name,
                    description=product.detail,
                    price=product.price,
                    sku=product.sku,
                    image_path=product.image_path,
                    url=url,
                    in_stock=summary.has_stock,
                    currency=settings.currency,
                ),
            )

        return await self._run(
            operation,
            error_message="Error al cargar el producto",
            event="Failed to load product by slug",
            slug=slug,
        )

    async def get_filters_data(self) -> ActionResult[FiltersData]:
        """Taxonomy tree and base price range for the filter panel."""

        async def operation() -> FiltersData:
            families = await self.taxonomy.family_tree()
            low, high = await self.products.price_bounds()
            return FiltersData(
                families=families,
                price_range=PriceRange.from_prices([low, high], default=DEFAULT_PRICE_RANGE),
            )

        return await self._run(
            operation,
            error_message="Error al cargar los filtros",
            event="Failed to load filters",
        )

    async def get_sitemap_entries(self, base_url: str | None = None) -> ActionResult[Sitemap]:
        """Home page plus one entry per product.

        Args:
            base_url: Public site URL; defaults to the configured app URL.
        """
        root = (base_url or settings.app_url).rstrip("/")

        async def operation() -> Sitemap:
            sitemap = Sitemap(entries=[SitemapEntry(loc=root, changefreq="daily", priority=1.0)])
            for product_id, name in await self.products.list_for_sitemap():
                sitemap.entries.append(
                    SitemapEntry(
                        loc=f"{root}/{generate_product_slug(name, product_id)}",
                        changefreq="weekly",
                        priority=0.8,
                    )
                )
            return sitemap

        return await self._run(
            operation,
            error_message="Error al cargar los productos",
            event="Failed to build sitemap",
        )


def get_storefront_service(
    session: AsyncSession,
    request_id: str | None = None,
) -> StorefrontService:
    """Get storefront service instance."""
    return StorefrontService(session, request_id=request_id)
