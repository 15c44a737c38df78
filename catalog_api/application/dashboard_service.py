"""Dashboard application service.

Inventory statistics for the admin dashboard home: overview counters, top
products by stock and per-category / per-family breakdowns.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import ActionResult
from catalog_api.catalog.models import Family, Product, Variant
from catalog_api.catalog.repository import ProductRepository, TaxonomyRepository

logger = structlog.get_logger()

LOW_STOCK_THRESHOLD = 10
TOP_PRODUCTS_LIMIT = 5


# ============================================================================
# Dashboard Data Transfer Objects
# ============================================================================


@dataclass
class OverviewStats:
    """Catalog-wide counters."""

    total_products: int = 0
    total_variants: int = 0
    total_stock: int = 0
    total_inventory_value: float = 0.0
    total_families: int = 0
    total_categories: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0


@dataclass
class TopProduct:
    """Product ranked by total stock."""

    id: int
    name: str
    sku: str
    price: float
    total_stock: int
    variant_count: int


@dataclass
class CategoryStats:
    """Per-category product statistics."""

    category_name: str
    product_count: int
    total_stock: int
    average_price: float


@dataclass
class FamilyStats:
    """Per-family product statistics."""

    family_name: str
    category_count: int
    product_count: int
    total_value: float


@dataclass
class DashboardStats:
    """Everything the dashboard home shows."""

    overview: OverviewStats
    top_products: list[TopProduct] = field(default_factory=list)
    categories: list[CategoryStats] = field(default_factory=list)
    families: list[FamilyStats] = field(default_factory=list)


def _variant_value(variant: Variant, product: Product) -> float:
    price = variant.price if variant.price is not None else product.price
    return price * variant.stock


def _product_stock(product: Product) -> int:
    return sum(v.stock for v in product.variants)


def _product_value(product: Product) -> float:
    return sum(_variant_value(v, product) for v in product.variants)


def compute_overview(families: Sequence[Family], products: Sequence[Product]) -> OverviewStats:
    """Overview counters.

    Low stock means ``0 < stock < 10``; out of stock means ``stock == 0``.
    Inventory value prices each variant at its own price, or the base price
    when it has none.
    """
    stats = OverviewStats(
        total_products=len(products),
        total_families=len(families),
        total_categories=sum(len(f.categories) for f in families),
    )
    for product in products:
        for variant in product.variants:
            stats.total_variants += 1
            stats.total_stock += variant.stock
            stats.total_inventory_value += _variant_value(variant, product)
            if variant.stock == 0:
                stats.out_of_stock_count += 1
            elif variant.stock < LOW_STOCK_THRESHOLD:
                stats.low_stock_count += 1
    return stats


def compute_top_products(
    products: Sequence[Product],
    limit: int = TOP_PRODUCTS_LIMIT,
) -> list[TopProduct]:
    """Products with the most total stock, highest first."""
    ranked = [
        TopProduct(
            id=p.id,
            name=p.name,
            sku=p.sku,
            price=p.price,
            total_stock=_product_stock(p),
            variant_count=len(p.variants),
        )
        for p in products
    ]
    ranked.sort(key=lambda t: (-t.total_stock, t.id))
    return ranked[:limit]


def compute_breakdowns(
    families: Sequence[Family],
    products: Sequence[Product],
) -> tuple[list[CategoryStats], list[FamilyStats]]:
    """Per-category stats (by product count) and per-family stats (by value)."""
    by_subcategory: dict[int, list[Product]] = defaultdict(list)
    for product in products:
        by_subcategory[product.subcategory_id].append(product)

    category_stats: list[CategoryStats] = []
    family_stats: list[FamilyStats] = []

    for family in families:
        family_products: list[Product] = []
        for category in family.categories:
            category_products = [
                p for sub in category.subcategories for p in by_subcategory.get(sub.id, [])
            ]
            family_products.extend(category_products)
            count = len(category_products)
            category_stats.append(
                CategoryStats(
                    category_name=category.name,
                    product_count=count,
                    total_stock=sum(_product_stock(p) for p in category_products),
                    average_price=(sum(p.price for p in category_products) / count) if count else 0.0,
                )
            )
        family_stats.append(
            FamilyStats(
                family_name=family.name,
                category_count=len(family.categories),
                product_count=len(family_products),
                total_value=sum(_product_value(p) for p in family_products),
            )
        )

    category_stats.sort(key=lambda c: -c.product_count)
    family_stats.sort(key=lambda f: -f.total_value)
    return category_stats, family_stats


class DashboardService(SessionService):
    """Service for dashboard statistics."""

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        super().__init__(session, request_id)
        self.products = ProductRepository(session)
        self.taxonomy = TaxonomyRepository(session)

    async def get_dashboard_stats(self) -> ActionResult[DashboardStats]:
        """Overview, top products and breakdowns in one pass over the catalog."""

        async def operation() -> DashboardStats:
            families = await self.taxonomy.family_tree()
            products = await self.products.list_with_subcategory()
            categories, family_stats = compute_breakdowns(families, products)
            return DashboardStats(
                overview=compute_overview(families, products),
                top_products=compute_top_products(products),
                categories=categories,
                families=family_stats,
            )

        return await self._run(
            operation,
            error_message="Error al cargar las estadísticas",
            event="Failed to load dashboard stats",
        )


def get_dashboard_service(session: AsyncSession, request_id: str | None = None) -> DashboardService:
    """Get dashboard service instance."""
    return DashboardService(session, request_id=request_id)
