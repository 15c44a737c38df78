"""Repositories for catalog database operations.

Thin query layer over the async session: ordered listings, lookups,
existence checks for delete guards, the product aggregate writes and the
storefront filtering query.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, selectinload

from catalog_api.catalog.models import (
    Category,
    Family,
    Feature,
    Option,
    OptionProduct,
    Product,
    Profile,
    Subcategory,
    Variant,
    VariantFeature,
)
from catalog_api.domain.value_objects import CatalogFilter

ModelT = TypeVar("ModelT")


class BaseRepository:
    """Shared helpers bound to one session."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get(self, model: type[ModelT], entity_id: Any) -> ModelT | None:
        """Get a row by primary key."""
        return await self.session.get(model, entity_id)

    async def add(self, entity: ModelT) -> ModelT:
        """Insert a row and flush to obtain its id."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def exists(self, column: InstrumentedAttribute, value: Any) -> bool:
        """Existence check: is there at least one row with ``column == value``?

        Issues a ``LIMIT 1`` query on the column's table.
        """
        query = select(column).where(column == value).limit(1)
        result = await self.session.execute(query)
        return result.first() is not None

    async def delete_by_id(self, model: type[ModelT], entity_id: Any) -> int:
        """Delete a row by primary key.

        Returns:
            Number of deleted rows.
        """
        result = await self.session.execute(
            delete(model).where(model.id == entity_id)  # type: ignore[attr-defined]
        )
        await self.session.flush()
        return result.rowcount or 0


# ============================================================================
# Taxonomy
# ============================================================================


class TaxonomyRepository(BaseRepository):
    """Families, categories and subcategories."""

    async def list_families(self) -> Sequence[Family]:
        """All families ordered by name."""
        result = await self.session.execute(select(Family).order_by(Family.name, Family.id))
        return result.scalars().all()

    async def family_tree(self) -> Sequence[Family]:
        """Families with their categories and subcategories, all ordered by name."""
        query = (
            select(Family)
            .options(selectinload(Family.categories).selectinload(Category.subcategories))
            .order_by(Family.name, Family.id)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def list_categories(self) -> Sequence[Category]:
        """All categories ordered by name."""
        result = await self.session.execute(select(Category).order_by(Category.name, Category.id))
        return result.scalars().all()

    async def list_subcategories(self) -> Sequence[Subcategory]:
        """All subcategories ordered by name."""
        result = await self.session.execute(
            select(Subcategory).order_by(Subcategory.name, Subcategory.id)
        )
        return result.scalars().all()

    async def rename(self, entity: Family | Category | Subcategory, name: str) -> Any:
        """Change only the name of a taxonomy node."""
        entity.name = name
        await self.session.flush()
        return entity

    async def count(self, model: type[Family] | type[Category] | type[Subcategory]) -> int:
        """Count rows of a taxonomy table."""
        result = await self.session.execute(select(func.count(model.id)))
        return result.scalar_one()


# ============================================================================
# Options & Features
# ============================================================================


class OptionRepository(BaseRepository):
    """Global options and their features."""

    async def list_options(self, option_ids: Sequence[int] | None = None) -> Sequence[Option]:
        """Options ordered by name, with features loaded (ordered by value).

        Args:
            option_ids: Restrict to these ids when given.
        """
        query = select(Option).options(selectinload(Option.features)).order_by(Option.name, Option.id)
        if option_ids is not None:
            query = query.where(Option.id.in_(option_ids))
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_features(self, feature_ids: Sequence[int]) -> Sequence[Feature]:
        """Features by id."""
        if not feature_ids:
            return []
        result = await self.session.execute(select(Feature).where(Feature.id.in_(feature_ids)))
        return result.scalars().all()


# ============================================================================
# Products
# ============================================================================


class ProductRepository(BaseRepository):
    """Products, their option links and variants.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_public(
                CatalogFilter(subcategory_id=5),
                limit=20,
            )
    """

    async def list_with_subcategory(self) -> Sequence[Product]:
        """Admin listing: every product with its subcategory, newest first."""
        query = (
            select(Product)
            .options(selectinload(Product.subcategory), selectinload(Product.variants))
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_with_relations(self, product_id: int) -> Product | None:
        """Product with its taxonomy chain, options+features and variants+features."""
        query = (
            select(Product)
            .where(Product.id == product_id)
            .options(
                selectinload(Product.subcategory)
                .selectinload(Subcategory.category)
                .selectinload(Category.family),
                selectinload(Product.options).selectinload(Option.features),
                selectinload(Product.variants)
                .selectinload(Variant.features)
                .selectinload(Feature.option),
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def add_option_links(self, product_id: int, option_ids: Sequence[int]) -> None:
        """Link a product to its selected options."""
        self.session.add_all(
            [OptionProduct(product_id=product_id, option_id=option_id) for option_id in option_ids]
        )
        await self.session.flush()

    async def add_variant(
        self,
        product_id: int,
        price: float | None,
        stock: int,
        feature_ids: Sequence[int],
    ) -> Variant:
        """Insert a variant row, then its feature links."""
        variant = Variant(product_id=product_id, price=price, stock=stock)
        await self.add(variant)
        if feature_ids:
            self.session.add_all(
                [VariantFeature(variant_id=variant.id, feature_id=fid) for fid in feature_ids]
            )
            await self.session.flush()
        return variant

    async def delete_cascade(self, product_id: int) -> int:
        """Delete a product and everything hanging from it.

        Order: variant-feature links, variants, option links, product.

        Returns:
            Number of product rows deleted (0 or 1).
        """
        variant_ids = select(Variant.id).where(Variant.product_id == product_id)
        await self.session.execute(
            delete(VariantFeature).where(VariantFeature.variant_id.in_(variant_ids))
        )
        await self.session.execute(delete(Variant).where(Variant.product_id == product_id))
        await self.session.execute(
            delete(OptionProduct).where(OptionProduct.product_id == product_id)
        )
        return await self.delete_by_id(Product, product_id)

    def _public_conditions(self, filters: CatalogFilter) -> list[Any]:
        conditions: list[Any] = []

        # Most specific taxonomy level wins.
        if filters.subcategory_id is not None:
            conditions.append(Product.subcategory_id == filters.subcategory_id)
        elif filters.category_id is not None:
            conditions.append(Subcategory.category_id == filters.category_id)
        elif filters.family_id is not None:
            conditions.append(Category.family_id == filters.family_id)

        if filters.min_price is not None:
            conditions.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Product.price <= filters.max_price)

        return conditions

    def _public_query(self, filters: CatalogFilter, *columns: Any) -> Any:
        query = (
            select(*columns)
            .select_from(Product)
            .join(Subcategory, Product.subcategory_id == Subcategory.id)
            .join(Category, Subcategory.category_id == Category.id)
        )
        conditions = self._public_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))
        return query

    async def find_public(
        self,
        filters: CatalogFilter,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[Product]:
        """Storefront page: filtered, ordered by name, offset-paginated.

        Category and family filters constrain the subcategory → category
        parent chain through joins.
        """
        query = (
            self._public_query(filters, Product)
            .options(
                selectinload(Product.subcategory)
                .selectinload(Subcategory.category)
                .selectinload(Category.family),
                selectinload(Product.variants),
            )
            .order_by(Product.name.asc(), Product.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_public(self, filters: CatalogFilter) -> int:
        """Number of products matching a storefront filter."""
        result = await self.session.execute(self._public_query(filters, func.count(Product.id)))
        return result.scalar_one()

    async def price_bounds(self) -> tuple[float | None, float | None]:
        """Lowest and highest base price in the catalog."""
        result = await self.session.execute(select(func.min(Product.price), func.max(Product.price)))
        low, high = result.one()
        return (
            float(low) if low is not None else None,
            float(high) if high is not None else None,
        )

    async def list_for_sitemap(self) -> Sequence[tuple[int, str]]:
        """(id, name) of every product ordered by id."""
        result = await self.session.execute(select(Product.id, Product.name).order_by(Product.id))
        return [(row.id, row.name) for row in result.all()]


# ============================================================================
# Profiles
# ============================================================================


class ProfileRepository(BaseRepository):
    """User profiles."""

    async def list_all(self) -> Sequence[Profile]:
        """Profiles, newest first."""
        result = await self.session.execute(
            select(Profile).order_by(Profile.created_at.desc(), Profile.id)
        )
        return result.scalars().all()

    async def upsert(self, user_id: str, full_name: str | None, avatar_url: str | None) -> Profile:
        """Create or overwrite the profile of a user."""
        profile = await self.session.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id)
            self.session.add(profile)
        profile.full_name = full_name
        profile.avatar_url = avatar_url
        await self.session.flush()
        return profile
