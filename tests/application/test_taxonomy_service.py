"""Tests for the taxonomy service."""

from unittest.mock import AsyncMock, patch

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.application.revalidation import FAMILIES_ROUTE, get_route_invalidator
from catalog_api.application.taxonomy_service import TaxonomyService
from catalog_api.catalog.models import Category, Family, Subcategory
from catalog_api.catalog.repository import TaxonomyRepository


async def count_rows(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestFamilies:
    """Family CRUD."""

    async def test_create_strips_name(self, session: AsyncSession) -> None:
        """Names are stored without surrounding whitespace."""
        result = await TaxonomyService(session).create_family({"name": "  Hogar "})

        assert result.success
        assert result.data.id is not None
        assert result.data.name == "Hogar"

    async def test_create_invalidates_route(self, session: AsyncSession) -> None:
        """A successful create marks the families route as stale."""
        before = get_route_invalidator().version(FAMILIES_ROUTE)
        await TaxonomyService(session).create_family({"name": "Hogar"})
        assert get_route_invalidator().version(FAMILIES_ROUTE) == before + 1

    async def test_create_invalid_name_writes_nothing(self, session: AsyncSession) -> None:
        """Validation fails before any write."""
        before = get_route_invalidator().version(FAMILIES_ROUTE)
        result = await TaxonomyService(session).create_family({"name": "H"})

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error == "El nombre debe tener al menos 2 caracteres"
        assert await count_rows(session, Family) == 0
        assert get_route_invalidator().version(FAMILIES_ROUTE) == before

    async def test_rename(self, session: AsyncSession, catalog) -> None:
        """Update changes only the name."""
        result = await TaxonomyService(session).update_family(catalog.ropa.id, {"name": "Moda"})

        assert result.success
        assert result.data.name == "Moda"

    async def test_rename_missing(self, session: AsyncSession) -> None:
        """Renaming an unknown family is a not-found error."""
        result = await TaxonomyService(session).update_family(999, {"name": "Moda"})

        assert result.error_code == "NOT_FOUND"
        assert result.error == "Familia no encontrada"

    async def test_delete_blocked_by_categories(self, session: AsyncSession, catalog) -> None:
        """A family with categories cannot be deleted."""
        result = await TaxonomyService(session).delete_family(catalog.ropa.id)

        assert not result.success
        assert result.error_code == "DELETE_BLOCKED"
        assert result.error == "No se puede eliminar una familia con categorías"
        assert result.details["relation"] == "categories"
        assert await session.get(Family, catalog.ropa.id) is not None

    async def test_delete_empty_family(self, session: AsyncSession) -> None:
        """An empty family is deleted."""
        service = TaxonomyService(session)
        family = (await service.create_family({"name": "Hogar"})).data

        result = await service.delete_family(family.id)

        assert result.success
        assert await count_rows(session, Family) == 0

    async def test_data_error_rolls_back(self, session: AsyncSession) -> None:
        """Data-layer failures turn into a generic localized error."""
        before = get_route_invalidator().version(FAMILIES_ROUTE)
        with patch.object(
            TaxonomyRepository,
            "add",
            new=AsyncMock(side_effect=SQLAlchemyError("connection lost")),
        ):
            result = await TaxonomyService(session).create_family({"name": "Hogar"})

        assert not result.success
        assert result.error_code == "DATA_ERROR"
        assert result.error == "Error al crear la familia"
        assert get_route_invalidator().version(FAMILIES_ROUTE) == before


class TestCategories:
    """Category CRUD."""

    async def test_create_under_family(self, session: AsyncSession, catalog) -> None:
        """Categories are created under an existing family."""
        result = await TaxonomyService(session).create_category(
            {"name": "Pantalones", "family_id": catalog.ropa.id}
        )

        assert result.success
        assert result.data.family_id == catalog.ropa.id

    async def test_create_requires_family(self, session: AsyncSession) -> None:
        """A missing family id fails validation."""
        result = await TaxonomyService(session).create_category({"name": "Pantalones"})
        assert result.error_code == "VALIDATION_ERROR"

    async def test_create_unknown_family(self, session: AsyncSession) -> None:
        """A family id that does not exist is a not-found error."""
        result = await TaxonomyService(session).create_category(
            {"name": "Pantalones", "family_id": 999}
        )

        assert result.error_code == "NOT_FOUND"
        assert result.error == "Familia no encontrada"
        assert await count_rows(session, Category) == 0

    async def test_rename_keeps_family(self, session: AsyncSession, catalog) -> None:
        """A family id in the update is ignored."""
        result = await TaxonomyService(session).update_category(
            catalog.camisetas.id,
            {"name": "Polos", "family_id": catalog.calzado.id},
        )

        assert result.success
        assert result.data.name == "Polos"
        assert result.data.family_id == catalog.ropa.id

    async def test_delete_blocked_by_subcategories(self, session: AsyncSession, catalog) -> None:
        """A category with subcategories cannot be deleted."""
        result = await TaxonomyService(session).delete_category(catalog.camisetas.id)

        assert result.error_code == "DELETE_BLOCKED"
        assert result.error == "No se puede eliminar una categoría con subcategorías"


class TestSubcategories:
    """Subcategory CRUD."""

    async def test_create_under_category(self, session: AsyncSession, catalog) -> None:
        """Subcategories are created under an existing category."""
        result = await TaxonomyService(session).create_subcategory(
            {"name": "Trail", "category_id": catalog.zapatillas.id}
        )

        assert result.success
        assert result.data.category_id == catalog.zapatillas.id
        assert await count_rows(session, Subcategory) == 3

    async def test_create_requires_category(self, session: AsyncSession) -> None:
        """A non-positive category id fails with the localized message."""
        result = await TaxonomyService(session).create_subcategory(
            {"name": "Trail", "category_id": 0}
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert result.error == "Debe seleccionar una categoría"

    async def test_rename_keeps_category(self, session: AsyncSession, catalog) -> None:
        """Renaming never moves the subcategory."""
        result = await TaxonomyService(session).update_subcategory(
            catalog.running.id,
            {"name": "Trail", "category_id": catalog.camisetas.id},
        )

        assert result.data.name == "Trail"
        assert result.data.category_id == catalog.zapatillas.id

    async def test_delete_blocked_by_products(
        self,
        session: AsyncSession,
        catalog,
        make_product,
    ) -> None:
        """A subcategory with products cannot be deleted."""
        await make_product("Camiseta Lisa", 19.9)

        result = await TaxonomyService(session).delete_subcategory(catalog.manga_corta.id)

        assert result.error_code == "DELETE_BLOCKED"
        assert result.error == "No se puede eliminar una subcategoría con productos"

    async def test_delete_then_parent(self, session: AsyncSession, catalog) -> None:
        """Deleting bottom-up empties the branch."""
        service = TaxonomyService(session)

        assert (await service.delete_subcategory(catalog.running.id)).success
        assert (await service.delete_category(catalog.zapatillas.id)).success
        assert (await service.delete_family(catalog.calzado.id)).success
        assert await count_rows(session, Subcategory) == 1


class TestTree:
    """Reading the whole taxonomy."""

    async def test_ordered_by_name(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        catalog,
    ) -> None:
        """Families, categories and subcategories come back ordered by name."""
        async with session_factory() as fresh:
            service = TaxonomyService(fresh)
            await service.create_category({"name": "Abrigos", "family_id": catalog.ropa.id})

        async with session_factory() as fresh:
            result = await TaxonomyService(fresh).get_families_with_relations()

        families = result.data
        assert [f.name for f in families] == ["Calzado", "Ropa"]
        assert [c.name for c in families[1].categories] == ["Abrigos", "Camisetas"]
        assert [s.name for s in families[1].categories[1].subcategories] == ["Manga corta"]

    async def test_count(self, session: AsyncSession, catalog) -> None:
        """Row counts per level."""
        repo = TaxonomyRepository(session)
        assert await repo.count(Family) == 2
        assert (await session.execute(select(func.count(Category.id)))).scalar_one() == 2
