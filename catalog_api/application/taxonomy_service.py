"""Taxonomy application service.

CRUD for the Family → Category → Subcategory tree:
- Reading the whole tree ordered by name
- Creating nodes under an existing parent
- Renaming nodes (never re-parenting them)
- Deleting nodes only when nothing hangs from them
"""

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import ActionResult
from catalog_api.application.revalidation import FAMILIES_ROUTE
from catalog_api.catalog.models import Category, Family, Product, Subcategory
from catalog_api.catalog.repository import TaxonomyRepository
from catalog_api.domain.exceptions import DeleteBlockedError, NotFoundError
from catalog_api.domain.validation import (
    CategoryInput,
    FamilyInput,
    SubcategoryInput,
    validate_input,
)

logger = structlog.get_logger()


class TaxonomyService(SessionService):
    """Service for managing the product taxonomy."""

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        super().__init__(session, request_id)
        self.repo = TaxonomyRepository(session)

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _get_family(self, family_id: int) -> Family:
        family = await self.repo.get(Family, family_id)
        if family is None:
            raise NotFoundError("family", family_id, "Familia no encontrada")
        return family

    async def _get_category(self, category_id: int) -> Category:
        category = await self.repo.get(Category, category_id)
        if category is None:
            raise NotFoundError("category", category_id, "Categoría no encontrada")
        return category

    async def _get_subcategory(self, subcategory_id: int) -> Subcategory:
        subcategory = await self.repo.get(Subcategory, subcategory_id)
        if subcategory is None:
            raise NotFoundError("subcategory", subcategory_id, "Subcategoría no encontrada")
        return subcategory

    # ========================================================================
    # Tree
    # ========================================================================

    async def get_families_with_relations(self) -> ActionResult[Sequence[Family]]:
        """Whole taxonomy tree, every level ordered by name."""
        return await self._run(
            self.repo.family_tree,
            error_message="Error al cargar las familias",
            event="Failed to load families",
        )

    # ========================================================================
    # Families
    # ========================================================================

    async def create_family(self, data: dict[str, Any]) -> ActionResult[Family]:
        """Create a family.

        Args:
            data: ``{"name": ...}``.
        """

        async def operation() -> Family:
            payload = validate_input(FamilyInput, data)
            family = await self.repo.add(Family(name=payload.name))
            logger.info("Family created", family_id=family.id, request_id=self.request_id)
            return family

        return await self._run(
            operation,
            error_message="Error al crear la familia",
            event="Failed to create family",
            invalidate=FAMILIES_ROUTE,
        )

    async def update_family(self, family_id: int, data: dict[str, Any]) -> ActionResult[Family]:
        """Rename a family."""

        async def operation() -> Family:
            payload = validate_input(FamilyInput, data)
            family = await self._get_family(family_id)
            return await self.repo.rename(family, payload.name)

        return await self._run(
            operation,
            error_message="Error al actualizar la familia",
            event="Failed to update family",
            invalidate=FAMILIES_ROUTE,
            family_id=family_id,
        )

    async def delete_family(self, family_id: int) -> ActionResult[None]:
        """Delete a family that owns no categories."""

        async def operation() -> None:
            await self._get_family(family_id)
            if await self.repo.exists(Category.family_id, family_id):
                raise DeleteBlockedError(
                    "family",
                    family_id,
                    "categories",
                    "No se puede eliminar una familia con categorías",
                )
            await self.repo.delete_by_id(Family, family_id)
            logger.info("Family deleted", family_id=family_id, request_id=self.request_id)

        return await self._run(
            operation,
            error_message="Error al eliminar la familia",
            event="Failed to delete family",
            invalidate=FAMILIES_ROUTE,
            family_id=family_id,
        )

    # ========================================================================
    # Categories
    # ========================================================================

    async def create_category(self, data: dict[str, Any]) -> ActionResult[Category]:
        """Create a category under an existing family.

        Args:
            data: ``{"name": ..., "family_id": ...}``.
        """

        async def operation() -> Category:
            payload = validate_input(CategoryInput, data)
            await self._get_family(payload.family_id)
            category = await self.repo.add(
                Category(name=payload.name, family_id=payload.family_id)
            )
            logger.info(
                "Category created",
                category_id=category.id,
                family_id=category.family_id,
                request_id=self.request_id,
            )
            return category

        return await self._run(
            operation,
            error_message="Error al crear la categoría",
            event="Failed to create category",
            invalidate=FAMILIES_ROUTE,
        )

    async def update_category(self, category_id: int, data: dict[str, Any]) -> ActionResult[Category]:
        """Rename a category.

        The stored family id is used for validation; a ``family_id`` in
        ``data`` is ignored, so renaming never moves the category.
        """

        async def operation() -> Category:
            category = await self._get_category(category_id)
            payload = validate_input(
                CategoryInput,
                {"name": data.get("name", ""), "family_id": category.family_id},
            )
            return await self.repo.rename(category, payload.name)

        return await self._run(
            operation,
            error_message="Error al actualizar la categoría",
            event="Failed to update category",
            invalidate=FAMILIES_ROUTE,
            category_id=category_id,
        )

    async def delete_category(self, category_id: int) -> ActionResult[None]:
        """Delete a category that owns no subcategories."""

        async def operation() -> None:
            await self._get_category(category_id)
            if await self.repo.exists(Subcategory.category_id, category_id):
                raise DeleteBlockedError(
                    "category",
                    category_id,
                    "subcategories",
                    "No se puede eliminar una categoría con subcategorías",
                )
            await self.repo.delete_by_id(Category, category_id)
            logger.info("Category deleted", category_id=category_id, request_id=self.request_id)

        return await self._run(
            operation,
            error_message="Error al eliminar la categoría",
            event="Failed to delete category",
            invalidate=FAMILIES_ROUTE,
            category_id=category_id,
        )

    # ========================================================================
    # Subcategories
    # ========================================================================

    async def create_subcategory(self, data: dict[str, Any]) -> ActionResult[Subcategory]:
        """Create a subcategory under an existing category.

        Args:
            data: ``{"name": ..., "category_id": ...}``.
        """

        async def operation() -> Subcategory:
            payload = validate_input(SubcategoryInput, data)
            await self._get_category(payload.category_id)
            subcategory = await self.repo.add(
                Subcategory(name=payload.name, category_id=payload.category_id)
            )
            logger.info(
                "Subcategory created",
                subcategory_id=subcategory.id,
                category_id=subcategory.category_id,
                request_id=self.request_id,
            )
            return subcategory

        return await self._run(
            operation,
            error_message="Error al crear la subcategoría",
            event="Failed to create subcategory",
            invalidate=FAMILIES_ROUTE,
        )

    async def update_subcategory(
        self,
        subcategory_id: int,
        data: dict[str, Any],
    ) -> ActionResult[Subcategory]:
        """Rename a subcategory, keeping its stored category."""

        async def operation() -> Subcategory:
            subcategory = await self._get_subcategory(subcategory_id)
            payload = validate_input(
                SubcategoryInput,
                {"name": data.get("name", ""), "category_id": subcategory.category_id},
            )
            return await self.repo.rename(subcategory, payload.name)

        return await self._run(
            operation,
            error_message="Error al actualizar la subcategoría",
            event="Failed to update subcategory",
            invalidate=FAMILIES_ROUTE,
            subcategory_id=subcategory_id,
        )

    async def delete_subcategory(self, subcategory_id: int) -> ActionResult[None]:
        """Delete a subcategory that owns no products."""

        async def operation() -> None:
            await self._get_subcategory(subcategory_id)
            if await self.repo.exists(Product.subcategory_id, subcategory_id):
                raise DeleteBlockedError(
                    "subcategory",
                    subcategory_id,
                    "products",
                    "No se puede eliminar una subcategoría con productos",
                )
            await self.repo.delete_by_id(Subcategory, subcategory_id)
            logger.info(
                "Subcategory deleted",
                subcategory_id=subcategory_id,
                request_id=self.request_id,
            )

        return await self._run(
            operation,
            error_message="Error al eliminar la subcategoría",
            event="Failed to delete subcategory",
            invalidate=FAMILIES_ROUTE,
            subcategory_id=subcategory_id,
        )


def get_taxonomy_service(session: AsyncSession, request_id: str | None = None) -> TaxonomyService:
    """Get taxonomy service instance.

    Args:
        session: Database session of the current request.
        request_id: Request ID for correlation.

    Returns:
        TaxonomyService instance.
    """
    return TaxonomyService(session, request_id=request_id)
