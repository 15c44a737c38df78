"""Product application service.

Orchestrates the product aggregate:
- Admin listing and detail
- Variant previews from selected options
- Creating a product with its option links and variants in one transaction
- Deleting a product and everything that hangs from it
"""

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import ActionResult
from catalog_api.application.revalidation import PRODUCTS_ROUTE
from catalog_api.catalog.models import Product, Subcategory
from catalog_api.catalog.repository import OptionRepository, ProductRepository
from catalog_api.catalog.variants import OptionChoice, VariantDraft, VariantDraftSet
from catalog_api.domain.exceptions import (
    NoOptionsSelectedError,
    NotFoundError,
    VariantsAlreadyExistError,
)
from catalog_api.domain.validation import ProductCreationInput, validate_input

logger = structlog.get_logger()


class ProductService(SessionService):
    """Service for the product aggregate.

    Example usage:
        service = ProductService(session)
        result = await service.create_product({
            "basic_info": {"name": "Camiseta", "sku": "CAM-001", "price": 19.9,
                           "subcategory_id": 3},
            "selected_options": [1],
            "variants": [{"feature_ids": [4], "stock": 10}],
        })
    """

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        super().__init__(session, request_id)
        self.repo = ProductRepository(session)
        self.options = OptionRepository(session)

    async def _load_choices(self, option_ids: Sequence[int]) -> list[OptionChoice]:
        """Selected options with their feature ids, in selection order."""
        if not option_ids:
            return []
        loaded = {option.id: option for option in await self.options.list_options(option_ids)}
        choices = []
        for option_id in option_ids:
            option = loaded.get(option_id)
            if option is None:
                raise NotFoundError("option", option_id, "Opción no encontrada")
            choices.append(
                OptionChoice(
                    option_id=option.id,
                    name=option.name,
                    feature_ids=tuple(feature.id for feature in option.features),
                )
            )
        return choices

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_products(self) -> ActionResult[Sequence[Product]]:
        """Every product with its subcategory, newest first."""
        return await self._run(
            self.repo.list_with_subcategory,
            error_message="Error al cargar los productos",
            event="Failed to load products",
        )

    async def get_product_by_id(self, product_id: int) -> ActionResult[Product]:
        """Product with subcategory, options+features and variants+features."""

        async def operation() -> Product:
            product = await self.repo.get_with_relations(product_id)
            if product is None:
                raise NotFoundError("product", product_id, "Producto no encontrado")
            return product

        return await self._run(
            operation,
            error_message="Error al cargar el producto",
            event="Failed to load product",
            product_id=product_id,
        )

    # ========================================================================
    # Variant preview
    # ========================================================================

    async def generate_variants(
        self,
        option_ids: Sequence[int],
        base_price: float,
        existing_count: int = 0,
    ) -> ActionResult[list[VariantDraft]]:
        """Pre-populate one variant per feature combination.

        Args:
            option_ids: Selected options, in selection order.
            base_price: Default price of every generated variant.
            existing_count: Variants already drafted by the caller;
                generation is refused unless this is zero.
        """

        async def operation() -> list[VariantDraft]:
            option_ids_unique = list(dict.fromkeys(option_ids))
            if not option_ids_unique:
                raise NoOptionsSelectedError()
            choices = await self._load_choices(option_ids_unique)
            if existing_count:
                raise VariantsAlreadyExistError(existing_count)
            return VariantDraftSet(options=choices, base_price=base_price).generate_all()

        return await self._run(
            operation,
            error_message="Error al cargar las opciones",
            event="Failed to generate variants",
        )

    # ========================================================================
    # Writes
    # ========================================================================

    async def create_product(self, data: dict[str, Any]) -> ActionResult[Product]:
        """Create a product with its option links and variants.

        Input is validated in full before any write. Each variant must pick
        exactly one stored feature of every selected option; duplicate
        combinations are rejected. Writes run in the request's transaction
        and are rolled back together on failure.

        Args:
            data: ``{"basic_info": {...}, "selected_options": [...],
                "variants": [{"feature_ids": [...], "price": ..., "stock": ...}]}``.

        Returns:
            ActionResult with the created product, relations loaded.
        """

        async def operation() -> Product | None:
            payload = validate_input(ProductCreationInput, data)
            info = payload.basic_info

            if await self.repo.get(Subcategory, info.subcategory_id) is None:
                raise NotFoundError(
                    "subcategory",
                    info.subcategory_id,
                    "Subcategoría no encontrada",
                )

            drafts = VariantDraftSet(
                options=await self._load_choices(payload.selected_options),
                base_price=info.price,
            )
            for variant in payload.variants:
                drafts.add(variant.feature_ids, price=variant.price, stock=variant.stock)

            product = await self.repo.add(
                Product(
                    name=info.name,
                    sku=info.sku,
                    price=info.price,
                    detail=info.detail,
                    image_path=info.image_path,
                    subcategory_id=info.subcategory_id,
                )
            )
            await self.repo.add_option_links(product.id, payload.selected_options)
            for draft in drafts.variants:
                await self.repo.add_variant(
                    product.id,
                    price=draft.price,
                    stock=draft.stock,
                    feature_ids=draft.feature_ids,
                )

            logger.info(
                "Product created",
                product_id=product.id,
                sku=product.sku,
                variant_count=len(drafts.variants),
                request_id=self.request_id,
            )
            # Unloaded relations are filled by the reload below.
            product_id = product.id
            self.session.expire(product)
            return await self.repo.get_with_relations(product_id)

        return await self._run(
            operation,
            error_message="Error al crear el producto",
            event="Failed to create product",
            invalidate=PRODUCTS_ROUTE,
        )

    async def delete_product(self, product_id: int) -> ActionResult[None]:
        """Delete a product together with its variants and option links."""

        async def operation() -> None:
            if await self.repo.get(Product, product_id) is None:
                raise NotFoundError("product", product_id, "Producto no encontrado")
            await self.repo.delete_cascade(product_id)
            logger.info("Product deleted", product_id=product_id, request_id=self.request_id)

        return await self._run(
            operation,
            error_message="Error al eliminar el producto",
            event="Failed to delete product",
            invalidate=PRODUCTS_ROUTE,
            product_id=product_id,
        )


def get_product_service(session: AsyncSession, request_id: str | None = None) -> ProductService:
    """Get product service instance."""
    return ProductService(session, request_id=request_id)
