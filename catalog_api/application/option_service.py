"""Option and feature application service.

Options are catalog-wide axes of variation ("Color", "Talla"); features are
their values ("Rojo", "M"). Variants pick one feature per option, so
options and features in use cannot be deleted.
"""

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.base import SessionService
from catalog_api.application.results import ActionResult
from catalog_api.application.revalidation import PRODUCTS_ROUTE
from catalog_api.catalog.models import Feature, Option, OptionProduct, VariantFeature
from catalog_api.catalog.repository import OptionRepository
from catalog_api.domain.exceptions import DeleteBlockedError, NotFoundError
from catalog_api.domain.validation import FeatureInput, OptionInput, validate_input

logger = structlog.get_logger()


class OptionService(SessionService):
    """Service for managing options and their features."""

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        super().__init__(session, request_id)
        self.repo = OptionRepository(session)

    async def _get_option(self, option_id: int) -> Option:
        option = await self.repo.get(Option, option_id)
        if option is None:
            raise NotFoundError("option", option_id, "Opción no encontrada")
        return option

    async def _get_feature(self, feature_id: int) -> Feature:
        feature = await self.repo.get(Feature, feature_id)
        if feature is None:
            raise NotFoundError("feature", feature_id, "Característica no encontrada")
        return feature

    # ========================================================================
    # Options
    # ========================================================================

    async def get_options_with_features(self) -> ActionResult[Sequence[Option]]:
        """Options ordered by name, each with features ordered by value."""
        return await self._run(
            self.repo.list_options,
            error_message="Error al cargar las opciones",
            event="Failed to load options",
        )

    async def create_option(self, data: dict[str, Any]) -> ActionResult[Option]:
        """Create an option.

        Args:
            data: ``{"name": ...}``.
        """

        async def operation() -> Option:
            payload = validate_input(OptionInput, data)
            option = await self.repo.add(Option(name=payload.name))
            logger.info("Option created", option_id=option.id, request_id=self.request_id)
            return option

        return await self._run(
            operation,
            error_message="Error al crear la opción",
            event="Failed to create option",
            invalidate=PRODUCTS_ROUTE,
        )

    async def update_option(self, option_id: int, data: dict[str, Any]) -> ActionResult[Option]:
        """Rename an option."""

        async def operation() -> Option:
            payload = validate_input(OptionInput, data)
            option = await self._get_option(option_id)
            option.name = payload.name
            await self.session.flush()
            return option

        return await self._run(
            operation,
            error_message="Error al actualizar la opción",
            event="Failed to update option",
            invalidate=PRODUCTS_ROUTE,
            option_id=option_id,
        )

    async def delete_option(self, option_id: int) -> ActionResult[None]:
        """Delete an option with no features and no product links."""

        async def operation() -> None:
            await self._get_option(option_id)
            if await self.repo.exists(Feature.option_id, option_id):
                raise DeleteBlockedError(
                    "option",
                    option_id,
                    "features",
                    "No se puede eliminar una opción con características",
                )
            if await self.repo.exists(OptionProduct.option_id, option_id):
                raise DeleteBlockedError(
                    "option",
                    option_id,
                    "option_products",
                    "No se puede eliminar una opción asignada a productos",
                )
            await self.repo.delete_by_id(Option, option_id)
            logger.info("Option deleted", option_id=option_id, request_id=self.request_id)

        return await self._run(
            operation,
            error_message="Error al eliminar la opción",
            event="Failed to delete option",
            invalidate=PRODUCTS_ROUTE,
            option_id=option_id,
        )

    # ========================================================================
    # Features
    # ========================================================================

    async def create_feature(self, data: dict[str, Any]) -> ActionResult[Feature]:
        """Create a feature under an existing option.

        Args:
            data: ``{"value": ..., "option_id": ...}``.
        """

        async def operation() -> Feature:
            payload = validate_input(FeatureInput, data)
            await self._get_option(payload.option_id)
            feature = await self.repo.add(Feature(value=payload.value, option_id=payload.option_id))
            logger.info(
                "Feature created",
                feature_id=feature.id,
                option_id=feature.option_id,
                request_id=self.request_id,
            )
            return feature

        return await self._run(
            operation,
            error_message="Error al crear la característica",
            event="Failed to create feature",
            invalidate=PRODUCTS_ROUTE,
        )

    async def update_feature(self, feature_id: int, data: dict[str, Any]) -> ActionResult[Feature]:
        """Change a feature's value, keeping its stored option."""

        async def operation() -> Feature:
            feature = await self._get_feature(feature_id)
            payload = validate_input(
                FeatureInput,
                {"value": data.get("value", ""), "option_id": feature.option_id},
            )
            feature.value = payload.value
            await self.session.flush()
            return feature

        return await self._run(
            operation,
            error_message="Error al actualizar la característica",
            event="Failed to update feature",
            invalidate=PRODUCTS_ROUTE,
            feature_id=feature_id,
        )

    async def delete_feature(self, feature_id: int) -> ActionResult[None]:
        """Delete a feature that no variant uses."""

        async def operation() -> None:
            await self._get_feature(feature_id)
            if await self.repo.exists(VariantFeature.feature_id, feature_id):
                raise DeleteBlockedError(
                    "feature",
                    feature_id,
                    "variant_features",
                    "No se puede eliminar una característica que está en uso",
                )
            await self.repo.delete_by_id(Feature, feature_id)
            logger.info("Feature deleted", feature_id=feature_id, request_id=self.request_id)

        return await self._run(
            operation,
            error_message="Error al eliminar la característica",
            event="Failed to delete feature",
            invalidate=PRODUCTS_ROUTE,
            feature_id=feature_id,
        )


def get_option_service(session: AsyncSession, request_id: str | None = None) -> OptionService:
    """Get option service instance."""
    return OptionService(session, request_id=request_id)
