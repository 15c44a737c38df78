"""Fixtures for application service tests: a small seeded catalog."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.application.product_service import ProductService
from catalog_api.catalog.models import Category, Family, Feature, Option, Product, Subcategory


@dataclass
class SeededCatalog:
    """Two taxonomy branches and two options."""

    ropa: Family
    camisetas: Category
    manga_corta: Subcategory
    calzado: Family
    zapatillas: Category
    running: Subcategory
    color: Option
    size: Option
    colors: list[Feature]
    sizes: list[Feature]


async def _add(session: AsyncSession, entity: Any) -> Any:
    session.add(entity)
    await session.flush()
    return entity


@pytest.fixture
async def catalog(session_factory: async_sessionmaker[AsyncSession]) -> SeededCatalog:
    """Ropa > Camisetas > Manga corta, Calzado > Zapatillas > Running, Color and Talla.

    Rows are written through their own session, so the returned objects are
    detached and survive rollbacks of the test session.
    """
    async with session_factory() as session:
        return await _seed(session)


async def _seed(session: AsyncSession) -> SeededCatalog:
    ropa = await _add(session, Family(name="Ropa"))
    camisetas = await _add(session, Category(name="Camisetas", family_id=ropa.id))
    manga_corta = await _add(session, Subcategory(name="Manga corta", category_id=camisetas.id))
    calzado = await _add(session, Family(name="Calzado"))
    zapatillas = await _add(session, Category(name="Zapatillas", family_id=calzado.id))
    running = await _add(session, Subcategory(name="Running", category_id=zapatillas.id))

    color = await _add(session, Option(name="Color"))
    size = await _add(session, Option(name="Talla"))
    colors = [await _add(session, Feature(value=v, option_id=color.id)) for v in ("Azul", "Rojo")]
    sizes = [await _add(session, Feature(value=v, option_id=size.id)) for v in ("L", "M", "S")]

    await session.commit()
    return SeededCatalog(
        ropa=ropa,
        camisetas=camisetas,
        manga_corta=manga_corta,
        calzado=calzado,
        zapatillas=zapatillas,
        running=running,
        color=color,
        size=size,
        colors=colors,
        sizes=sizes,
    )


MakeProduct = Callable[..., Awaitable[Product]]


@pytest.fixture
def make_product(
    session_factory: async_sessionmaker[AsyncSession],
    catalog: SeededCatalog,
) -> MakeProduct:
    """Create a product with one variant per given stock, colored Azul/Rojo."""

    async def _make(
        name: str,
        price: float,
        subcategory: Subcategory | None = None,
        stocks: tuple[int, ...] = (5,),
        sku: str | None = None,
    ) -> Product:
        variants = [
            {"feature_ids": [catalog.colors[i].id], "stock": stock}
            for i, stock in enumerate(stocks)
        ]
        async with session_factory() as session:
            result = await ProductService(session).create_product(
                {
                    "basic_info": {
                        "name": name,
                        "sku": sku or name.upper().replace(" ", "-"),
                        "price": price,
                        "subcategory_id": (subcategory or catalog.manga_corta).id,
                    },
                    "selected_options": [catalog.color.id],
                    "variants": variants,
                }
            )
        assert result.success, result.error
        return result.data

    return _make
