#!/usr/bin/env python3
"""Seed product catalog script.

Creates the tables and seeds a demo taxonomy, options and products through
the application services, so every row passes the same validation as the
admin API.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --no-products
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_api.application.option_service import OptionService
from catalog_api.application.product_service import ProductService
from catalog_api.application.taxonomy_service import TaxonomyService
from catalog_api.catalog import models  # noqa: F401  (registers tables)
from catalog_api.infrastructure.database import Base, async_session_factory, engine

TAXONOMY = {
    "Ropa": {
        "Camisetas": ["Manga corta", "Manga larga"],
        "Pantalones": ["Vaqueros", "Chinos"],
    },
    "Calzado": {
        "Deportivo": ["Running", "Trail"],
    },
}

OPTIONS = {
    "Color": ["Rojo", "Azul", "Negro"],
    "Talla": ["S", "M", "L"],
}

PRODUCTS = [
    ("Camiseta Básica", "CAM-BAS-001", 19.90, "Manga corta", ["Color", "Talla"]),
    ("Camiseta Térmica", "CAM-TER-001", 29.90, "Manga larga", ["Talla"]),
    ("Vaquero Slim", "PAN-VAQ-001", 49.95, "Vaqueros", ["Talla"]),
    ("Zapatilla Ligera", "ZAP-RUN-001", 89.00, "Running", ["Color"]),
]


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(with_products: bool = True) -> dict[str, int]:
    """Seed the demo catalog.

    Args:
        with_products: Also create products with every variant combination.

    Returns:
        Counts of created rows.
    """
    counts = {"families": 0, "categories": 0, "subcategories": 0, "options": 0, "products": 0}
    subcategory_ids: dict[str, int] = {}
    option_ids: dict[str, int] = {}

    async with async_session_factory() as session:
        taxonomy = TaxonomyService(session)
        for family_name, categories in TAXONOMY.items():
            family = (await taxonomy.create_family({"name": family_name})).data
            counts["families"] += 1
            for category_name, subcategories in categories.items():
                category = (
                    await taxonomy.create_category({"name": category_name, "family_id": family.id})
                ).data
                counts["categories"] += 1
                for subcategory_name in subcategories:
                    subcategory = (
                        await taxonomy.create_subcategory(
                            {"name": subcategory_name, "category_id": category.id}
                        )
                    ).data
                    subcategory_ids[subcategory_name] = subcategory.id
                    counts["subcategories"] += 1

        options = OptionService(session)
        for option_name, values in OPTIONS.items():
            option = (await options.create_option({"name": option_name})).data
            option_ids[option_name] = option.id
            counts["options"] += 1
            for value in values:
                await options.create_feature({"value": value, "option_id": option.id})

        if with_products:
            products = ProductService(session)
            for name, sku, price, subcategory_name, option_names in PRODUCTS:
                selected = [option_ids[o] for o in option_names]
                drafts = await products.generate_variants(selected, base_price=price)
                result = await products.create_product(
                    {
                        "basic_info": {
                            "name": name,
                            "sku": sku,
                            "price": price,
                            "subcategory_id": subcategory_ids[subcategory_name],
                        },
                        "selected_options": selected,
                        "variants": [
                            {"feature_ids": d.feature_ids, "price": d.price, "stock": 10 * (i % 3)}
                            for i, d in enumerate(drafts.data or [])
                        ],
                    }
                )
                if not result.success:
                    raise RuntimeError(f"{sku}: {result.error}")
                counts["products"] += 1

    return counts


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed a demo product catalog",
    )
    parser.add_argument(
        "--no-products",
        action="store_true",
        help="Only seed taxonomy and options",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Catalog Seeder")
    print("=" * 60)

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    counts = await seed(with_products=not args.no_products)
    for table, count in counts.items():
        print(f"  ✓ {table.capitalize()}: {count}")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
