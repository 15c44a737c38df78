"""SEO helpers for the storefront.

Titles, meta descriptions, price formatting and schema.org JSON-LD for the
product listing and product detail pages. Output is localized for es-ES.
"""

import re
from typing import Any

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "US$",
    "GBP": "GB£",
}

DEFAULT_TAGLINE = "Compra online con envío rápido y seguro."
META_DESCRIPTION_LIMIT = 155
PLACEHOLDER_IMAGE = "/placeholder-product.jpg"


def format_price(price: float, currency: str = "EUR") -> str:
    """Format a price the way es-ES renders currency.

    Decimal comma, ``.`` thousands separator (only from five integer digits
    on) and the symbol after a non-breaking space.

    Example:
        >>> format_price(1234.5)
        '1234,50\\xa0€'
        >>> format_price(12345.5)
        '12.345,50\\xa0€'
    """
    sign = "-" if price < 0 else ""
    integer, decimals = f"{abs(price):.2f}".split(".")
    if len(integer) >= 5:
        groups = []
        while integer:
            groups.insert(0, integer[-3:])
            integer = integer[:-3]
        integer = ".".join(groups)
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{sign}{integer},{decimals}\u00a0{symbol}"


def format_price_range(min_price: float, max_price: float, currency: str = "EUR") -> str:
    """Format a price range, collapsing it when both ends match."""
    if min_price == max_price:
        return format_price(min_price, currency)
    return f"{format_price(min_price, currency)} - {format_price(max_price, currency)}"


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to ``max_length`` characters, ending in an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _most_specific(
    family_name: str | None,
    category_name: str | None,
    subcategory_name: str | None,
) -> str | None:
    return subcategory_name or category_name or family_name


def generate_products_title(
    family_name: str | None = None,
    category_name: str | None = None,
    subcategory_name: str | None = None,
) -> str:
    """Title of the product listing page for the active taxonomy filter."""
    name = _most_specific(family_name, category_name, subcategory_name)
    if name:
        return f"{name} | Productos"
    return "Catálogo de Productos"


def generate_products_description(
    family_name: str | None = None,
    category_name: str | None = None,
    subcategory_name: str | None = None,
    product_count: int | None = None,
) -> str:
    """Meta description of the product listing page."""
    name = _most_specific(family_name, category_name, subcategory_name)
    parts = ["Explora nuestro catálogo de", name.lower() if name else "productos"]

    if product_count:
        parts.append(f"con {product_count} opciones disponibles.")
    else:
        parts.append("con las mejores opciones para ti.")

    parts.append(DEFAULT_TAGLINE)
    return " ".join(parts)


def generate_product_title(product_name: str, price: float, currency: str = "EUR") -> str:
    """Title of a product detail page."""
    return f"{product_name} - {format_price(price, currency)}"


def generate_product_description(
    product_name: str,
    detail: str | None,
    price: float,
    currency: str = "EUR",
) -> str:
    """Meta description of a product detail page, at most 155 characters."""
    base = f"{product_name} por {format_price(price, currency)}."

    if detail:
        clean = re.sub(r"\s+", " ", detail).strip()
        room = META_DESCRIPTION_LIMIT - len(base) - 1
        if len(clean) <= room:
            return f"{base} {clean}"
        return f"{base} {clean[: max(room - 3, 0)]}..."

    return f"{base} {DEFAULT_TAGLINE}"


def generate_product_json_ld(
    name: str,
    description: str | None,
    price: float,
    sku: str,
    image_path: str | None,
    url: str,
    in_stock: bool = True,
    currency: str = "EUR",
) -> dict[str, Any]:
    """schema.org ``Product`` structured data."""
    availability = "InStock" if in_stock else "OutOfStock"
    return {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": name,
        "description": description or f"{name} - Producto de calidad",
        "sku": sku,
        "image": image_path or PLACEHOLDER_IMAGE,
        "offers": {
            "@type": "Offer",
            "price": f"{price:.2f}",
            "priceCurrency": currency,
            "availability": f"https://schema.org/{availability}",
            "url": url,
        },
    }
