"""Product slugs: ``<normalized-name>-<id>``."""

import re
import unicodedata

from catalog_api.domain.exceptions import InvalidSlugError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*-\d+$")


def normalize_name(name: str) -> str:
    """Lower-case, strip diacritics and collapse non-alphanumerics to ``-``."""
    decomposed = unicodedata.normalize("NFD", name.lower())
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM.sub("-", ascii_only).strip("-")


def generate_product_slug(name: str, product_id: int) -> str:
    """Build the URL slug of a product.

    Example:
        >>> generate_product_slug("Camiseta Roja", 42)
        'camiseta-roja-42'
    """
    normalized = normalize_name(name)
    return f"{normalized}-{product_id}" if normalized else str(product_id)


def extract_id_from_slug(slug: str) -> int:
    """Recover the product id from the trailing hyphen-delimited token.

    Raises:
        InvalidSlugError: If the last token is not a positive integer.
    """
    last = slug.rsplit("-", 1)[-1]
    if not last.isascii() or not last.isdigit() or int(last) == 0:
        raise InvalidSlugError(slug)
    return int(last)


def is_valid_slug(slug: str) -> bool:
    """Check that a slug has the canonical shape."""
    return bool(_SLUG.match(slug))
