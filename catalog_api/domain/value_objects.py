"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Self

from catalog_api.domain.base import ValueObject


# ============================================================================
# Catalog Filter
# ============================================================================


def _parse_int(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_price(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


@dataclass(frozen=True)
class CatalogFilter(ValueObject):
    """Storefront filter state, parsed once per request.

    The public listing encodes its filters in navigable query parameters
    (``familia``, ``categoria``, ``subcategoria``, ``precioMin``,
    ``precioMax``). Instances are never mutated; use :meth:`with_changes`
    to derive a new filter for links.

    Attributes:
        family_id: Restrict to products whose subcategory's category
            belongs to this family.
        category_id: Restrict to products whose subcategory belongs to
            this category.
        subcategory_id: Restrict to products of this subcategory.
        min_price: Inclusive lower bound on the base price.
        max_price: Inclusive upper bound on the base price.
    """

    family_id: int | None = None
    category_id: int | None = None
    subcategory_id: int | None = None
    min_price: float | None = None
    max_price: float | None = None

    QUERY_KEYS = {
        "family_id": "familia",
        "category_id": "categoria",
        "subcategory_id": "subcategoria",
        "min_price": "precioMin",
        "max_price": "precioMax",
    }

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> Self:
        """Parse a filter from query parameters.

        Missing, empty, non-numeric or non-positive ids are treated as
        absent, as are negative prices.
        """
        return cls(
            family_id=_parse_int(params.get("familia")),
            category_id=_parse_int(params.get("categoria")),
            subcategory_id=_parse_int(params.get("subcategoria")),
            min_price=_parse_price(params.get("precioMin")),
            max_price=_parse_price(params.get("precioMax")),
        )

    def to_query_params(self) -> dict[str, str]:
        """Serialize the non-empty fields back to query parameters."""
        params: dict[str, str] = {}
        for attr, key in self.QUERY_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            params[key] = str(value)
        return params

    def with_changes(self, **changes: Any) -> Self:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        """Whether no filter is active."""
        return not self.to_query_params()

    @property
    def taxonomy_level(self) -> str | None:
        """Most specific taxonomy level constrained by this filter.

        A subcategory filter wins over a category filter, which wins over
        a family filter.
        """
        if self.subcategory_id is not None:
            return "subcategory"
        if self.category_id is not None:
            return "category"
        if self.family_id is not None:
            return "family"
        return None


# ============================================================================
# Prices
# ============================================================================


@dataclass(frozen=True)
class PriceRange(ValueObject):
    """Inclusive price interval."""

    min: float
    max: float

    @classmethod
    def from_prices(cls, prices: Iterable[float | None], default: Self | None = None) -> Self:
        """Build the range spanned by the non-null prices.

        Args:
            prices: Candidate prices; ``None`` entries are skipped.
            default: Range returned when no price is given.

        Raises:
            ValueError: If there are no prices and no default.
        """
        values = [p for p in prices if p is not None]
        if not values:
            if default is None:
                raise ValueError("Cannot build a price range from no prices")
            return default
        return cls(min=min(values), max=max(values))

    @property
    def is_single(self) -> bool:
        """Whether the range collapses to one price."""
        return self.min == self.max
