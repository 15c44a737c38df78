"""Tests for domain value objects."""

from dataclasses import FrozenInstanceError

import pytest

from catalog_api.domain import CatalogFilter, PriceRange


class TestCatalogFilter:
    """Tests for the storefront filter."""

    def test_from_query_params(self) -> None:
        """Spanish query keys map to filter fields."""
        filters = CatalogFilter.from_query_params(
            {
                "familia": "1",
                "categoria": "2",
                "subcategoria": "5",
                "precioMin": "10",
                "precioMax": "99.5",
            }
        )

        assert filters == CatalogFilter(
            family_id=1,
            category_id=2,
            subcategory_id=5,
            min_price=10.0,
            max_price=99.5,
        )

    def test_invalid_values_are_ignored(self) -> None:
        """Non-numeric, empty, non-positive ids and negative prices are dropped."""
        filters = CatalogFilter.from_query_params(
            {"familia": "abc", "categoria": "", "subcategoria": "0", "precioMin": "-5"}
        )
        assert filters.is_empty
        assert filters == CatalogFilter()

    def test_immutable(self) -> None:
        """Filters cannot be mutated in place."""
        filters = CatalogFilter(family_id=1)
        with pytest.raises(FrozenInstanceError):
            filters.family_id = 2  # type: ignore[misc]

    def test_with_changes(self) -> None:
        """Derived filters leave the original untouched."""
        filters = CatalogFilter(family_id=1)
        narrowed = filters.with_changes(category_id=3)

        assert filters.category_id is None
        assert narrowed.family_id == 1
        assert narrowed.category_id == 3

    def test_to_query_params(self) -> None:
        """Only set fields are serialized; whole prices lose the decimals."""
        filters = CatalogFilter(subcategory_id=5, min_price=10.0, max_price=20.5)
        assert filters.to_query_params() == {
            "subcategoria": "5",
            "precioMin": "10",
            "precioMax": "20.5",
        }

    def test_taxonomy_level_precedence(self) -> None:
        """Subcategory wins over category, which wins over family."""
        assert CatalogFilter().taxonomy_level is None
        assert CatalogFilter(family_id=1).taxonomy_level == "family"
        assert CatalogFilter(family_id=1, category_id=2).taxonomy_level == "category"
        assert (
            CatalogFilter(family_id=1, category_id=2, subcategory_id=3).taxonomy_level
            == "subcategory"
        )


class TestPriceRange:
    """Tests for PriceRange."""

    def test_from_prices_skips_missing(self) -> None:
        """Base 10 with variants 8, 12 and unset spans 8 to 12."""
        prices = PriceRange.from_prices([10, 8, 12, None])
        assert prices == PriceRange(min=8, max=12)

    def test_single(self) -> None:
        """A single price collapses the range."""
        assert PriceRange.from_prices([10, None]).is_single

    def test_default(self) -> None:
        """The default is used when there are no prices."""
        default = PriceRange(min=0, max=1000)
        assert PriceRange.from_prices([None, None], default=default) is default

    def test_no_prices_without_default(self) -> None:
        """No prices and no default is an error."""
        with pytest.raises(ValueError):
            PriceRange.from_prices([])
