"""Tests for product slugs."""

import pytest

from catalog_api.catalog.slug import (
    extract_id_from_slug,
    generate_product_slug,
    is_valid_slug,
    normalize_name,
)
from catalog_api.domain.exceptions import InvalidSlugError


class TestGenerateSlug:
    """Tests for slug generation."""

    def test_basic(self) -> None:
        """Name is lower-cased and joined with the id."""
        assert generate_product_slug("Camiseta Roja", 42) == "camiseta-roja-42"

    def test_strips_diacritics(self) -> None:
        """Accents and tildes are removed."""
        assert generate_product_slug("Camión Pequeño", 7) == "camion-pequeno-7"

    def test_collapses_symbols(self) -> None:
        """Runs of non-alphanumerics become a single hyphen."""
        assert normalize_name("  Zapatilla -- Trail & Run!  ") == "zapatilla-trail-run"

    def test_symbol_only_name(self) -> None:
        """A name without alphanumerics leaves only the id."""
        assert generate_product_slug("***", 3) == "3"


class TestExtractId:
    """Tests for id extraction."""

    def test_round_trip(self) -> None:
        """The id comes back from a generated slug."""
        assert extract_id_from_slug(generate_product_slug("Vaquero Slim 32", 15)) == 15

    def test_trailing_token(self) -> None:
        """Only the last hyphen-delimited token counts."""
        assert extract_id_from_slug("camiseta-roja-42") == 42

    def test_bare_id(self) -> None:
        """A slug made of just the id is accepted."""
        assert extract_id_from_slug("8") == 8

    @pytest.mark.parametrize("slug", ["no-id-here-xyz", "camiseta-", "producto-0", "a-12b"])
    def test_invalid(self, slug: str) -> None:
        """Slugs not ending in a positive integer are rejected."""
        with pytest.raises(InvalidSlugError) as exc_info:
            extract_id_from_slug(slug)
        assert exc_info.value.error_code == "INVALID_SLUG"


class TestIsValidSlug:
    """Tests for the canonical slug shape."""

    def test_valid(self) -> None:
        """Generated slugs have the canonical shape."""
        assert is_valid_slug("camiseta-roja-42")

    def test_invalid(self) -> None:
        """Upper case and missing ids are not canonical."""
        assert not is_valid_slug("Camiseta-42")
        assert not is_valid_slug("camiseta")
