"""Domain layer - value objects, input validation and domain exceptions.

Example usage:
    from catalog_api.domain import CatalogFilter

    filters = CatalogFilter.from_query_params({"subcategoria": "5"})
    filters.taxonomy_level  # "subcategory"
"""

from catalog_api.domain.base import ValueObject
from catalog_api.domain.exceptions import (
    DeleteBlockedError,
    DomainError,
    DuplicateVariantError,
    InputValidationError,
    InvalidCombinationError,
    InvalidSlugError,
    NoOptionsSelectedError,
    NotFoundError,
    VariantError,
    VariantsAlreadyExistError,
)
from catalog_api.domain.value_objects import CatalogFilter, PriceRange

__all__ = [
    # Base
    "ValueObject",
    # Value objects
    "CatalogFilter",
    "PriceRange",
    # Exceptions
    "DeleteBlockedError",
    "DomainError",
    "DuplicateVariantError",
    "InputValidationError",
    "InvalidCombinationError",
    "InvalidSlugError",
    "NoOptionsSelectedError",
    "NotFoundError",
    "VariantError",
    "VariantsAlreadyExistError",
]
