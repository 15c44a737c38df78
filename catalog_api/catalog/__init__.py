"""Product catalog.

Database models, repositories, the variant generator and the slug/SEO
helpers used by the storefront.
"""

from catalog_api.catalog.models import (
    Category,
    Family,
    Feature,
    Option,
    OptionProduct,
    Product,
    Profile,
    Subcategory,
    Variant,
    VariantFeature,
)
from catalog_api.catalog.repository import (
    OptionRepository,
    ProductRepository,
    ProfileRepository,
    TaxonomyRepository,
)
from catalog_api.catalog.slug import extract_id_from_slug, generate_product_slug
from catalog_api.catalog.variants import (
    OptionChoice,
    VariantDraft,
    VariantDraftSet,
    generate_combinations,
)

__all__ = [
    # Models
    "Category",
    "Family",
    "Feature",
    "Option",
    "OptionProduct",
    "Product",
    "Profile",
    "Subcategory",
    "Variant",
    "VariantFeature",
    # Repositories
    "OptionRepository",
    "ProductRepository",
    "ProfileRepository",
    "TaxonomyRepository",
    # Slugs
    "extract_id_from_slug",
    "generate_product_slug",
    # Variants
    "OptionChoice",
    "VariantDraft",
    "VariantDraftSet",
    "generate_combinations",
]
