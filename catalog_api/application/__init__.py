"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from catalog_api.application.auth_service import AuthService, get_auth_service
from catalog_api.application.dashboard_service import DashboardService, get_dashboard_service
from catalog_api.application.option_service import OptionService, get_option_service
from catalog_api.application.product_service import ProductService, get_product_service
from catalog_api.application.results import ActionResult
from catalog_api.application.storefront_service import StorefrontService, get_storefront_service
from catalog_api.application.taxonomy_service import TaxonomyService, get_taxonomy_service
from catalog_api.application.user_service import UserService, get_user_service

__all__ = [
    "ActionResult",
    "AuthService",
    "get_auth_service",
    "DashboardService",
    "get_dashboard_service",
    "OptionService",
    "get_option_service",
    "ProductService",
    "get_product_service",
    "StorefrontService",
    "get_storefront_service",
    "TaxonomyService",
    "get_taxonomy_service",
    "UserService",
    "get_user_service",
]
