"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from catalog_api.api.auth import router as auth_router
from catalog_api.api.dashboard import router as dashboard_router
from catalog_api.api.health import router as health_router
from catalog_api.api.options import router as options_router
from catalog_api.api.products import router as products_router
from catalog_api.api.storefront import router as storefront_router
from catalog_api.api.taxonomy import router as taxonomy_router
from catalog_api.api.users import router as users_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "health_router",
    "options_router",
    "products_router",
    "storefront_router",
    "taxonomy_router",
    "users_router",
]
