"""Admin route invalidation.

Successful mutations mark an admin route as stale. Each route carries a
version counter; GET endpoints expose ``"<epoch>-<version>"`` as their ETag
so clients holding an older tag refetch.
"""

from uuid import uuid4

import structlog

logger = structlog.get_logger()

FAMILIES_ROUTE = "/admin/dashboard/families"
PRODUCTS_ROUTE = "/admin/dashboard/products"
USERS_ROUTE = "/admin/dashboard/users"


class RouteInvalidator:
    """Per-process route version registry."""

    def __init__(self) -> None:
        # Process-unique prefix so tags from a previous process never match.
        self._epoch = uuid4().hex[:8]
        self._versions: dict[str, int] = {}

    def invalidate(self, path: str) -> int:
        """Mark a route as stale.

        Returns:
            The route's new version.
        """
        version = self._versions.get(path, 0) + 1
        self._versions[path] = version
        logger.info("Route invalidated", path=path, version=version)
        return version

    def version(self, path: str) -> int:
        """Current version of a route (0 if never invalidated)."""
        return self._versions.get(path, 0)

    def etag(self, path: str) -> str:
        """Quoted ETag value for a route."""
        return f'"{self._epoch}-{self.version(path)}"'


_invalidator: RouteInvalidator | None = None


def get_route_invalidator() -> RouteInvalidator:
    """Get the route invalidator singleton."""
    global _invalidator
    if _invalidator is None:
        _invalidator = RouteInvalidator()
    return _invalidator
