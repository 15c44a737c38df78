"""Shared router dependencies and helpers.

Session injection, service result → HTTP error mapping and ETag handling
for admin reads.
"""

from typing import TypeVar

from fastapi import HTTPException, Request, Response, status

from catalog_api.application.results import ActionResult
from catalog_api.application.revalidation import get_route_invalidator

T = TypeVar("T")

# HTTP status per service error code.
ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "VARIANT_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_SLUG": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DELETE_BLOCKED": status.HTTP_409_CONFLICT,
    "EMAIL_TAKEN": status.HTTP_409_CONFLICT,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "AUTH_SERVICE_ERROR": status.HTTP_502_BAD_GATEWAY,
    "DATA_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_request_id(request: Request) -> str | None:
    """Request ID set by the request ID middleware."""
    return getattr(request.state, "request_id", None)


def unwrap(result: ActionResult[T]) -> T:
    """Return a successful result's data or raise the matching HTTP error.

    Raises:
        HTTPException: With ``{"error_code", "message", "details"}`` detail.
    """
    if result.success:
        return result.data  # type: ignore[return-value]

    error_code = result.error_code or "ERROR"
    details = []
    if result.details.get("field"):
        details.append({"field": result.details["field"], "message": result.error})

    raise HTTPException(
        status_code=ERROR_STATUS.get(error_code, status.HTTP_400_BAD_REQUEST),
        detail={
            "error_code": error_code,
            "message": result.error,
            "details": details,
        },
    )


def not_modified(request: Request, response: Response, route: str) -> Response | None:
    """ETag check for reads tied to an admin route.

    Sets the route's current ETag on ``response``. If the client already
    holds it, returns an empty 304 response to send instead.
    """
    etag = get_route_invalidator().etag(route)
    if request.headers.get("If-None-Match") == etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})
    response.headers["ETag"] = etag
    return None
