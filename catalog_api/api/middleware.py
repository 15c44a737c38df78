"""API middleware for the Catalog API.

Provides:
- Request ID correlation
- Admin authentication
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_api.infrastructure.auth_client import AuthClientError, get_auth_client
from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers and error envelopes
    - Response headers for client correlation
    - Log context for tracing

    Also writes one access log line per request, tagged with the admin
    user when the auth middleware resolved one.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        # Reuse the caller's ID so logs line up across services
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            # user_id is set further in by AdminAuthMiddleware
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
                admin=request.url.path.startswith(ADMIN_PREFIX),
                user_id=getattr(request.state, "user_id", None),
            )

            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Admin Authentication Middleware
# ============================================================================


ADMIN_PREFIX = "/admin"

# Admin paths reachable without a token
PUBLIC_ADMIN_PATHS = {
    "/admin/login",
}


def _unauthorized(error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "error_code": error_code,
            "message": message,
            "details": [],
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


class AdminAuthMiddleware(BaseHTTPMiddleware):
    """Middleware guarding the admin API.

    Requests under ``/admin`` must carry ``Authorization: Bearer <token>``
    where the token is either the admin API key or an access token the
    auth service accepts. Storefront paths are public.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Validate the bearer token for admin endpoints.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        path = request.url.path.rstrip("/")
        if not path.startswith(ADMIN_PREFIX) or path in PUBLIC_ADMIN_PATHS:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            logger.warning("Missing authorization header", path=path, method=request.method)
            return _unauthorized("UNAUTHORIZED", "Missing Authorization header")

        parts = auth_header.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
            logger.warning("Invalid authorization format", path=path, method=request.method)
            return _unauthorized(
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <token>'",
            )

        token = parts[1]
        request.state.access_token = None
        request.state.user_id = None

        if token != settings.admin_api_key:
            try:
                user = await get_auth_client().get_user(token)
            except AuthClientError as e:
                logger.warning(
                    "Invalid access token",
                    path=path,
                    method=request.method,
                    error=e.message,
                )
                return _unauthorized("INVALID_TOKEN", "Invalid or expired token")
            request.state.access_token = token
            request.state.user_id = user.id

        request.state.authenticated = True
        return await call_next(request)


# ============================================================================
# Error Handling Middleware
# ============================================================================


INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def internal_error_response(request_id: str | None) -> JSONResponse:
    """500 envelope for failures no handler turned into a result."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "INTERNAL_ERROR",
            "message": INTERNAL_ERROR_MESSAGE,
            "details": [],
            "request_id": request_id,
        },
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Last line of defence behind the app's exception handlers: anything
    still raised (e.g. from a response serializer) becomes the standard
    500 envelope instead of a bare server error.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            # Set by RequestIdMiddleware, which wraps this one
            request_id = getattr(request.state, "request_id", None)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
                error=str(e),
            )

            return internal_error_response(request_id)


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    # Error handling (innermost, wraps the routers)
    app.add_middleware(ErrorHandlerMiddleware)

    # Admin authentication, sets request.state.user_id
    app.add_middleware(AdminAuthMiddleware)

    # Request ID correlation (outermost, so every response carries the header)
    app.add_middleware(RequestIdMiddleware)
