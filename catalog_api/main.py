"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_api.api.auth import router as auth_router
from catalog_api.api.dashboard import router as dashboard_router
from catalog_api.api.health import router as health_router
from catalog_api.api.middleware import internal_error_response, setup_middleware
from catalog_api.api.options import router as options_router
from catalog_api.api.products import router as products_router
from catalog_api.api.storefront import router as storefront_router
from catalog_api.api.taxonomy import router as taxonomy_router
from catalog_api.api.users import router as users_router
from catalog_api.infrastructure.auth_client import close_auth_client
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import dispose_engine
from catalog_api.infrastructure.logging_config import configure_logging

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
    )

    yield

    # Shutdown
    await close_auth_client()
    await dispose_engine()
    logger.info("Shutting down Catalog API")


app = FastAPI(
    title="Catalog API",
    description="Product catalog administration and public storefront backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, admin auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(storefront_router)
app.include_router(auth_router)
app.include_router(taxonomy_router)
app.include_router(options_router)
app.include_router(products_router)
app.include_router(users_router)
app.include_router(dashboard_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    # Extract error details from exception
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies and parameters with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body") or None,
            "message": error["msg"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content={
            "error_code": "VALIDATION_ERROR",
            "message": details[0]["message"] if details else "Invalid request",
            "details": details,
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return internal_error_response(request_id)
