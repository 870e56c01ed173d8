"""Storefront admin API main application module.

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

from storefront.api.banners import router as banners_router
from storefront.api.categories import router as categories_router
from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.products import router as products_router
from storefront.api.upload import router as upload_router
from storefront.domain.exceptions import (
    BadRequestError,
    CatalogError,
    ConflictError,
    InternalError,
    NotFoundError,
    UploadError,
)
from storefront.infrastructure.asset_store import close_asset_store
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import init_models
from storefront.infrastructure.logging import setup_logging

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
    setup_logging()
    logger.info(
        "Starting storefront admin API",
        version=settings.api_version,
        debug=settings.debug,
    )
    await init_models()

    yield

    # Shutdown
    await close_asset_store()
    logger.info("Shutting down storefront admin API")


app = FastAPI(
    title="Storefront Admin API",
    description="Products, categories and banners for the storefront admin panel",
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

# Setup custom middleware (request ID, admin key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(categories_router)
app.include_router(banners_router)
app.include_router(products_router)
app.include_router(upload_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


ERROR_STATUS_CODES: dict[type[CatalogError], int] = {
    BadRequestError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    UploadError: 502,
    InternalError: 500,
}


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: dict | None = None,
) -> JSONResponse:
    """Build the ``{success: false, error}`` envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "error_code": error_code,
            "details": details or {},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate catalog errors into HTTP responses."""
    status_code = next(
        (code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)),
        500,
    )
    if status_code >= 500:
        logger.error(
            "Catalog operation failed",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )
    return error_response(request, status_code, exc.error_code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as bad requests."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return error_response(
        request,
        400,
        BadRequestError.error_code,
        f"{field}: {message}" if field else message,
        {"field": field} if field else None,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "ERROR"
        message = str(detail)

    return error_response(request, exc.status_code, error_code, message)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")
