# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ModelStore Admin API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ModelStoreException,
    modelstore_exception_handler,
)
from app.routers import health, products, upload

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup logs the configuration the admin panel depends on. Settings
    validation has already rejected a missing storage credential.
    """
    logger.info(f"Starting ModelStore Admin API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Product image bucket: {settings.PRODUCT_IMAGES_BUCKET}")

    if not settings.admin_emails_list:
        logger.warning("ADMIN_EMAILS is empty; any signed-in user can manage products")

    yield

    logger.info("Shutting down ModelStore Admin API")


# Create FastAPI application
app = FastAPI(
    title="ModelStore Admin API",
    description="""
## Product Catalogue and Admin API

Lists products for the storefront and lets admins manage them.

### Admin Workflow

1. **Preprocess images** - Images are downscaled to at most 1920px and re-encoded as JPEG
2. **Upload images** - `POST /api/v1/uploads/images` with data URLs, returns public URLs
3. **Save the product** - `POST /api/v1/products` with the returned URLs in display order

The first image of a product is its main image.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Products",
            "description": "Public product listing and admin CRUD",
        },
        {
            "name": "Upload",
            "description": "Upload product images to storage",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ModelStoreException)
async def handle_modelstore_exception(request: Request, exc: ModelStoreException):
    """Handle custom ModelStore exceptions."""
    return await modelstore_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Product endpoints
app.include_router(
    products.router,
    prefix="/api/v1/products",
    tags=["Products"]
)

# Image upload endpoints
app.include_router(
    upload.router,
    prefix="/api/v1/uploads",
    tags=["Upload"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "ModelStore Admin API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
