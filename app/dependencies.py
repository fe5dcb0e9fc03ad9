# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.product_service import ProductService
from core.services.storage_service import StorageService
from core.services.upload_service import UploadService


def get_product_service() -> type[ProductService]:
    """Return the product store client."""
    return ProductService


def get_upload_service() -> UploadService:
    """
    Build the upload gateway with the storage credential from settings.

    The credential is passed in explicitly so the gateway never reads the
    environment itself.
    """
    return UploadService(
        storage=StorageService,
        credential=settings.SUPABASE_SERVICE_KEY,
        bucket=settings.PRODUCT_IMAGES_BUCKET,
    )


# Type aliases for dependency injection
ProductServiceDep = Annotated[type[ProductService], Depends(get_product_service)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
