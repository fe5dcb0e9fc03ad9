# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .upload_service import UploadService
from .product_service import ProductService
from .product_form import ProductFormController
from .admin_panel import AdminPanel

__all__ = [
    "StorageService",
    "UploadService",
    "ProductService",
    "ProductFormController",
    "AdminPanel",
]
