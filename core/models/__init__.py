# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains the schemas for data validation:
# - product.py: Product CRUD schemas and category templates
# - upload.py: Image upload request/result schemas
# - images.py: OrderedImageList value type used by the product form
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Product Models
# -----------------------------------------------------------------------------
from .product import (
    CATEGORY_TEMPLATES,
    DEFAULT_CATEGORY,
    MAX_PRODUCT_IMAGES,
    PRO_PACKAGE,
    STARTER_PACKAGE,
    CategoryTemplate,
    Product,
    ProductCreate,
    ProductList,
    ProductUpdate,
    get_category_template,
    is_http_url,
)

# -----------------------------------------------------------------------------
# Upload Models
# -----------------------------------------------------------------------------
from .upload import (
    UploadImagesRequest,
    UploadItem,
    UploadItemStatus,
    UploadResult,
)

# -----------------------------------------------------------------------------
# Image List
# -----------------------------------------------------------------------------
from .images import (
    ImageEntry,
    ImageListFullError,
    OrderedImageList,
)

__all__ = [
    # Product
    "CATEGORY_TEMPLATES",
    "DEFAULT_CATEGORY",
    "MAX_PRODUCT_IMAGES",
    "PRO_PACKAGE",
    "STARTER_PACKAGE",
    "CategoryTemplate",
    "Product",
    "ProductCreate",
    "ProductList",
    "ProductUpdate",
    "get_category_template",
    "is_http_url",
    # Upload
    "UploadImagesRequest",
    "UploadItem",
    "UploadItemStatus",
    "UploadResult",
    # Image list
    "ImageEntry",
    "ImageListFullError",
    "OrderedImageList",
]
