# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a
# suggestion telling the admin how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ModelStoreException(Exception):
    """
    Base exception for the ModelStore API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MODELSTORE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Product Exceptions
# =============================================================================

class ProductNotFoundError(ModelStoreException):
    """Raised when a product ID doesn't exist."""

    def __init__(self, product_id: str):
        super().__init__(
            message=f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            status_code=404,
            suggestion="Refresh the product list; the product may have been deleted",
            details={"product_id": product_id}
        )


class ProductStoreError(ModelStoreException):
    """Raised when the product database rejects or fails a query."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation}: {error}",
            code="PRODUCT_STORE_ERROR",
            status_code=502,
            suggestion="Try again later or check the database logs",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageConfigurationError(ModelStoreException):
    """Raised when the image storage credential is missing."""

    def __init__(self):
        super().__init__(
            message="File upload service is not configured correctly on the server: Missing token.",
            code="STORAGE_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set SUPABASE_SERVICE_KEY in the server environment",
        )


class StorageCredentialError(ModelStoreException):
    """Raised when the storage service rejects the configured credential."""

    def __init__(self, error: str):
        super().__init__(
            message="File upload configuration error on server: The provided access token for storage is invalid.",
            code="STORAGE_CREDENTIAL_REJECTED",
            status_code=503,
            suggestion="Check that SUPABASE_SERVICE_KEY belongs to this project and hasn't been rotated",
            details={"error": error}
        )


class StorageUploadError(ModelStoreException):
    """Raised when writing an object to storage fails."""

    def __init__(self, error: str, path: str | None = None):
        details = {"error": error}
        if path:
            details["path"] = path
        super().__init__(
            message=f"Failed to upload images: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details=details
        )


class StorageDeleteError(ModelStoreException):
    """Raised when removing objects from storage fails."""

    def __init__(self, paths: list[str], error: str):
        super().__init__(
            message=f"Failed to delete files from storage: {error}",
            code="STORAGE_DELETE_ERROR",
            status_code=502,
            suggestion="Remove the listed objects manually from the storage bucket",
            details={"paths": paths, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def modelstore_exception_handler(
    request: Request,
    exc: ModelStoreException
) -> JSONResponse:
    """
    Convert ModelStoreException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
