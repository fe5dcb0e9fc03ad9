# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Writes product images to the public Supabase Storage bucket and turns
# storage keys into public URLs.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageCredentialError, StorageDeleteError, StorageUploadError

logger = logging.getLogger(__name__)

# Storage bucket name
BUCKET_NAME = settings.PRODUCT_IMAGES_BUCKET

# Messages storage returns when the service key is wrong or expired
_CREDENTIAL_ERROR_MARKERS = (
    "invalid compact jws",
    "invalid signature",
    "invalid jwt",
    "jwt expired",
    "invalid token",
    "no token found",
    "unauthorized",
)


def _error_status(error: Exception) -> int | None:
    """Pull an HTTP status out of a storage error, if it carries one."""
    payload: Any = error.args[0] if error.args else None
    if isinstance(payload, dict):
        status = payload.get("statusCode") or payload.get("status")
        try:
            return int(status) if status is not None else None
        except (TypeError, ValueError):
            return None
    return None


def is_credential_error(error: Exception) -> bool:
    """True when storage rejected the request because of the credential."""
    if _error_status(error) in (401, 403):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _CREDENTIAL_ERROR_MARKERS)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading and deleting product images in the public bucket.
    """

    @staticmethod
    def upload_image(
        path: str,
        content: bytes,
        content_type: str,
        bucket: str = BUCKET_NAME,
    ) -> str:
        """
        Upload image bytes as a publicly readable object.

        Args:
            path: Storage key, e.g. "product-1700000000000-a1b2c3d4.jpg"
            content: Raw image bytes
            content_type: Media type stored with the object
            bucket: Target bucket (must be public)

        Returns:
            Public URL of the stored object

        Raises:
            StorageCredentialError: If storage rejects the service key
            StorageUploadError: If the upload fails for any other reason
        """
        try:
            SupabaseClient.bucket(bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            if is_credential_error(e):
                raise StorageCredentialError(str(e))
            raise StorageUploadError(str(e), path=path)

        logger.info(f"Uploaded image to storage: {bucket}/{path} ({len(content)} bytes)")
        return StorageService.get_public_url(path, bucket=bucket)

    @staticmethod
    def get_public_url(storage_path: str, bucket: str = BUCKET_NAME) -> str:
        """
        Get a public URL for a storage file.

        Args:
            storage_path: Path in storage bucket

        Returns:
            Public URL string
        """
        try:
            return SupabaseClient.bucket(bucket).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise StorageUploadError(str(e), path=storage_path)

    @staticmethod
    def delete_files(storage_paths: list[str], bucket: str = BUCKET_NAME) -> None:
        """
        Delete objects from storage.

        Args:
            storage_paths: Paths in storage bucket

        Raises:
            StorageDeleteError: If storage refuses the delete
        """
        if not storage_paths:
            return

        try:
            SupabaseClient.bucket(bucket).remove(storage_paths)
            logger.info(f"Deleted {len(storage_paths)} file(s) from storage")
        except Exception as e:
            logger.error(f"Failed to delete files: {e}")
            raise StorageDeleteError(storage_paths, str(e))

    @staticmethod
    def check_bucket(bucket: str = BUCKET_NAME) -> None:
        """Raise if the bucket can't be listed (used by readiness checks)."""
        SupabaseClient.bucket(bucket).list(options={"limit": 1})
