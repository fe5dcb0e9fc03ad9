# =============================================================================
# core/services/upload_service.py - Image Upload Gateway
# =============================================================================
# Accepts a batch of data URLs, writes each image to storage and returns the
# public URLs in input order.
#
# Per entry:
#   1. Check the "data:image/...;base64,<payload>" shape (skip if malformed)
#   2. Decode the base64 payload (skip if undecodable or empty)
#   3. Derive a fresh key: product-<epoch ms>-<random hex>.<ext>
#   4. Upload as a public object with the detected content type
#   5. Record the public URL
#
# Malformed entries are skipped. Storage failures abort the batch, and any
# objects already written by the aborted batch are deleted again.
# =============================================================================

import base64
import binascii
import logging
import re
import secrets
import time
from typing import Any

from app.exceptions import (
    ModelStoreException,
    StorageConfigurationError,
    StorageCredentialError,
    StorageUploadError,
)
from core.models.upload import UploadItem, UploadItemStatus, UploadResult
from core.services.storage_service import BUCKET_NAME, StorageService

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/"
DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_EXTENSION = "bin"
KEY_PREFIX = "product"

_HEADER_PATTERN = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64$")

# Media type -> file extension used in storage keys
EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/pjpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/avif": "avif",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
    "image/tiff": "tiff",
}

NO_IMAGES_UPLOADED = "No images were successfully uploaded. Check image formats or server logs."


# =============================================================================
# Helpers
# =============================================================================

class MalformedImageError(ValueError):
    """A submitted entry isn't a usable base64 image data URL."""


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """
    Split a data URL into (content type, raw bytes).

    The content type falls back to image/jpeg when the header carries an
    image type we can't read.

    Raises:
        MalformedImageError: If the entry isn't "data:image/...,<base64>" or
            the payload doesn't decode
    """
    if not isinstance(data_url, str) or not data_url.startswith(DATA_URL_PREFIX):
        raise MalformedImageError("not an image data URL")

    parts = data_url.split(",")
    if len(parts) != 2:
        raise MalformedImageError(f"expected 2 parts after split, got {len(parts)}")

    header, payload = parts
    match = _HEADER_PATTERN.match(header)
    content_type = match.group(1).lower() if match else DEFAULT_CONTENT_TYPE

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedImageError(f"invalid base64 payload: {e}")

    if not content:
        raise MalformedImageError("empty payload")

    return content_type, content


def extension_for(content_type: str) -> str:
    """Map a media type to a key extension ("bin" when unknown)."""
    return EXTENSIONS.get(content_type.lower(), DEFAULT_EXTENSION)


def generate_storage_key(content_type: str) -> str:
    """
    Build a fresh, unguessable storage key.

    Example:
        generate_storage_key("image/png")  # "product-1700000000000-9f3c2a1be4.png"
    """
    timestamp_ms = int(time.time() * 1000)
    return f"{KEY_PREFIX}-{timestamp_ms}-{secrets.token_hex(5)}.{extension_for(content_type)}"


# =============================================================================
# Service
# =============================================================================

class UploadService:
    """
    Upload gateway for product images.

    The storage credential is injected (from validated settings) rather than
    read from the environment here; an empty credential short-circuits every
    call before storage is touched.

    Example:
        service = UploadService(StorageService, credential=settings.SUPABASE_SERVICE_KEY)
        result = service.upload_images(["data:image/jpeg;base64,/9j/4AAQ..."])
        if result.ok:
            product_images.extend(result.urls)
    """

    def __init__(
        self,
        storage: Any = StorageService,
        credential: str | None = None,
        bucket: str = BUCKET_NAME,
    ):
        self.storage = storage
        self.credential = credential
        self.bucket = bucket

    def upload_images(self, images: list[str]) -> UploadResult:
        """
        Upload a batch of data URLs, one after another.

        Args:
            images: Transport-encoded images, in display order

        Returns:
            UploadResult with `urls` for the valid entries (input order kept),
            or an error when nothing could be uploaded or storage failed
        """
        logger.info(f"Received {len(images)} image(s) for upload")

        if not self.credential:
            logger.error("Storage credential is not configured; refusing upload")
            exc = StorageConfigurationError()
            return UploadResult.failure(exc.message, exc.code)

        items: list[UploadItem] = []
        urls: list[str] = []
        uploaded_paths: list[str] = []

        for index, data_url in enumerate(images):
            try:
                content_type, content = parse_data_url(data_url)
            except MalformedImageError as e:
                preview = (data_url[:30] + "...") if isinstance(data_url, str) else repr(data_url)
                logger.warning(f"Skipping image {index + 1}: {e} ({preview})")
                items.append(UploadItem(index=index, status=UploadItemStatus.SKIPPED, reason=str(e)))
                continue

            path = generate_storage_key(content_type)
            logger.info(f"Image {index + 1}: uploading {len(content)} bytes as {path} ({content_type})")

            try:
                url = self.storage.upload_image(path, content, content_type, bucket=self.bucket)
            except Exception as e:
                error = e if isinstance(e, ModelStoreException) else StorageUploadError(str(e), path=path)
                items.append(UploadItem(index=index, status=UploadItemStatus.FAILED, path=path, reason=error.message))
                return self._abort(error, items, uploaded_paths)

            uploaded_paths.append(path)
            urls.append(url)
            items.append(UploadItem(index=index, status=UploadItemStatus.UPLOADED, url=url, path=path))

        if not urls and images:
            logger.warning("No images were successfully uploaded, though some were provided")
            return UploadResult.failure(NO_IMAGES_UPLOADED, "NO_IMAGES_UPLOADED", items=items)

        logger.info(f"Successfully uploaded {len(urls)} of {len(images)} image(s)")
        return UploadResult.success(urls, items)

    def _abort(
        self,
        error: ModelStoreException,
        items: list[UploadItem],
        uploaded_paths: list[str],
    ) -> UploadResult:
        """
        Stop the batch after a storage failure and delete what it already wrote.

        Credential problems are reported as configuration errors; everything
        else keeps the storage message as detail.
        """
        details: dict[str, Any] = dict(error.details)
        if isinstance(error, StorageCredentialError):
            details = {"error": error.details.get("error")}

        if uploaded_paths:
            try:
                self.storage.delete_files(uploaded_paths, bucket=self.bucket)
                details["removed_paths"] = list(uploaded_paths)
                logger.info(f"Removed {len(uploaded_paths)} object(s) from the aborted batch")
            except Exception as cleanup_error:
                details["orphaned_paths"] = list(uploaded_paths)
                logger.error(f"Could not remove objects from the aborted batch: {cleanup_error}")

        # Earlier items were rolled back, so they no longer point at anything
        for item in items:
            if item.status == UploadItemStatus.UPLOADED:
                item.status = UploadItemStatus.FAILED
                item.url = None
                item.reason = "rolled back after a later upload failed"

        logger.error(f"Image upload aborted: {error.message}")
        return UploadResult.failure(error.message, error.code, items=items, details=details)
