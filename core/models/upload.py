# =============================================================================
# core/models/upload.py - Image Upload Schemas
# =============================================================================
# Contract of the upload gateway:
# - UploadImagesRequest: ordered list of data URLs ("data:image/...;base64,...")
# - UploadResult: {urls} on success, {error, details} on failure, plus one
#   UploadItem per input entry describing what happened to it
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UploadItemStatus(str, Enum):
    """
    What happened to one submitted image.

    - uploaded: written to storage, `url` is set
    - skipped: malformed or undecodable, nothing was written
    - failed: storage rejected it and the batch was aborted
    """
    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"


class UploadItem(BaseModel):
    """Outcome for a single entry of an upload batch."""

    index: int = Field(..., ge=0, description="Position in the submitted list")
    status: UploadItemStatus
    url: str | None = Field(default=None, description="Public URL when uploaded")
    path: str | None = Field(default=None, description="Storage key when uploaded")
    reason: str | None = Field(default=None, description="Why the entry was skipped or failed")


class UploadImagesRequest(BaseModel):
    """
    Schema for POST /uploads/images.

    Example:
        {"images": ["data:image/jpeg;base64,/9j/4AAQSkZJRg..."]}
    """

    images: list[str] = Field(
        ...,
        max_length=20,
        description="Transport-encoded images in the order they should appear"
    )


class UploadResult(BaseModel):
    """
    Result of an upload batch.

    Exactly one of `urls` / `error` is set. `urls` keeps the relative order
    of the valid entries; skipped entries are simply absent from it.
    """

    urls: list[str] | None = None
    error: str | None = None
    code: str | None = None
    details: Any | None = None
    items: list[UploadItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.urls is not None

    @classmethod
    def success(cls, urls: list[str], items: list[UploadItem]) -> "UploadResult":
        return cls(urls=urls, items=items)

    @classmethod
    def failure(
        cls,
        error: str,
        code: str,
        items: list[UploadItem] | None = None,
        details: Any | None = None,
    ) -> "UploadResult":
        return cls(error=error, code=code, details=details, items=items or [])

    def to_response(self) -> dict[str, Any]:
        """Wire shape: {urls, items} or {error, code, details?, items}."""
        return self.model_dump(mode="json", exclude_none=True)
