# =============================================================================
# lib/image_processing.py - Product Image Preprocessor
# =============================================================================
# Turns raw image files picked by an admin into staged images: JPEG data URLs
# scaled down to fit inside a square bounding box.
#
# Pipeline per file:
#   bytes -> Pillow decode -> RGB -> fit inside MAX x MAX -> JPEG (q=95)
#         -> "data:image/jpeg;base64,<payload>"
#
# Files are processed concurrently (one worker thread each) and every file
# gets its own PreprocessOutcome, so the caller decides whether one bad file
# should reject the whole selection.
#
# Usage:
#   from lib.image_processing import ImageFile, preprocess_images
#   outcomes = await preprocess_images([ImageFile("a.png", raw_bytes)])
# =============================================================================

from __future__ import annotations

import asyncio
import base64
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 1920
DEFAULT_JPEG_QUALITY = 95
DEFAULT_MAX_IMAGES = 5
OUTPUT_MEDIA_TYPE = "image/jpeg"


# =============================================================================
# Errors
# =============================================================================

class ImagePreprocessError(ApplicationError):
    """Raised when a file can't be decoded as an image."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Failed to load image: {filename}. It might be corrupted.",
            code="IMAGE_DECODE_FAILED",
            suggestion="Try a different image (JPEG, PNG, GIF or WebP)",
            details={"filename": filename, "error": error},
        )
        self.filename = filename


class TooManyImagesError(ApplicationError):
    """Raised before processing when a selection would exceed the image limit."""

    def __init__(self, current_count: int, incoming_count: int, max_images: int):
        super().__init__(
            message=f"Maximum {max_images} images allowed per product.",
            code="TOO_MANY_IMAGES",
            suggestion=f"Remove an image first or select at most {max(max_images - current_count, 0)} more",
            details={
                "current_count": current_count,
                "incoming_count": incoming_count,
                "max_images": max_images,
            },
        )


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class ImageFile:
    """A raw file selected for upload."""
    filename: str
    content: bytes


@dataclass(frozen=True)
class PreprocessOutcome:
    """Result of preprocessing one file: a data URL or the reason it failed."""
    filename: str
    data_url: str | None = None
    width: int | None = None
    height: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.data_url is not None


# =============================================================================
# Geometry
# =============================================================================

def compute_target_size(
    width: int,
    height: int,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
) -> tuple[int, int]:
    """
    Scale (width, height) down uniformly so neither side exceeds max_dimension.

    Images already within bounds are returned unchanged. Results are rounded
    to whole pixels, clamped to [1, max_dimension].

    Example:
        compute_target_size(3840, 2160)  # (1920, 1080)
        compute_target_size(800, 600)    # (800, 600)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    if width <= max_dimension and height <= max_dimension:
        return width, height

    ratio = min(max_dimension / width, max_dimension / height)
    target_width = min(max(round(width * ratio), 1), max_dimension)
    target_height = min(max(round(height * ratio), 1), max_dimension)
    return target_width, target_height


def check_image_capacity(
    current_count: int,
    incoming_count: int,
    max_images: int = DEFAULT_MAX_IMAGES,
) -> None:
    """
    Reject a selection that would push a product past max_images.

    Raises:
        TooManyImagesError: If current_count + incoming_count > max_images
    """
    if current_count + incoming_count > max_images:
        raise TooManyImagesError(current_count, incoming_count, max_images)


# =============================================================================
# Encoding
# =============================================================================

def resize_to_data_url(
    content: bytes,
    filename: str = "image",
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> tuple[str, int, int]:
    """
    Decode, constrain and re-encode one image.

    Args:
        content: Raw file bytes
        filename: Used in error messages only
        max_dimension: Bounding box side in pixels
        quality: JPEG quality (1-100)

    Returns:
        Tuple of (data URL, output width, output height)

    Raises:
        ImagePreprocessError: If the bytes aren't a decodable image
    """
    try:
        with Image.open(io.BytesIO(content)) as image:
            image.load()
            # Phone photos store rotation in EXIF; bake it into the pixels
            upright = ImageOps.exif_transpose(image)
            rgb = upright.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImagePreprocessError(filename, str(e))

    target_size = compute_target_size(rgb.width, rgb.height, max_dimension)
    if target_size != rgb.size:
        rgb = rgb.resize(target_size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    rgb.save(buffer, format="JPEG", quality=quality)
    payload = base64.b64encode(buffer.getvalue()).decode("ascii")

    return f"data:{OUTPUT_MEDIA_TYPE};base64,{payload}", rgb.width, rgb.height


def _process_one(
    file: ImageFile,
    max_dimension: int,
    quality: int,
) -> PreprocessOutcome:
    try:
        data_url, width, height = resize_to_data_url(
            file.content,
            filename=file.filename,
            max_dimension=max_dimension,
            quality=quality,
        )
    except ImagePreprocessError as e:
        logger.warning(f"Error processing image file {file.filename}: {e.details.get('error')}")
        return PreprocessOutcome(filename=file.filename, error=e.message)
    except Exception as e:
        # Decoders can raise anything; the failure stays with this file
        logger.exception(f"Unexpected error processing image file {file.filename}: {e}")
        error = ImagePreprocessError(file.filename, str(e))
        return PreprocessOutcome(filename=file.filename, error=error.message)

    logger.debug(f"Resized {file.filename} to {width}x{height}")
    return PreprocessOutcome(
        filename=file.filename,
        data_url=data_url,
        width=width,
        height=height,
    )


async def preprocess_images(
    files: list[ImageFile],
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> list[PreprocessOutcome]:
    """
    Preprocess every file concurrently and wait for all of them to settle.

    Returns one outcome per file, in the same order as `files`. A failed
    decode never cancels the other files.
    """
    if not files:
        return []

    tasks = [
        asyncio.to_thread(_process_one, file, max_dimension, quality)
        for file in files
    ]
    outcomes = await asyncio.gather(*tasks)

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    logger.info(f"Preprocessed {len(files)} image(s), {failed} failed")
    return list(outcomes)
