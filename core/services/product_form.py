# =============================================================================
# core/services/product_form.py - Product Form Controller
# =============================================================================
# Owns the state of the add/edit product form:
# - field values (name, description, price, category, payment link)
# - existing image URLs and newly staged (not yet uploaded) images
# - flags: editing, visible, submitting, processing images
# - field errors and the upload error shown above the form
#
# Submitting uploads the staged images through the upload gateway, appends
# the new URLs after the existing ones, and hands the finished record to the
# caller's on_submit callback.
# =============================================================================

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Protocol

from pydantic import ValidationError

from lib.image_processing import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_DIMENSION,
    ImageFile,
    TooManyImagesError,
    check_image_capacity,
    preprocess_images,
)
from core.models.images import ImageEntry, OrderedImageList
from core.models.product import (
    CATEGORY_MAX_LENGTH,
    DEFAULT_CATEGORY,
    MAX_PRODUCT_IMAGES,
    NAME_MAX_LENGTH,
    PRICE_MAX_LENGTH,
    Product,
    ProductCreate,
    ProductUpdate,
    get_category_template,
    is_http_url,
)
from core.models.upload import UploadResult

logger = logging.getLogger(__name__)

# Field error messages, keyed the way the form's inputs are named
NAME_REQUIRED = "Product name is required"
DESCRIPTION_REQUIRED = "Description is required"
PRICE_REQUIRED = "Price is required"
PAYMENT_LINK_REQUIRED = "Payment link is required"
PAYMENT_LINK_INVALID = "Payment link must be a valid URL (e.g., http://... or https://...)"
IMAGES_REQUIRED = "At least one image is required"
NAME_TOO_LONG = f"Product name must be at most {NAME_MAX_LENGTH} characters"
PRICE_TOO_LONG = f"Price must be at most {PRICE_MAX_LENGTH} characters"
CATEGORY_TOO_LONG = f"Category must be at most {CATEGORY_MAX_LENGTH} characters"

UPLOAD_FAILED = "Failed to upload new images. Please try again."


class ImageUploader(Protocol):
    def upload_images(self, images: list[str]) -> UploadResult: ...


SubmitCallback = Callable[[ProductCreate | ProductUpdate], Any | Awaitable[Any]]


class ProductFormController:
    """
    State and behaviour of the product form.

    Example:
        form = ProductFormController(upload_service, on_submit=panel.add_product)
        form.select_category("Pro Package")
        form.name = "Luna - Fashion Influencer"
        form.payment_link = "https://buy.stripe.com/abc"
        await form.add_images([ImageFile("luna.png", raw_bytes)])
        await form.submit()
    """

    def __init__(
        self,
        uploader: ImageUploader,
        on_submit: SubmitCallback,
        product: Product | None = None,
        max_images: int = MAX_PRODUCT_IMAGES,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ):
        self.uploader = uploader
        self.on_submit = on_submit
        self.product = product
        self.max_images = max_images
        self.max_dimension = max_dimension
        self.jpeg_quality = jpeg_quality

        # Opening the form never applies a category template
        self.name = product.name if product else ""
        self.description = product.description if product else ""
        self.price = product.price if product else ""
        self.payment_link = product.payment_link if product else ""
        self.category = product.category if product else DEFAULT_CATEGORY

        existing = list(product.images) if product else []
        if len(existing) > max_images:
            logger.warning(
                f"Product {product.id} has {len(existing)} images; editing keeps the first {max_images}"
            )
            existing = existing[:max_images]
        self.existing_images = OrderedImageList(existing, capacity=max_images)
        self.staged_images = OrderedImageList(capacity=max_images)

        self.visible = True
        self.is_submitting = False
        self.is_processing_images = False
        self.upload_error: str | None = None
        self.form_errors: dict[str, str] = {}

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_editing(self) -> bool:
        return self.product is not None

    @property
    def image_count(self) -> int:
        return len(self.existing_images) + len(self.staged_images)

    @property
    def can_add_images(self) -> bool:
        return not self.is_processing_images and self.image_count < self.max_images

    @property
    def display_images(self) -> list[tuple[str, ImageEntry]]:
        """Existing images then staged ones; the first is shown as "Main"."""
        return (
            [("existing", entry) for entry in self.existing_images]
            + [("new", entry) for entry in self.staged_images]
        )

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def select_category(self, category: str) -> None:
        """
        Set the category; known categories also load their price/description.

        The template overwrites whatever the admin typed before.
        """
        template = get_category_template(category)
        self.category = category
        if template is not None:
            self.price = template.price
            self.description = template.description

    def validate(self) -> bool:
        errors: dict[str, str] = {}

        if not self.name.strip():
            errors["name"] = NAME_REQUIRED
        elif len(self.name) > NAME_MAX_LENGTH:
            errors["name"] = NAME_TOO_LONG
        if not self.description.strip():
            errors["description"] = DESCRIPTION_REQUIRED
        if not self.price.strip():
            errors["price"] = PRICE_REQUIRED
        elif len(self.price) > PRICE_MAX_LENGTH:
            errors["price"] = PRICE_TOO_LONG
        if len(self.category) > CATEGORY_MAX_LENGTH:
            errors["category"] = CATEGORY_TOO_LONG
        if not self.payment_link.strip():
            errors["paymentLink"] = PAYMENT_LINK_REQUIRED
        elif not is_http_url(self.payment_link.strip()):
            errors["paymentLink"] = PAYMENT_LINK_INVALID
        if self.image_count == 0:
            errors["images"] = IMAGES_REQUIRED

        if not errors:
            # Catch anything else the schema rejects before images are uploaded
            try:
                self.build_record(self.existing_images.sources + self.staged_images.sources)
            except ValidationError as e:
                errors = {str(error["loc"][0]): error["msg"] for error in e.errors()}

        self.form_errors = errors
        return not errors

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    async def add_images(self, files: list[ImageFile]) -> bool:
        """
        Resize and stage newly selected files.

        The whole selection is rejected if it would exceed the image limit
        (checked before any processing) or if any single file fails to
        decode. Returns True when every file was staged.
        """
        if not files:
            return False

        self.upload_error = None
        try:
            check_image_capacity(self.image_count, len(files), self.max_images)
        except TooManyImagesError as e:
            self.upload_error = e.message
            return False

        self.is_processing_images = True
        try:
            outcomes = await preprocess_images(
                files,
                max_dimension=self.max_dimension,
                quality=self.jpeg_quality,
            )
        finally:
            self.is_processing_images = False

        failures = [outcome for outcome in outcomes if not outcome.ok]
        if failures:
            self.upload_error = (
                "Error processing image(s). Please try different images. "
                f"Details: {failures[0].error}"
            )
            return False

        # Another selection may have been staged while this one was processing
        try:
            check_image_capacity(self.image_count, len(outcomes), self.max_images)
        except TooManyImagesError as e:
            self.upload_error = e.message
            return False

        self.staged_images.extend(outcome.data_url for outcome in outcomes)
        logger.debug(f"Staged {len(outcomes)} image(s), {self.image_count} total")
        return True

    def remove_existing_image(self, entry_id: str) -> None:
        self.existing_images.remove(entry_id)

    def remove_staged_image(self, entry_id: str) -> None:
        self.staged_images.remove(entry_id)

    # -------------------------------------------------------------------------
    # Submit / Cancel
    # -------------------------------------------------------------------------

    def build_record(self, image_urls: list[str]) -> ProductCreate | ProductUpdate:
        """Assemble the product payload with the final ordered image list."""
        model = ProductUpdate if self.is_editing else ProductCreate
        return model(
            name=self.name,
            description=self.description,
            price=self.price,
            category=self.category,
            payment_link=self.payment_link.strip(),
            images=image_urls,
        )

    async def _upload_staged(self) -> list[str] | None:
        staged = self.staged_images.sources
        logger.info(f"Uploading {len(staged)} staged image(s)")

        result = await asyncio.to_thread(self.uploader.upload_images, staged)

        if not result.ok or not result.urls:
            message = result.error or UPLOAD_FAILED
            if result.details:
                message += f" Server details: {json.dumps(result.details, default=str)}"
            logger.error(f"Upload error from gateway: {result.error}")
            self.upload_error = message
            return None

        return result.urls

    async def submit(self) -> bool:
        """
        Validate, upload staged images, merge URLs and call on_submit.

        Staged images are kept when anything fails so the admin can retry.
        Returns True once on_submit accepted the record.
        """
        if self.is_submitting:
            return False

        self.upload_error = None
        if not self.validate():
            return False

        self.is_submitting = True
        try:
            image_urls = self.existing_images.sources
            if self.staged_images:
                uploaded = await self._upload_staged()
                if uploaded is None:
                    return False
                image_urls = image_urls + uploaded

            record = self.build_record(image_urls)
            accepted = self.on_submit(record)
            if inspect.isawaitable(accepted):
                accepted = await accepted
        except Exception as e:
            logger.exception(f"Error submitting product: {e}")
            self.upload_error = f"Error during product submission. Details: {e}"
            return False
        finally:
            self.is_submitting = False

        if accepted is False:
            return False

        self.staged_images.clear()
        self.visible = False
        return True

    def cancel(self) -> None:
        """Close the form and discard staged images."""
        self.staged_images.clear()
        self.upload_error = None
        self.form_errors = {}
        self.visible = False
