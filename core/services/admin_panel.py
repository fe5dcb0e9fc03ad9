# =============================================================================
# core/services/admin_panel.py - Admin Product Listing
# =============================================================================
# In-memory state of the admin product listing:
# - the product list (newest first)
# - loading flag, error and success notices
# - the open add/edit form, if any
#
# Every store failure becomes an error message on the panel; nothing here
# raises to the caller.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from core.models.product import Product, ProductCreate, ProductUpdate
from core.services.product_form import ImageUploader, ProductFormController
from core.services.product_service import ProductService

logger = logging.getLogger(__name__)


class AdminPanel:
    """
    Admin listing view backed by the product store.

    Example:
        panel = AdminPanel(ProductService, upload_service)
        panel.refresh()
        form = panel.open_create_form()
        ...
        await form.submit()   # calls panel.add_product on success
    """

    def __init__(
        self,
        store: Any = ProductService,
        uploader: ImageUploader | None = None,
        **form_options: Any,
    ):
        self.store = store
        self.uploader = uploader
        self.form_options = {
            "max_images": settings.MAX_PRODUCT_IMAGES,
            "max_dimension": settings.MAX_IMAGE_DIMENSION,
            "jpeg_quality": settings.IMAGE_JPEG_QUALITY,
            **form_options,
        }

        self.products: list[Product] = []
        self.is_loading = False
        self.error: str | None = None
        self.notice: str | None = None
        self.form: ProductFormController | None = None

    @property
    def editing_product(self) -> Product | None:
        return self.form.product if self.form else None

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def refresh(self) -> bool:
        """Reload the product list from the store."""
        self.is_loading = True
        try:
            self.products = self.store.list_products()
            return True
        except Exception as e:
            logger.error(f"Error fetching products: {e}")
            self.error = "Failed to load products"
            return False
        finally:
            self.is_loading = False

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def open_create_form(self) -> ProductFormController:
        self.form = ProductFormController(
            self.uploader,
            on_submit=self.add_product,
            **self.form_options,
        )
        return self.form

    def open_edit_form(self, product_id: str) -> ProductFormController | None:
        product = next((p for p in self.products if p.id == product_id), None)
        if product is None:
            self.error = "Product not found. Refresh the list and try again."
            return None

        self.form = ProductFormController(
            self.uploader,
            on_submit=lambda record: self.edit_product(product.id, record),
            product=product,
            **self.form_options,
        )
        return self.form

    def close_form(self) -> None:
        if self.form is not None:
            self.form.cancel()
        self.form = None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_product(self, data: ProductCreate) -> bool:
        self.is_loading = True
        self.error = None
        self.notice = None
        try:
            product = self.store.create_product(data)
        except Exception as e:
            logger.error(f"Error adding product: {e}")
            self.error = "Failed to add product. Please try again."
            return False
        finally:
            self.is_loading = False

        self.products = [product] + self.products
        self.form = None
        self.notice = "Product added successfully!"
        return True

    def edit_product(self, product_id: str, data: ProductUpdate) -> bool:
        self.is_loading = True
        self.error = None
        self.notice = None
        try:
            updated = self.store.update_product(product_id, data)
        except Exception as e:
            logger.error(f"Error updating product: {e}")
            self.error = "Failed to update product. Please try again."
            return False
        finally:
            self.is_loading = False

        self.products = [updated if p.id == product_id else p for p in self.products]
        self.form = None
        self.notice = "Product updated successfully!"
        return True

    def delete_product(self, product_id: str, confirmed: bool = True) -> bool:
        """Delete a product permanently; does nothing unless confirmed."""
        if not confirmed:
            return False

        self.is_loading = True
        self.error = None
        self.notice = None
        try:
            self.store.delete_product(product_id)
        except Exception as e:
            logger.error(f"Error deleting product: {e}")
            self.error = "Failed to delete product. Please try again."
            return False
        finally:
            self.is_loading = False

        self.products = [p for p in self.products if p.id != product_id]
        self.notice = "Product deleted successfully!"
        return True
