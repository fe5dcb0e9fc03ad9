# =============================================================================
# core/services/product_service.py - Product Store Client
# =============================================================================
# CRUD for products and their ordered image rows.
#
# Tables:
#   products(id, name, description, price, category, payment_link,
#            created_at, updated_at)
#   product_images(id, product_id, image_url, image_order, created_at)
#
# Updates replace every mutable field and rewrite the image rows with an
# explicit image_order. Concurrent edits are last-write-wins.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from core.models.product import Product, ProductCreate, ProductUpdate
from app.exceptions import ProductNotFoundError, ProductStoreError

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"
IMAGES_TABLE = "product_images"

# Product columns plus the embedded image rows
PRODUCT_SELECT = "*, product_images(id, image_url, image_order)"


def _product_row(data: ProductCreate | ProductUpdate) -> dict[str, Any]:
    return {
        "name": data.name,
        "description": data.description,
        "price": data.price,
        "category": data.category,
        "payment_link": data.payment_link,
    }


def _image_rows(product_id: str, images: list[str]) -> list[dict[str, Any]]:
    return [
        {"product_id": product_id, "image_url": url, "image_order": order}
        for order, url in enumerate(images)
    ]


class ProductService:
    """
    Service for product persistence.

    Provides a clean interface between API routes / the admin panel and the
    database.
    """

    @staticmethod
    def list_products() -> list[Product]:
        """
        List all products, newest first.

        Returns:
            Products with their images in display order

        Raises:
            ProductStoreError: If the query fails
        """
        try:
            response = (
                SupabaseClient.table(PRODUCTS_TABLE)
                .select(PRODUCT_SELECT)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list products: {e}")
            raise ProductStoreError("list products", str(e))

        products = [Product.from_row(row) for row in response.data or []]
        logger.debug(f"Fetched {len(products)} products")
        return products

    @staticmethod
    def get_product(product_id: str | UUID) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist
            ProductStoreError: If the query fails
        """
        product_id_str = normalize_uuid(product_id)

        try:
            response = (
                SupabaseClient.table(PRODUCTS_TABLE)
                .select(PRODUCT_SELECT)
                .eq("id", product_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch product {product_id_str}: {e}")
            raise ProductStoreError("fetch product", str(e))

        if not response.data:
            raise ProductNotFoundError(product_id_str)

        return Product.from_row(response.data[0])

    @staticmethod
    def create_product(data: ProductCreate) -> Product:
        """
        Create a product and its image rows.

        Args:
            data: Validated product fields (no id)

        Returns:
            The stored product with its store-assigned id

        Raises:
            ProductStoreError: If either insert fails
        """
        try:
            response = (
                SupabaseClient.table(PRODUCTS_TABLE)
                .insert(_product_row(data))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to create product: {e}")
            raise ProductStoreError("create product", str(e))

        if not response.data:
            raise ProductStoreError("create product", "Insert returned no data")

        row = response.data[0]
        product_id = str(row["id"])
        image_rows = _image_rows(product_id, data.images)

        try:
            SupabaseClient.table(IMAGES_TABLE).insert(image_rows).execute()
        except Exception as e:
            logger.error(f"Failed to store images for product {product_id}: {e}")
            # A product without images must not stay behind
            try:
                SupabaseClient.table(PRODUCTS_TABLE).delete().eq("id", product_id).execute()
            except Exception as cleanup_error:
                logger.error(f"Could not remove product {product_id} after failed image insert: {cleanup_error}")
            raise ProductStoreError("store product images", str(e))

        logger.info(f"Created product: {product_id} with {len(image_rows)} image(s)")
        return Product.from_row({**row, "product_images": image_rows})

    @staticmethod
    def update_product(product_id: str | UUID, data: ProductUpdate) -> Product:
        """
        Replace every mutable field of a product, including its images.

        Args:
            product_id: The product UUID
            data: The complete new field values

        Returns:
            The updated product

        Raises:
            ProductNotFoundError: If the product doesn't exist
            ProductStoreError: If any query fails
        """
        product_id_str = normalize_uuid(product_id)
        update_data = {
            **_product_row(data),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = (
                SupabaseClient.table(PRODUCTS_TABLE)
                .update(update_data)
                .eq("id", product_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update product {product_id_str}: {e}")
            raise ProductStoreError("update product", str(e))

        if not response.data:
            raise ProductNotFoundError(product_id_str)

        image_rows = _image_rows(product_id_str, data.images)

        # Insert the new rows before deleting the old ones
        try:
            existing = (
                SupabaseClient.table(IMAGES_TABLE)
                .select("id")
                .eq("product_id", product_id_str)
                .execute()
            )
            old_ids = [row["id"] for row in existing.data or []]
            SupabaseClient.table(IMAGES_TABLE).insert(image_rows).execute()
        except Exception as e:
            logger.error(f"Failed to replace images for product {product_id_str}: {e}")
            raise ProductStoreError("store product images", str(e))

        if old_ids:
            try:
                SupabaseClient.table(IMAGES_TABLE).delete().in_("id", old_ids).execute()
            except Exception as e:
                logger.error(f"Failed to remove old images for product {product_id_str}: {e}")
                raise ProductStoreError("remove old product images", str(e))

        logger.info(f"Updated product: {product_id_str}")
        return Product.from_row({**response.data[0], "product_images": image_rows})

    @staticmethod
    def delete_product(product_id: str | UUID) -> None:
        """
        Permanently delete a product and its image rows.

        There is no soft delete; the stored image objects are left in the
        bucket.

        Raises:
            ProductNotFoundError: If the product doesn't exist
            ProductStoreError: If a query fails
        """
        product_id_str = normalize_uuid(product_id)

        try:
            SupabaseClient.table(IMAGES_TABLE).delete().eq("product_id", product_id_str).execute()
            response = (
                SupabaseClient.table(PRODUCTS_TABLE)
                .delete()
                .eq("id", product_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete product {product_id_str}: {e}")
            raise ProductStoreError("delete product", str(e))

        if not response.data:
            raise ProductNotFoundError(product_id_str)

        logger.info(f"Deleted product: {product_id_str}")
