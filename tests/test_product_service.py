# =============================================================================
# tests/test_product_service.py - Product Store Tests
# =============================================================================
# Tests ProductService with a mocked Supabase client:
# - listing newest first
# - create writes product then ordered image rows
# - update replaces fields and image rows (new rows first)
# - failed image writes never leave a product without images
# - delete / not-found / store errors
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import ProductNotFoundError, ProductStoreError
from core.models.product import ProductCreate, ProductUpdate
from core.services.product_service import ProductService


def make_tables():
    """Return (table side_effect, products mock, images mock)."""
    products = MagicMock(name="products")
    images = MagicMock(name="product_images")
    tables = {"products": products, "product_images": images}
    return (lambda name: tables[name]), products, images


class TestListProducts:

    @patch("core.services.product_service.SupabaseClient")
    def test_lists_newest_first(self, mock_client, sample_product_row):
        # Arrange
        table, products, _ = make_tables()
        mock_client.table.side_effect = table
        query = products.select.return_value.order.return_value
        query.execute.return_value = MagicMock(data=[sample_product_row])

        # Act
        result = ProductService.list_products()

        # Assert
        products.select.return_value.order.assert_called_once_with("created_at", desc=True)
        assert len(result) == 1
        assert result[0].images[0] == "https://cdn.test/luna-1.jpg"

    @patch("core.services.product_service.SupabaseClient")
    def test_store_failure(self, mock_client):
        mock_client.table.side_effect = Exception("connection refused")

        with pytest.raises(ProductStoreError) as exc_info:
            ProductService.list_products()

        assert exc_info.value.details["operation"] == "list products"


class TestGetProduct:

    @patch("core.services.product_service.SupabaseClient")
    def test_not_found(self, mock_client):
        table, products, _ = make_tables()
        mock_client.table.side_effect = table
        chain = products.select.return_value.eq.return_value.limit.return_value
        chain.execute.return_value = MagicMock(data=[])

        with pytest.raises(ProductNotFoundError):
            ProductService.get_product("missing-id")

    @patch("core.services.product_service.SupabaseClient")
    def test_found(self, mock_client, sample_product_row):
        table, products, _ = make_tables()
        mock_client.table.side_effect = table
        chain = products.select.return_value.eq.return_value.limit.return_value
        chain.execute.return_value = MagicMock(data=[sample_product_row])

        product = ProductService.get_product(sample_product_row["id"])

        assert product.id == sample_product_row["id"]
        products.select.return_value.eq.assert_called_once_with("id", sample_product_row["id"])


class TestCreateProduct:

    @patch("core.services.product_service.SupabaseClient")
    def test_writes_product_then_ordered_images(self, mock_client, sample_product_fields, sample_product_row):
        # Arrange
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        stored = {k: v for k, v in sample_product_row.items() if k != "product_images"}
        products.insert.return_value.execute.return_value = MagicMock(data=[stored])

        # Act
        product = ProductService.create_product(ProductCreate(**sample_product_fields))

        # Assert
        inserted = products.insert.call_args.args[0]
        assert inserted["payment_link"] == "https://buy.stripe.com/test_luna"
        assert "id" not in inserted
        images.insert.assert_called_once_with([
            {"product_id": stored["id"], "image_url": "https://cdn.test/luna-1.jpg", "image_order": 0},
            {"product_id": stored["id"], "image_url": "https://cdn.test/luna-2.jpg", "image_order": 1},
        ])
        assert product.id == stored["id"]
        assert product.images == sample_product_fields["images"]

    @patch("core.services.product_service.SupabaseClient")
    def test_empty_insert_response(self, mock_client, sample_product_fields):
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        products.insert.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(ProductStoreError):
            ProductService.create_product(ProductCreate(**sample_product_fields))

        images.insert.assert_not_called()

    @patch("core.services.product_service.SupabaseClient")
    def test_failed_image_insert_removes_product(self, mock_client, sample_product_fields, sample_product_row):
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        stored = {k: v for k, v in sample_product_row.items() if k != "product_images"}
        products.insert.return_value.execute.return_value = MagicMock(data=[stored])
        images.insert.return_value.execute.side_effect = Exception("insert failed")

        with pytest.raises(ProductStoreError) as exc_info:
            ProductService.create_product(ProductCreate(**sample_product_fields))

        assert exc_info.value.details["operation"] == "store product images"
        products.delete.return_value.eq.assert_called_once_with("id", stored["id"])


class TestUpdateProduct:

    @patch("core.services.product_service.SupabaseClient")
    def test_replaces_fields_and_images(self, mock_client, sample_product_fields, sample_product_row):
        # Arrange
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        stored = {k: v for k, v in sample_product_row.items() if k != "product_images"}
        products.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[stored])
        images.select.return_value.eq.return_value.execute.return_value = MagicMock(
            data=[{"id": "img-1"}, {"id": "img-2"}]
        )
        fields = dict(sample_product_fields, images=["https://cdn.test/new.jpg"])

        # Act
        product = ProductService.update_product(stored["id"], ProductUpdate(**fields))

        # Assert
        update = products.update.call_args.args[0]
        assert "updated_at" in update
        images.select.return_value.eq.assert_called_once_with("product_id", stored["id"])
        images.insert.assert_called_once_with([
            {"product_id": stored["id"], "image_url": "https://cdn.test/new.jpg", "image_order": 0},
        ])
        images.delete.return_value.in_.assert_called_once_with("id", ["img-1", "img-2"])
        names = [c[0] for c in images.mock_calls]
        assert names.index("insert") < names.index("delete")
        assert product.images == ["https://cdn.test/new.jpg"]

    @patch("core.services.product_service.SupabaseClient")
    def test_failed_image_insert_keeps_old_images(self, mock_client, sample_product_fields, sample_product_row):
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        stored = {k: v for k, v in sample_product_row.items() if k != "product_images"}
        products.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[stored])
        images.select.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": "img-1"}])
        images.insert.return_value.execute.side_effect = Exception("insert failed")

        with pytest.raises(ProductStoreError):
            ProductService.update_product(stored["id"], ProductUpdate(**sample_product_fields))

        images.delete.assert_not_called()

    @patch("core.services.product_service.SupabaseClient")
    def test_unknown_product(self, mock_client, sample_product_fields):
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        products.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(ProductNotFoundError):
            ProductService.update_product("missing-id", ProductUpdate(**sample_product_fields))

        images.insert.assert_not_called()


class TestDeleteProduct:

    @patch("core.services.product_service.SupabaseClient")
    def test_deletes_images_and_product(self, mock_client):
        table, products, images = make_tables()
        mock_client.table.side_effect = table
        products.delete.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": "p-1"}])

        ProductService.delete_product("p-1")

        images.delete.return_value.eq.assert_called_once_with("product_id", "p-1")
        products.delete.return_value.eq.assert_called_once_with("id", "p-1")

    @patch("core.services.product_service.SupabaseClient")
    def test_unknown_product(self, mock_client):
        table, products, _ = make_tables()
        mock_client.table.side_effect = table
        products.delete.return_value.eq.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(ProductNotFoundError):
            ProductService.delete_product("missing-id")
