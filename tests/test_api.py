# =============================================================================
# tests/test_api.py - API Endpoint Tests
# =============================================================================
# Exercises the HTTP layer with FastAPI's TestClient. The product store, the
# upload gateway and the admin check are replaced via dependency_overrides,
# so no Supabase calls are made.
# =============================================================================

import time
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AdminUser, decode_admin_token, get_current_admin
from app.config import settings
from app.dependencies import get_product_service, get_upload_service
from app.exceptions import ProductNotFoundError
from app.main import app
from core.models.product import Product
from core.models.upload import UploadItem, UploadItemStatus, UploadResult

ADMIN = AdminUser(id=uuid4(), email="admin@example.com")


def make_product(product_id: str = "p-1") -> Product:
    return Product(
        id=product_id,
        name="Luna",
        description="Starter Package ($497)",
        price="$497",
        category="Starter Package",
        payment_link="https://buy.stripe.com/test",
        images=["https://cdn.test/luna-1.jpg"],
    )


@pytest.fixture
def product_service():
    return MagicMock()


@pytest.fixture
def upload_service():
    return MagicMock()


@pytest.fixture
def client(product_service, upload_service):
    app.dependency_overrides[get_product_service] = lambda: product_service
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    app.dependency_overrides[get_current_admin] = lambda: ADMIN
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(product_service, upload_service):
    app.dependency_overrides[get_product_service] = lambda: product_service
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Root / Health
# =============================================================================

class TestRoot:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "ModelStore Admin API"

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["storage_configured"] is True

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"


# =============================================================================
# Products
# =============================================================================

class TestProductEndpoints:

    def test_list_is_public(self, anonymous_client, product_service):
        product_service.list_products.return_value = [make_product("p-2"), make_product("p-1")]

        response = anonymous_client.get("/api/v1/products")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [p["id"] for p in body["products"]] == ["p-2", "p-1"]
        assert body["products"][0]["paymentLink"] == "https://buy.stripe.com/test"

    def test_categories(self, anonymous_client):
        response = anonymous_client.get("/api/v1/products/categories")

        assert response.status_code == 200
        prices = {c["category"]: c["price"] for c in response.json()}
        assert prices == {"Starter Package": "$497", "Pro Package": "$997"}

    def test_get_not_found(self, anonymous_client, product_service):
        product_service.get_product.side_effect = ProductNotFoundError("missing")

        response = anonymous_client.get("/api/v1/products/missing")

        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_create(self, client, product_service, sample_product_fields):
        product_service.create_product.return_value = make_product("p-9")

        response = client.post("/api/v1/products", json=sample_product_fields)

        assert response.status_code == 201
        assert response.json()["id"] == "p-9"
        created = product_service.create_product.call_args.args[0]
        assert created.images == sample_product_fields["images"]

    def test_create_rejects_invalid_link(self, client, product_service, sample_product_fields):
        payload = dict(sample_product_fields, paymentLink="not-a-url")

        response = client.post("/api/v1/products", json=payload)

        assert response.status_code == 422
        product_service.create_product.assert_not_called()

    def test_create_requires_admin(self, anonymous_client, product_service, sample_product_fields):
        response = anonymous_client.post("/api/v1/products", json=sample_product_fields)

        assert response.status_code in (401, 403)
        product_service.create_product.assert_not_called()

    def test_update(self, client, product_service, sample_product_fields):
        product_service.update_product.return_value = make_product("p-1")

        response = client.put("/api/v1/products/p-1", json=sample_product_fields)

        assert response.status_code == 200
        assert product_service.update_product.call_args.args[0] == "p-1"

    def test_delete(self, client, product_service):
        response = client.delete("/api/v1/products/p-1")

        assert response.status_code == 204
        product_service.delete_product.assert_called_once_with("p-1")


# =============================================================================
# Uploads
# =============================================================================

class TestUploadEndpoint:

    def test_success(self, client, upload_service):
        upload_service.upload_images.return_value = UploadResult.success(
            ["https://cdn.test/a.jpg"],
            [UploadItem(index=0, status=UploadItemStatus.UPLOADED, url="https://cdn.test/a.jpg", path="a.jpg")],
        )

        response = client.post("/api/v1/uploads/images", json={"images": ["data:image/png;base64,aGk="]})

        assert response.status_code == 200
        assert response.json()["urls"] == ["https://cdn.test/a.jpg"]
        upload_service.upload_images.assert_called_once_with(["data:image/png;base64,aGk="])

    @pytest.mark.parametrize("code,status_code", [
        ("STORAGE_NOT_CONFIGURED", 503),
        ("STORAGE_CREDENTIAL_REJECTED", 503),
        ("NO_IMAGES_UPLOADED", 400),
        ("STORAGE_UPLOAD_ERROR", 502),
    ])
    def test_failure_status_codes(self, client, upload_service, code, status_code):
        upload_service.upload_images.return_value = UploadResult.failure("failed", code)

        response = client.post("/api/v1/uploads/images", json={"images": ["x"]})

        assert response.status_code == status_code
        assert response.json()["error"] == "failed"
        assert response.json()["code"] == code

    def test_requires_admin(self, anonymous_client, upload_service):
        response = anonymous_client.post("/api/v1/uploads/images", json={"images": []})

        assert response.status_code in (401, 403)
        upload_service.upload_images.assert_not_called()


# =============================================================================
# Auth
# =============================================================================

def make_token(email: str | None = "admin@example.com", expires_in: int = 3600) -> str:
    claims = {
        "sub": str(uuid4()),
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


class TestAdminAuth:

    def test_decodes_valid_token(self):
        user = decode_admin_token(make_token())

        assert user.email == "admin@example.com"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_admin_token(make_token(expires_in=-60))

        assert exc_info.value.status_code == 401

    def test_wrong_signature(self):
        token = jwt.encode({"sub": str(uuid4()), "aud": "authenticated"}, "other-secret", algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_admin_token(token)

        assert exc_info.value.status_code == 401

    def test_allowlist_rejects_other_users(self):
        client = TestClient(app)
        headers = {"Authorization": f"Bearer {make_token('someone@example.com')}"}

        with patch.object(settings, "ADMIN_EMAILS", "admin@example.com"):
            response = client.delete("/api/v1/products/p-1", headers=headers)

        assert response.status_code == 403

    def test_allowlist_is_case_insensitive(self, product_service):
        app.dependency_overrides[get_product_service] = lambda: product_service
        client = TestClient(app)
        headers = {"Authorization": f"Bearer {make_token('Admin@Example.com')}"}

        try:
            with patch.object(settings, "ADMIN_EMAILS", "admin@example.com, boss@example.com"):
                response = client.delete("/api/v1/products/p-1", headers=headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 204
