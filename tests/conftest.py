# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides image bytes, data URLs and product rows for testing
# =============================================================================

import base64
import io
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from PIL import Image


def make_image_bytes(width: int = 64, height: int = 48, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size."""
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_data_url(content: bytes = b"fake-image-bytes", media_type: str = "image/png") -> str:
    return f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def png_bytes():
    """A small valid PNG."""
    return make_image_bytes()


@pytest.fixture
def sample_product_row():
    """A products row joined with its image rows, as Supabase returns it."""
    return {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "name": "Luna - Fashion Influencer",
        "description": "Starter Package ($497)",
        "price": "$497",
        "category": "Starter Package",
        "payment_link": "https://buy.stripe.com/test_luna",
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-16T08:00:00+00:00",
        "product_images": [
            {"id": "img-2", "image_url": "https://cdn.test/luna-2.jpg", "image_order": 1},
            {"id": "img-1", "image_url": "https://cdn.test/luna-1.jpg", "image_order": 0},
        ],
    }


@pytest.fixture
def sample_product_fields():
    """Valid camelCase payload for creating or updating a product."""
    return {
        "name": "Luna - Fashion Influencer",
        "description": "Starter Package ($497)",
        "price": "$497",
        "category": "Starter Package",
        "paymentLink": "https://buy.stripe.com/test_luna",
        "images": ["https://cdn.test/luna-1.jpg", "https://cdn.test/luna-2.jpg"],
    }
