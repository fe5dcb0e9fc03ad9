# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ModelStore Admin API:
# - test_models.py: Product schemas and the ordered image list
# - test_image_processing.py: Resizing and JPEG data URL encoding
# - test_upload_service.py: Upload gateway (storage mocked)
# - test_product_service.py: Product store client (Supabase mocked)
# - test_product_form.py: Product form controller
# - test_admin_panel.py: Admin listing state
# - test_api.py: HTTP endpoints via TestClient
#
# Run tests with: pytest
# =============================================================================
