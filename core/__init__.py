# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas and the ordered image list
# - services/: product store, storage, upload gateway, form and admin panel
#
# Route handlers live in app/; nothing here knows about HTTP requests.
# =============================================================================
