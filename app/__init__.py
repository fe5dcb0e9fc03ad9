# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the ModelStore web API:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - auth/: Supabase JWT verification and the admin guard
# - routers/: Products, image upload and health endpoints
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
