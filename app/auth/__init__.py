# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based admin authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_admin, AdminUser
# =============================================================================

from app.auth.dependencies import decode_admin_token, get_current_admin
from app.auth.models import AdminUser

__all__ = [
    "decode_admin_token",
    "get_current_admin",
    "AdminUser",
]
