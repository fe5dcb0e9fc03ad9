# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the single Supabase client used by the whole application.
# The same client serves both halves of the product pipeline:
# - Postgres tables (products, product_images) via `table()`
# - Storage buckets (product images) via `bucket()`
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.table("products").select("*").execute().data
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a short code and a suggestion so the message tells the admin
    how to fix the problem, not just what failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Singleton wrapper around the Supabase client.

    All methods are class methods for easy access without instantiation.

    Example:
        products = (
            SupabaseClient.table("products")
            .select("*, product_images(image_url, image_order)")
            .order("created_at", desc=True)
            .execute()
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key, which bypasses Row Level Security (RLS).
        This is appropriate for server-side admin operations.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def table(cls, name: str):
        """Return a query builder for a Postgres table."""
        return cls.get_client().table(name)

    @classmethod
    def bucket(cls, name: str):
        """Return the storage file API for a bucket."""
        return cls.get_client().storage.from_(name)

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client so the next call builds a fresh one."""
        cls._instance = None
