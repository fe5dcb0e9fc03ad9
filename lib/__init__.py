# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Shared Supabase client (database + storage)
# - image_processing.py: Image preprocessor (resize + JPEG data URLs)
# - utils.py: Shared utilities (error base class, UUID normalization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.image_processing import (
    ImageFile,
    ImagePreprocessError,
    PreprocessOutcome,
    TooManyImagesError,
    check_image_capacity,
    compute_target_size,
    preprocess_images,
    resize_to_data_url,
)
from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Images
    "ImageFile",
    "ImagePreprocessError",
    "PreprocessOutcome",
    "TooManyImagesError",
    "check_image_capacity",
    "compute_target_size",
    "preprocess_images",
    "resize_to_data_url",
    # Utils
    "ApplicationError",
    "normalize_uuid",
]
