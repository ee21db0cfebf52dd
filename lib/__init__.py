# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for table and storage operations
# - storage_path.py: Storage key construction and file name sanitizing
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, backend_message
from lib.storage_path import (
    IMAGE_EXTENSIONS,
    build_asset_key,
    build_project_cover_path,
    file_extension,
    is_image_file,
    sanitize_file_name,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "backend_message",
    # Storage paths
    "IMAGE_EXTENSIONS",
    "build_asset_key",
    "build_project_cover_path",
    "file_extension",
    "is_image_file",
    "sanitize_file_name",
]
