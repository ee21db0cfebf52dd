# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(); tests replace them
# through app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from core.services.upload_service import UploadService
from lib.supabase_client import SupabaseClient


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Get the backend client.

    One wrapper per process, around the shared Supabase client.
    """
    return SupabaseClient()


@lru_cache
def get_upload_service() -> UploadService:
    """Get the process-wide upload session registry."""
    return UploadService()


# Type aliases for dependency injection
SupabaseDep = Annotated[SupabaseClient, Depends(get_supabase_client)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
