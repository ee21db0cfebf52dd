# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles single-file storage operations outside the batch upload workflow:
# project cover images and public URL resolution for asset detail pages.
# =============================================================================

import logging

from app.exceptions import StorageUploadError
from core.services.upload_workflow import LocalFile
from lib.storage_path import build_project_cover_path
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading cover images and resolving public URLs.
    """

    @staticmethod
    def upload_project_cover(
        client: SupabaseClient,
        project_id: str,
        file: LocalFile,
    ) -> str:
        """
        Upload a project's cover image to its standard path.

        The path is projects/{project_id}/cover/{safe_name}. Existing
        objects are never overwritten.

        Returns:
            Storage path where the cover was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        path = build_project_cover_path(project_id, file.name)

        try:
            client.upload_object(
                path,
                file.data,
                content_type=file.content_type,
                overwrite=False,
            )
        except SupabaseClientError as e:
            logger.error(f"Cover upload failed for project {project_id}: {e.message}")
            raise StorageUploadError(e.message)

        logger.info(f"Uploaded cover image for project {project_id}: {path}")
        return path

    @staticmethod
    def get_public_url(client: SupabaseClient, storage_path: str | None) -> str | None:
        """
        Get a public URL for a storage object.

        Returns:
            Public URL string, or None when there is no path
        """
        if not storage_path:
            return None
        return client.get_public_url(storage_path)
