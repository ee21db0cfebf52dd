# =============================================================================
# core/services/asset_service.py - Asset Lookups
# =============================================================================
# Read-side operations for the `assets` table. Assets are only ever created
# by the upload workflow.
# =============================================================================

import logging
from typing import Any

from app.exceptions import AssetNotFoundError
from core.models.detail import AssetDetail
from core.services.storage_service import StorageService
from core.services.upload_workflow import ASSETS_TABLE
from lib.storage_path import is_image_file
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class AssetService:
    """Service for asset lookups."""

    @staticmethod
    def get_asset(client: SupabaseClient, asset_id: str) -> dict[str, Any]:
        """
        Get an asset by ID.

        Raises:
            AssetNotFoundError: If the asset doesn't exist
        """
        asset = client.fetch_row(ASSETS_TABLE, str(asset_id))
        if not asset:
            raise AssetNotFoundError(str(asset_id))
        return asset

    @staticmethod
    def get_asset_detail(client: SupabaseClient, asset_id: str) -> AssetDetail:
        """
        Get an asset with its project and public file URL.

        The project reference is weak: if it can't be loaded the detail is
        still returned with `project=None`.

        Raises:
            AssetNotFoundError: If the asset doesn't exist
        """
        asset = AssetService.get_asset(client, asset_id)

        project = None
        if asset.get("project_id"):
            try:
                project = client.fetch_row("projects", str(asset["project_id"]))
            except SupabaseClientError as e:
                logger.warning(f"Could not load project for asset {asset_id}: {e.message}")

        storage_path = asset.get("storage_path")
        return AssetDetail(
            asset=asset,
            project=project,
            file_url=StorageService.get_public_url(client, storage_path),
            is_image=is_image_file(storage_path) or is_image_file(asset.get("file_name")),
        )
