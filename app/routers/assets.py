# =============================================================================
# app/routers/assets.py - Asset Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user
from app.dependencies import SupabaseDep
from core.models import AssetDetail
from core.services.asset_service import AssetService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/{asset_id}", response_model=AssetDetail)
def get_asset(
    asset_id: Annotated[str, Path(description="Asset ID")],
    client: SupabaseDep,
):
    """
    Get an asset with its project and public file URL.

    `project` is null if the owning project can't be loaded.
    """
    return AssetService.get_asset_detail(client, asset_id)
