# =============================================================================
# core/models/detail.py - Detail Page Schemas
# =============================================================================
# Composite read models returned by the detail endpoints:
# - ProjectDetail: a project with its assets
# - AssetDetail: an asset with its project and a resolved file URL
# =============================================================================

from pydantic import BaseModel, Field

from .asset import AssetResponse
from .project import ProjectResponse


class ProjectDetail(ProjectResponse):
    """A project with its assets (newest first)."""

    assets: list[AssetResponse] = Field(default_factory=list)


class AssetDetail(BaseModel):
    """
    An asset with its project and a resolved file URL.

    `project` is null when the project lookup fails; the asset is still shown.
    """

    asset: AssetResponse
    project: ProjectResponse | None = None
    file_url: str | None = Field(
        default=None,
        description="Public URL of the stored object (bucket must be public)"
    )
    is_image: bool = Field(
        default=False,
        description="Guessed from storage path or file name extension"
    )
