# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - project.py: Project create/response schemas
# - asset.py: Asset row schema
# - detail.py: Project and asset detail schemas
# - upload.py: Upload workflow state and result schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Project Models
# -----------------------------------------------------------------------------
from .project import (
    ProjectCreate,
    ProjectList,
    ProjectResponse,
    matches_query,
)

# -----------------------------------------------------------------------------
# Asset Models
# -----------------------------------------------------------------------------
from .asset import AssetResponse

# -----------------------------------------------------------------------------
# Detail Models
# -----------------------------------------------------------------------------
from .detail import AssetDetail, ProjectDetail

# -----------------------------------------------------------------------------
# Upload Models
# -----------------------------------------------------------------------------
from .upload import (
    PendingFileResponse,
    SubmitOutcome,
    SubmitRequest,
    SubmitResult,
    UploadSessionResponse,
    UploadState,
)

__all__ = [
    # Project
    "ProjectCreate",
    "ProjectList",
    "ProjectResponse",
    "matches_query",
    # Asset
    "AssetResponse",
    # Detail
    "AssetDetail",
    "ProjectDetail",
    # Upload
    "PendingFileResponse",
    "SubmitOutcome",
    "SubmitRequest",
    "SubmitResult",
    "UploadSessionResponse",
    "UploadState",
]
