# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .upload_workflow import AssetUploadWorkflow, LocalFile, PendingFile
from .storage_service import StorageService
from .project_service import ProjectService
from .asset_service import AssetService
from .upload_service import UploadService

__all__ = [
    "AssetUploadWorkflow",
    "LocalFile",
    "PendingFile",
    "StorageService",
    "ProjectService",
    "AssetService",
    "UploadService",
]
