# =============================================================================
# core/models/asset.py - Asset Schemas
# =============================================================================
# An asset is one uploaded file: a row in the `assets` table pointing at an
# object in the storage bucket. Rows are written once by the upload workflow
# and never updated or deleted here.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssetResponse(BaseModel):
    """
    One row of the `assets` table.

    Example:
        {
            "id": "5f0e...",
            "project_id": "b3c1...",
            "file_name": "site_plan.png",
            "storage_path": "b3c1.../2024-01-15_9a7c..._site_plan.png",
            "file_size": 48213,
            "notes": null,
            "thumb_url": "https://xxx.supabase.co/storage/v1/object/public/...",
            "uploaded_at": "2024-01-15T10:30:00Z",
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., description="Asset identifier assigned by the store")
    project_id: str | None = Field(
        default=None,
        description="Owning project (weak reference, lookup only)"
    )
    file_name: str | None = None
    storage_path: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    notes: str | None = None
    thumb_url: str | None = None
    uploaded_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def uuid_as_str(cls, value):
        return None if value is None else str(value)

