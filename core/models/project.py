# =============================================================================
# core/models/project.py - Project Schemas
# =============================================================================
# These models define the API contract for project operations:
# - ProjectCreate: Input for the project creation form
# - ProjectResponse: One row of the `projects` table
# - ProjectList: Projects listing
#
# A project groups uploaded assets. Its id is assigned by the table store
# and never changes; this system never deletes projects.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectCreate(BaseModel):
    """
    Schema for creating a new project.

    Title is required after trimming; description, location and status
    are optional and stored as null when blank.

    Example:
        {
            "title": "Harbour Pavilion",
            "description": "Competition entry, phase 2",
            "status": "Concept"
        }
    """

    title: str = Field(
        ...,
        max_length=255,
        description="Project title (required)"
    )

    description: str | None = Field(
        default=None,
        description="Optional free-text description"
    )

    location: str | None = Field(
        default=None,
        max_length=255,
        description="Optional site location"
    )

    status: str | None = Field(
        default=None,
        max_length=50,
        description="Optional project stage, e.g. Concept, Schematic, Development, Construction"
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required.")
        return value

    @field_validator("description", "location", "status")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def to_row(self) -> dict:
        """Row payload for the `projects` table (unset optionals omitted)."""
        row = {"title": self.title, "description": self.description}
        if self.location is not None:
            row["location"] = self.location
        if self.status is not None:
            row["status"] = self.status
        return row


class ProjectResponse(BaseModel):
    """
    Schema for returning project data to clients.

    Example:
        {
            "id": "b3c1...",
            "title": "Harbour Pavilion",
            "description": null,
            "cover_image_url": "https://xxx.supabase.co/storage/v1/object/public/...",
            "location": "Sydney",
            "status": "Schematic",
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., description="Project identifier assigned by the store")
    title: str | None = None
    description: str | None = None
    cover_image_url: str | None = None
    location: str | None = None
    status: str | None = None
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, value):
        return str(value)


class ProjectList(BaseModel):
    """Schema for listing projects (newest first)."""

    projects: list[ProjectResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


def matches_query(query: str | None, *fields: str | None) -> bool:
    """Case-insensitive substring search over the given fields; blank query matches all."""
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(q in (field or "").lower() for field in fields)
