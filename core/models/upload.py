# =============================================================================
# core/models/upload.py - Upload Workflow Schemas
# =============================================================================
# These models describe a batch upload session to clients:
# - UploadState: where the workflow instance is in its lifecycle
# - SubmitOutcome / SubmitResult: what one submit call did
# - UploadSessionResponse: snapshot of an open session
#
# Pending files live only in memory for the lifetime of one session.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UploadState(str, Enum):
    """
    Lifecycle of one upload workflow instance.

    - empty: open, no pending files
    - staged: open, one or more pending files
    - submitting: batch upload in progress
    - done: every file uploaded and recorded; the instance has closed
    - closed: closed without a completed batch

    Flow: empty <-> staged -> submitting -> done
                              submitting -> staged (failure or cancel)
    """
    EMPTY = "empty"
    STAGED = "staged"
    SUBMITTING = "submitting"
    DONE = "done"
    CLOSED = "closed"


class SubmitOutcome(str, Enum):
    """Result of one submit call."""
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"  # nothing to upload, no I/O performed


class SubmitRequest(BaseModel):
    """Optional batch notes, written into every asset row of the batch."""

    notes: str | None = Field(
        default=None,
        description="Free-text notes applied to every file in the batch"
    )


class SubmitResult(BaseModel):
    """
    What one submit call did.

    Files are processed in order and the batch halts at the first failure,
    so `recorded_file_ids` lists exactly the pending files that reached the
    table store before the halt.

    Example (failure while inserting the second of three files):
        {
            "outcome": "failed",
            "assets": [{"id": "...", "file_name": "a.png", ...}],
            "recorded_file_ids": ["f1"],
            "failed_file_id": "f2",
            "error": "duplicate key value violates unique constraint",
            "orphaned_key": "p1/2024-01-15_..._b.pdf"
        }
    """

    outcome: SubmitOutcome
    assets: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Asset rows inserted by this call, in processing order"
    )
    recorded_file_ids: list[str] = Field(
        default_factory=list,
        description="Pending file ids whose asset rows were inserted"
    )
    failed_file_id: str | None = Field(
        default=None,
        description="Pending file id the batch halted on"
    )
    error: str | None = Field(
        default=None,
        description="Error text shown to the user"
    )
    orphaned_key: str | None = Field(
        default=None,
        description="Storage key uploaded without a matching asset row"
    )


class PendingFileResponse(BaseModel):
    """One staged file as shown in the upload list."""

    id: str
    file_name: str
    size: int = Field(ge=0)
    content_type: str | None = None
    selected: bool = False


class UploadSessionResponse(BaseModel):
    """Snapshot of an upload session."""

    upload_id: str
    project_id: str
    state: UploadState
    is_open: bool
    pending: list[PendingFileResponse] = Field(default_factory=list)
    progress: str | None = None
    error: str | None = None
    last_result: SubmitResult | None = None
