# =============================================================================
# app/routers/uploads.py - Batch Upload Sessions
# =============================================================================
# HTTP surface of the asset upload workflow. A client opens a session for a
# project, stages files, optionally selects and removes some, then submits.
# Every endpoint returns the session snapshot.
#
# Flow:
#   POST   /projects/{project_id}/uploads          -> open
#   POST   /uploads/{upload_id}/files              -> add files
#   POST   /uploads/{upload_id}/files/{id}/toggle  -> toggle selection
#   POST   /uploads/{upload_id}/remove-selected    -> remove selected
#   POST   /uploads/{upload_id}/submit             -> upload the batch
#   POST   /uploads/{upload_id}/cancel             -> stop before next file
#   DELETE /uploads/{upload_id}                    -> close
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, File, Path, UploadFile, status

from app.auth import get_current_user
from app.dependencies import SupabaseDep, UploadServiceDep
from core.models import SubmitRequest, UploadSessionResponse
from core.services.upload_workflow import LocalFile

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

UploadId = Annotated[str, Path(description="Upload session ID")]


@router.post(
    "/projects/{project_id}/uploads",
    response_model=UploadSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
def open_upload_session(
    project_id: Annotated[str, Path(description="Project ID")],
    client: SupabaseDep,
    uploads: UploadServiceDep,
):
    """Open an empty upload session for an existing project."""
    upload_id, workflow = uploads.open_session(client, project_id)
    return uploads.to_response(upload_id, workflow)


@router.get("/uploads/{upload_id}", response_model=UploadSessionResponse)
def get_upload_session(upload_id: UploadId, uploads: UploadServiceDep):
    """Current state, pending files, progress and last error."""
    return uploads.to_response(upload_id, uploads.get_session(upload_id))


@router.post("/uploads/{upload_id}/files", response_model=UploadSessionResponse)
async def add_files(
    upload_id: UploadId,
    files: Annotated[list[UploadFile], File(description="Files to stage")],
    uploads: UploadServiceDep,
):
    """Stage files at the end of the pending list. Duplicate names are kept."""
    workflow = uploads.get_session(upload_id)

    local_files = []
    for upload in files:
        local_files.append(LocalFile(
            name=upload.filename or "file",
            data=await upload.read(),
            content_type=upload.content_type,
        ))

    workflow.add_files(local_files)
    return uploads.to_response(upload_id, workflow)


@router.post("/uploads/{upload_id}/files/{file_id}/toggle", response_model=UploadSessionResponse)
def toggle_file(
    upload_id: UploadId,
    file_id: Annotated[str, Path(description="Pending file ID")],
    uploads: UploadServiceDep,
):
    """Flip one pending file's selected flag. Unknown ids are ignored."""
    workflow = uploads.get_session(upload_id)
    workflow.toggle_selected(file_id)
    return uploads.to_response(upload_id, workflow)


@router.post("/uploads/{upload_id}/remove-selected", response_model=UploadSessionResponse)
def remove_selected(upload_id: UploadId, uploads: UploadServiceDep):
    """Drop every selected pending file."""
    workflow = uploads.get_session(upload_id)
    workflow.remove_selected()
    return uploads.to_response(upload_id, workflow)


@router.post("/uploads/{upload_id}/submit", response_model=UploadSessionResponse)
def submit_upload(
    upload_id: UploadId,
    uploads: UploadServiceDep,
    body: Annotated[SubmitRequest | None, Body()] = None,
):
    """
    Upload every pending file in order and record one asset row per file.

    Always 200: a failed or rejected batch is reported through `error` and
    `last_result`, with the files still staged. A completed batch closes
    the session (state "done").
    """
    workflow = uploads.get_session(upload_id)
    workflow.submit(notes=body.notes if body else None)
    return uploads.to_response(upload_id, workflow)


@router.post("/uploads/{upload_id}/cancel", response_model=UploadSessionResponse)
def cancel_upload(upload_id: UploadId, uploads: UploadServiceDep):
    """Ask a running batch to stop before its next file."""
    workflow = uploads.get_session(upload_id)
    if workflow.cancel():
        logger.info(f"Cancellation requested for upload session {upload_id}")
    return uploads.to_response(upload_id, workflow)


@router.delete("/uploads/{upload_id}", response_model=UploadSessionResponse)
def close_upload_session(upload_id: UploadId, uploads: UploadServiceDep):
    """Close the session and discard its pending files."""
    workflow = uploads.close_session(upload_id)
    return uploads.to_response(upload_id, workflow)
