# =============================================================================
# app/routers/projects.py - Project Endpoints
# =============================================================================
# List, create and view projects; attach a cover image.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status

from app.auth import AuthUser, get_current_user
from app.dependencies import SupabaseDep
from core.models import ProjectCreate, ProjectDetail, ProjectList, ProjectResponse
from core.services.project_service import ProjectService
from core.services.upload_workflow import LocalFile

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=ProjectList)
def list_projects(
    client: SupabaseDep,
    q: Annotated[str | None, Query(description="Search title and description")] = None,
):
    """List projects, newest first."""
    projects = ProjectService.list_projects(client, query=q)
    return ProjectList(projects=projects, total=len(projects))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(data: ProjectCreate, client: SupabaseDep):
    """
    Create a project.

    Title is required; blank description/location are stored as null.
    """
    return ProjectService.create_project(client, data)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project(
    project_id: Annotated[str, Path(description="Project ID")],
    client: SupabaseDep,
    q: Annotated[str | None, Query(description="Search asset file names and notes")] = None,
):
    """Get a project with its assets, newest first."""
    return ProjectService.get_project_detail(client, project_id, query=q)


@router.post("/{project_id}/cover", response_model=ProjectResponse)
async def upload_cover(
    project_id: Annotated[str, Path(description="Project ID")],
    file: Annotated[UploadFile, File(description="Cover image")],
    client: SupabaseDep,
):
    """
    Upload a cover image and attach its public URL to the project.

    The object is stored at projects/{project_id}/cover/{safe_name} and is
    never overwritten.
    """
    content = await file.read()
    cover = LocalFile(
        name=file.filename or "cover",
        data=content,
        content_type=file.content_type,
    )
    logger.info(f"Uploading cover for project {project_id}: {cover.name} ({cover.size} bytes)")
    return ProjectService.set_cover_image(client, project_id, cover)
