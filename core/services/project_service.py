# =============================================================================
# core/services/project_service.py - Project Business Logic
# =============================================================================
# Handles project listing, creation, detail lookup and cover attachment.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from app.exceptions import ProjectNotFoundError
from core.models.project import ProjectCreate, matches_query
from core.services.storage_service import StorageService
from core.services.upload_workflow import ASSETS_TABLE, LocalFile
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"


class ProjectService:
    """
    Service for project operations.

    Every method takes the backend client explicitly.
    """

    @staticmethod
    def list_projects(
        client: SupabaseClient,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List all projects, newest first.

        Args:
            client: Backend client
            query: Optional case-insensitive search over title and description

        Returns:
            List of project dicts
        """
        projects = client.select_rows(PROJECTS_TABLE, order_by="created_at", desc=True)
        return [
            p for p in projects
            if matches_query(query, p.get("title"), p.get("description"))
        ]

    @staticmethod
    def create_project(client: SupabaseClient, data: ProjectCreate) -> dict[str, Any]:
        """
        Create a new project (one row insert).

        Returns:
            Created project dict with id and created_at
        """
        project = client.insert_row(PROJECTS_TABLE, data.to_row())
        logger.info(f"Created project: {project.get('id')}")
        return project

    @staticmethod
    def get_project(client: SupabaseClient, project_id: str) -> dict[str, Any]:
        """
        Get a project by ID.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        project = client.fetch_row(PROJECTS_TABLE, str(project_id))
        if not project:
            raise ProjectNotFoundError(str(project_id))
        return project

    @staticmethod
    def get_project_detail(
        client: SupabaseClient,
        project_id: str,
        query: str | None = None,
    ) -> dict[str, Any]:
        """
        Get a project with its assets (newest first).

        Args:
            client: Backend client
            project_id: The project ID
            query: Optional case-insensitive search over asset file name and notes

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        project = ProjectService.get_project(client, project_id)

        assets = client.select_rows(
            ASSETS_TABLE,
            filters={"project_id": str(project_id)},
            order_by="created_at",
            desc=True,
        )
        project["assets"] = [
            a for a in assets
            if matches_query(query, a.get("file_name"), a.get("notes"))
        ]
        return project

    @staticmethod
    def set_cover_image(
        client: SupabaseClient,
        project_id: str,
        file: LocalFile,
    ) -> dict[str, Any]:
        """
        Upload a cover image and attach its public URL to the project.

        Steps: verify the project, upload to the cover path, resolve the
        public URL, update projects.cover_image_url.

        Returns:
            Updated project dict

        Raises:
            ProjectNotFoundError: If the project doesn't exist
            StorageUploadError: If the upload fails
        """
        project = ProjectService.get_project(client, project_id)

        path = StorageService.upload_project_cover(client, str(project_id), file)
        cover_url = StorageService.get_public_url(client, path)

        updated = client.update_rows(
            PROJECTS_TABLE,
            {"cover_image_url": cover_url},
            {"id": str(project_id)},
        )
        logger.info(f"Attached cover image to project {project_id}")

        if updated:
            return updated[0]
        project["cover_image_url"] = cover_url
        return project
