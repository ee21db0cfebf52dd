# =============================================================================
# core/services/upload_service.py - Upload Session Registry
# =============================================================================
# Keeps the open upload workflows of this process, keyed by upload_id.
# A session leaves the registry when its workflow closes, either explicitly,
# after a fully successful batch, or after sitting idle longer than
# UPLOAD_SESSION_IDLE_SECONDS. Nothing here is persisted.
# =============================================================================

import logging
import threading
import time
from functools import partial
from typing import Callable
from uuid import uuid4

from app.config import settings
from app.exceptions import UploadInProgressError, UploadSessionNotFoundError
from core.models.upload import UploadSessionResponse
from core.services.project_service import ProjectService
from core.services.upload_workflow import AssetUploadWorkflow
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class UploadService:
    """
    Registry of open upload sessions.

    One instance is shared by the API (see app/dependencies.py); tests
    create their own.

    Args:
        idle_seconds: Close sessions untouched for this long (defaults to
            settings.UPLOAD_SESSION_IDLE_SECONDS)
        clock: Monotonic seconds, injectable for tests
    """

    def __init__(
        self,
        idle_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: dict[str, AssetUploadWorkflow] = {}
        self._touched: dict[str, float] = {}
        self._idle_seconds = idle_seconds or settings.UPLOAD_SESSION_IDLE_SECONDS
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def open_session(
        self,
        client: SupabaseClient,
        project_id: str,
    ) -> tuple[str, AssetUploadWorkflow]:
        """
        Open an upload session for an existing project.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        self.expire_idle()
        ProjectService.get_project(client, project_id)

        upload_id = str(uuid4())
        workflow = AssetUploadWorkflow(
            backend=client,
            project_id=str(project_id),
            on_close=partial(self._forget, upload_id),
            on_complete=partial(self._log_completed, upload_id),
            cache_control_seconds=settings.UPLOAD_CACHE_CONTROL_SECONDS,
        )
        with self._lock:
            self._sessions[upload_id] = workflow
            self._touched[upload_id] = self._clock()
        logger.info(f"Opened upload session {upload_id} for project {project_id}")
        return upload_id, workflow

    def get_session(self, upload_id: str) -> AssetUploadWorkflow:
        """
        Look up an open session and mark it as used.

        Raises:
            UploadSessionNotFoundError: If no open session has this id
        """
        self.expire_idle()
        with self._lock:
            workflow = self._sessions.get(upload_id)
            if workflow is None:
                raise UploadSessionNotFoundError(upload_id)
            self._touched[upload_id] = self._clock()
        return workflow

    def close_session(self, upload_id: str) -> AssetUploadWorkflow:
        """Close a session and drop it from the registry."""
        workflow = self.get_session(upload_id)
        workflow.close()
        return workflow

    def expire_idle(self) -> list[str]:
        """
        Close every session idle for longer than the timeout.

        Sessions with a batch in flight are skipped.

        Returns:
            The upload ids that were closed
        """
        cutoff = self._clock() - self._idle_seconds
        with self._lock:
            stale = [
                (upload_id, workflow)
                for upload_id, workflow in self._sessions.items()
                if self._touched.get(upload_id, 0) < cutoff and not workflow.is_submitting
            ]

        expired = []
        for upload_id, workflow in stale:
            try:
                workflow.close()
            except UploadInProgressError:
                continue
            expired.append(upload_id)
            logger.info(f"Closed idle upload session {upload_id}")
        return expired

    @staticmethod
    def to_response(upload_id: str, workflow: AssetUploadWorkflow) -> UploadSessionResponse:
        return UploadSessionResponse(
            upload_id=upload_id,
            project_id=workflow.project_id,
            state=workflow.state,
            is_open=workflow.is_open,
            pending=workflow.pending_view(),
            progress=workflow.progress,
            error=workflow.error,
            last_result=workflow.last_result,
        )

    def _forget(self, upload_id: str) -> None:
        with self._lock:
            self._sessions.pop(upload_id, None)
            self._touched.pop(upload_id, None)
        logger.debug(f"Closed upload session {upload_id}")

    def _log_completed(self, upload_id: str) -> None:
        logger.info(f"Upload session {upload_id} completed its batch")
