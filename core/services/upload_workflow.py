# =============================================================================
# core/services/upload_workflow.py - Multi-file Asset Upload Workflow
# =============================================================================
# One workflow instance backs one open upload dialog for one project.
#
# The user stages local files, may flag some as selected and remove them,
# then submits the batch. Submission is strictly sequential: for each file
# in list order the bytes go to object storage under a fresh randomized key,
# image files get a public thumbnail URL, and one row is inserted into the
# `assets` table. The first failure halts the batch; nothing is retried and
# nothing already uploaded is rolled back.
#
# Usage:
#   workflow = AssetUploadWorkflow(backend, project_id, on_close=dialog.hide)
#   workflow.add_files([LocalFile("plan.png", data, "image/png")])
#   result = workflow.submit(notes="Site visit")
# =============================================================================

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Protocol
from uuid import uuid4

from app.exceptions import UploadInProgressError, UploadSessionClosedError
from core.models.upload import (
    PendingFileResponse,
    SubmitOutcome,
    SubmitResult,
    UploadState,
)
from lib.storage_path import build_asset_key, is_image_file, sanitize_file_name
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

ASSETS_TABLE = "assets"

NO_FILES_MESSAGE = "No files to upload."
CANCELLED_MESSAGE = "Upload cancelled."


class AssetBackend(Protocol):
    """The subset of SupabaseClient the workflow needs."""

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        overwrite: bool = False,
        cache_control_seconds: int | None = None,
    ) -> str: ...

    def get_public_url(self, key: str) -> str: ...

    def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]: ...


@dataclass
class LocalFile:
    """A file chosen by the user, held in memory until upload."""

    name: str
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PendingFile:
    """A staged file plus its selection flag. Never persisted."""

    id: str
    file: LocalFile
    selected: bool = False

    def to_response(self) -> PendingFileResponse:
        return PendingFileResponse(
            id=self.id,
            file_name=self.file.name,
            size=self.file.size,
            content_type=self.file.content_type,
            selected=self.selected,
        )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_token() -> str:
    return str(uuid4())


class AssetUploadWorkflow:
    """
    State machine for one batch upload session.

    States (see UploadState): empty -> staged -> submitting -> done, with a
    failed or cancelled submit returning to staged. Pending-list changes,
    close and a second submit are refused while submitting, including from
    other threads (FastAPI runs sync routes in a threadpool).

    Args:
        backend: Storage + table client (normally a SupabaseClient)
        project_id: Project every uploaded asset is attached to
        on_close: Called once when the instance closes
        on_complete: Called once after a fully successful batch, before close
        is_open: An instance constructed closed rejects every operation
        cache_control_seconds: Cache-Control hint sent with each object
        clock: Returns the upload instant (UTC by default)
        token_factory: Returns the random token used in keys and pending ids
    """

    def __init__(
        self,
        backend: AssetBackend,
        project_id: str,
        on_close: Callable[[], None],
        on_complete: Callable[[], None] | None = None,
        is_open: bool = True,
        cache_control_seconds: int = 3600,
        clock: Callable[[], datetime] = _utc_now,
        token_factory: Callable[[], str] = _random_token,
    ):
        self.project_id = str(project_id)
        self.is_open = is_open
        self.progress: str | None = None
        self.error: str | None = None
        self.last_result: SubmitResult | None = None

        self._backend = backend
        self._on_close = on_close
        self._on_complete = on_complete
        self._cache_control_seconds = cache_control_seconds
        self._clock = clock
        self._token_factory = token_factory

        self._lock = threading.Lock()
        self._pending: list[PendingFile] = []
        self._submitting = False
        self._completed = False
        self._cancel_requested = False

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    @property
    def state(self) -> UploadState:
        if self._submitting:
            return UploadState.SUBMITTING
        if not self.is_open:
            return UploadState.DONE if self._completed else UploadState.CLOSED
        return UploadState.STAGED if self._pending else UploadState.EMPTY

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def pending(self) -> list[PendingFile]:
        """Copy of the pending list, in order."""
        return list(self._pending)

    def pending_view(self) -> list[PendingFileResponse]:
        return [item.to_response() for item in self._pending]

    def _require_editable(self, operation: str) -> None:
        # Callers hold self._lock
        if not self.is_open:
            raise UploadSessionClosedError(self.project_id)
        if self._submitting:
            raise UploadInProgressError(operation)

    # -------------------------------------------------------------------------
    # Staging
    # -------------------------------------------------------------------------

    def add_files(self, files: Iterable[LocalFile] | None) -> list[PendingFile]:
        """
        Append files to the pending list, unselected, in the given order.

        Duplicate names are kept. None or an empty selection is a no-op.

        Returns:
            The newly created pending entries
        """
        with self._lock:
            self._require_editable("add files")
            added = [
                PendingFile(id=self._token_factory(), file=f)
                for f in files or ()
            ]
            self._pending.extend(added)
        if added:
            logger.debug(f"Staged {len(added)} file(s) for project {self.project_id}")
        return added

    def toggle_selected(self, file_id: str) -> bool:
        """
        Flip the selected flag of one pending file.

        Returns:
            True if the id was found; an unknown id changes nothing
        """
        with self._lock:
            self._require_editable("change the selection")
            for item in self._pending:
                if item.id == file_id:
                    item.selected = not item.selected
                    return True
            return False

    def remove_selected(self) -> int:
        """Drop every selected pending file. Returns how many were removed."""
        with self._lock:
            self._require_editable("remove files")
            kept = [item for item in self._pending if not item.selected]
            removed = len(self._pending) - len(kept)
            self._pending = kept
            return removed

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self, notes: str | None = None) -> SubmitResult:
        """
        Upload and record every pending file, one at a time, in order.

        Backend failures never escape: they halt the batch, become the
        `error` text, and leave all pending files staged so the whole batch
        can be submitted again. Files recorded before the failure are
        listed in the result's `recorded_file_ids`.

        On success the pending list is cleared, `on_complete` runs, and the
        instance closes.

        Raises:
            UploadInProgressError: If another submit on this instance is running
        """
        with self._lock:
            self._require_editable("submit")

            if not self._pending:
                self.error = NO_FILES_MESSAGE
                self.last_result = SubmitResult(outcome=SubmitOutcome.REJECTED, error=NO_FILES_MESSAGE)
                return self.last_result

            self._submitting = True
            self._cancel_requested = False
            self.error = None
            self.progress = None
            batch = list(self._pending)

        # Runs unlocked; mutators are refused while _submitting is set
        try:
            result = self._upload_batch(batch, (notes or "").strip() or None)
        finally:
            with self._lock:
                self._submitting = False
                self.progress = None

        self.last_result = result
        if result.outcome is not SubmitOutcome.COMPLETED:
            self.error = result.error
            return result

        logger.info(f"Uploaded {len(result.assets)} asset(s) to project {self.project_id}")
        with self._lock:
            self._pending.clear()
            self._completed = True
        if self._on_complete is not None:
            self._on_complete()
        self.close()
        return result

    def _upload_batch(self, batch: list[PendingFile], notes: str | None) -> SubmitResult:
        total = len(batch)
        assets: list[dict[str, Any]] = []
        recorded: list[str] = []

        for index, item in enumerate(batch, start=1):
            if self._cancel_requested:
                logger.info(f"Upload batch cancelled before file {index}/{total}")
                return SubmitResult(
                    outcome=SubmitOutcome.CANCELLED,
                    assets=assets,
                    recorded_file_ids=recorded,
                    failed_file_id=item.id,
                    error=CANCELLED_MESSAGE,
                )

            f = item.file
            self.progress = f"Uploading {index}/{total}: {f.name}"

            now = self._clock()
            key = build_asset_key(self.project_id, f.name, now, self._token_factory())

            try:
                self._backend.upload_object(
                    key,
                    f.data,
                    content_type=f.content_type,
                    overwrite=False,
                    cache_control_seconds=self._cache_control_seconds,
                )
            except SupabaseClientError as e:
                logger.error(f"Upload {index}/{total} failed for {f.name}: {e.message}")
                return SubmitResult(
                    outcome=SubmitOutcome.FAILED,
                    assets=assets,
                    recorded_file_ids=recorded,
                    failed_file_id=item.id,
                    error=e.message,
                )

            try:
                thumb_url = self._backend.get_public_url(key) if is_image_file(f.name) else None
                row = self._backend.insert_row(ASSETS_TABLE, {
                    "project_id": self.project_id,
                    "file_name": sanitize_file_name(f.name),
                    "storage_path": key,
                    "file_size": f.size,
                    "thumb_url": thumb_url,
                    "uploaded_at": now.isoformat(),
                    "notes": notes,
                })
            except SupabaseClientError as e:
                # The object stays in storage without a row
                logger.warning(f"Asset row not recorded, orphaned object left at {key}: {e.message}")
                return SubmitResult(
                    outcome=SubmitOutcome.FAILED,
                    assets=assets,
                    recorded_file_ids=recorded,
                    failed_file_id=item.id,
                    error=e.message,
                    orphaned_key=key,
                )

            assets.append(row)
            recorded.append(item.id)

        return SubmitResult(
            outcome=SubmitOutcome.COMPLETED,
            assets=assets,
            recorded_file_ids=recorded,
        )

    def cancel(self) -> bool:
        """
        Ask an in-flight submit to stop before its next file.

        The file currently being processed still finishes. Returns False
        when no submit is running.
        """
        if not self._submitting:
            return False
        self._cancel_requested = True
        return True

    # -------------------------------------------------------------------------
    # Closing
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Discard pending files and close. Refused while submitting."""
        with self._lock:
            if self._submitting:
                raise UploadInProgressError("close the upload session")
            if not self.is_open:
                return
            self.is_open = False
            self._pending.clear()
            self.progress = None
        self._on_close()
