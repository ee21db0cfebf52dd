# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API. Every error carries a
# machine-readable code and, where possible, a suggestion for the caller.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError


class DesignbaseException(Exception):
    """
    Base exception for the designbase API.

    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "DESIGNBASE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Project / Asset Exceptions
# =============================================================================

class ProjectNotFoundError(DesignbaseException):
    """Raised when a project ID doesn't exist."""

    def __init__(self, project_id: str):
        super().__init__(
            message=f"Project not found: {project_id}",
            code="PROJECT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the project_id is correct",
            details={"project_id": project_id}
        )


class AssetNotFoundError(DesignbaseException):
    """Raised when an asset ID doesn't exist."""

    def __init__(self, asset_id: str):
        super().__init__(
            message=f"Asset not found: {asset_id}",
            code="ASSET_NOT_FOUND",
            status_code=404,
            suggestion="Check that the asset_id is correct",
            details={"asset_id": asset_id}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class UploadSessionNotFoundError(DesignbaseException):
    """Raised when an upload session ID is unknown (never opened or already closed)."""

    def __init__(self, upload_id: str):
        super().__init__(
            message=f"Upload session not found: {upload_id}",
            code="UPLOAD_SESSION_NOT_FOUND",
            status_code=404,
            suggestion="Open a new upload session with POST /projects/{id}/uploads",
            details={"upload_id": upload_id}
        )


class UploadSessionClosedError(DesignbaseException):
    """Raised when an operation targets a workflow that is not open."""

    def __init__(self, project_id: str):
        super().__init__(
            message="Upload session is closed",
            code="UPLOAD_SESSION_CLOSED",
            status_code=409,
            suggestion="Open a new upload session to stage more files",
            details={"project_id": project_id}
        )


class UploadInProgressError(DesignbaseException):
    """Raised when the pending list is changed (or the session closed) mid-submit."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Cannot {operation} while an upload batch is in progress",
            code="UPLOAD_IN_PROGRESS",
            status_code=409,
            suggestion="Wait for the batch to finish, or cancel it first",
            details={"operation": operation}
        )


class StorageUploadError(DesignbaseException):
    """Raised when file upload to storage fails outside the batch workflow."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def designbase_exception_handler(
    request: Request,
    exc: DesignbaseException
) -> JSONResponse:
    """Convert DesignbaseException to a JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Convert backend failures to a 502 response.

    The backend's own message is passed through as the detail.
    """
    content = {
        "detail": exc.message,
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=502, content=content)
