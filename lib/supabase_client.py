# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# Typed wrapper around one configured Supabase client. Covers the two backend
# services this project talks to:
# - Table store (PostgREST): insert / select / update rows
# - Object storage: upload objects, resolve public URLs
#
# The underlying `supabase.Client` is created once per process and reused.
# Callers receive a `SupabaseClient` instance by injection (see
# app/dependencies.py) so tests can swap in a fake.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   backend = SupabaseClient()
#   rows = backend.select_rows("projects", order_by="created_at", desc=True)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching no rows
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    `message` is the backend's own error text, so it can be shown to a user
    verbatim. `code` tells which operation failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def backend_message(exc: Exception) -> str:
    """Extract the human-readable message from a postgrest/storage3 error."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


class SupabaseClient:
    """
    Typed wrapper for Supabase table and storage operations.

    Example:
        backend = SupabaseClient()
        key = backend.upload_object("p1/2024-01-15_x_plan.pdf", data)
        row = backend.insert_row("assets", {"project_id": "p1", "storage_path": key})
    """

    _instance: Client | None = None

    def __init__(self, client: Client | None = None, bucket: str | None = None):
        self._client = client
        self.bucket = bucket or settings.ASSETS_BUCKET

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the shared Supabase client.

        Uses the service_role key, which bypasses Row Level Security.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = self.get_client()
        return self._client

    # -------------------------------------------------------------------------
    # Table Store
    # -------------------------------------------------------------------------

    def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it as stored (with generated id/created_at).

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        try:
            response = self.client.table(table).insert(row).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=backend_message(e),
                code="INSERT_FAILED",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        logger.debug(f"Inserted row into {table}: {response.data[0].get('id')}")
        return response.data[0]

    def select_rows(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Select rows matching equality filters, optionally ordered.

        Args:
            table: Table name
            columns: PostgREST column list (e.g. "id,title")
            filters: Column -> value equality filters
            order_by: Column to order by
            desc: Descending order when True

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            query = self.client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=desc)
            response = query.execute()
        except Exception as e:
            raise SupabaseClientError(
                message=backend_message(e),
                code="SELECT_FAILED",
                details={"table": table, "filters": filters or {}}
            )

        return response.data or []

    def fetch_row(
        self,
        table: str,
        row_id: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if no row has that id

        Raises:
            SupabaseClientError: If the query fails for any other reason
        """
        try:
            response = (
                self.client.table(table)
                .select(columns)
                .eq("id", row_id)
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            if NO_ROWS_CODE in str(e) or getattr(e, "code", None) == NO_ROWS_CODE:
                return None
            raise SupabaseClientError(
                message=backend_message(e),
                code="FETCH_FAILED",
                details={"table": table, "id": row_id}
            )

    def update_rows(
        self,
        table: str,
        values: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Update rows matching equality filters.

        Raises:
            SupabaseClientError: If the update fails
        """
        try:
            query = self.client.table(table).update(values)
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.execute()
        except Exception as e:
            raise SupabaseClientError(
                message=backend_message(e),
                code="UPDATE_FAILED",
                details={"table": table, "filters": filters}
            )

        return response.data or []

    # -------------------------------------------------------------------------
    # Object Storage
    # -------------------------------------------------------------------------

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        overwrite: bool = False,
        cache_control_seconds: int | None = None,
    ) -> str:
        """
        Upload bytes to the bucket under `key`.

        With overwrite disabled the upload fails if the key already exists.

        Returns:
            The storage key

        Raises:
            SupabaseClientError: If the upload fails
        """
        if cache_control_seconds is None:
            cache_control_seconds = settings.UPLOAD_CACHE_CONTROL_SECONDS

        file_options = {
            "cache-control": str(cache_control_seconds),
            "upsert": "true" if overwrite else "false",
        }
        if content_type:
            file_options["content-type"] = content_type

        try:
            self.client.storage.from_(self.bucket).upload(
                path=key,
                file=data,
                file_options=file_options,
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {key}: {e}")
            raise SupabaseClientError(
                message=backend_message(e),
                code="UPLOAD_FAILED",
                details={"bucket": self.bucket, "key": key}
            )

        logger.info(f"Uploaded object to storage: {self.bucket}/{key}")
        return key

    def get_public_url(self, key: str) -> str:
        """
        Resolve the public URL of an object.

        Assumes the bucket is publicly readable; nothing is signed.
        """
        try:
            return self.client.storage.from_(self.bucket).get_public_url(key)
        except Exception as e:
            raise SupabaseClientError(
                message=backend_message(e),
                code="PUBLIC_URL_FAILED",
                details={"bucket": self.bucket, "key": key}
            )

    # -------------------------------------------------------------------------
    # Readiness Probes
    # -------------------------------------------------------------------------

    def check_database(self, table: str = "projects") -> None:
        """Run a one-row select; raises SupabaseClientError when unreachable."""
        try:
            self.client.table(table).select("id").limit(1).execute()
        except Exception as e:
            raise SupabaseClientError(message=backend_message(e), code="DATABASE_UNAVAILABLE")

    def check_storage(self) -> None:
        """List buckets; raises SupabaseClientError when unreachable."""
        try:
            self.client.storage.list_buckets()
        except Exception as e:
            raise SupabaseClientError(message=backend_message(e), code="STORAGE_UNAVAILABLE")
