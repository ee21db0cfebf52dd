# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeBackend: in-memory stand-in for SupabaseClient that records calls
#   and can fail on the Nth upload or insert
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.config loads settings at import time

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone
from itertools import count
from typing import Any

import pytest

from lib.supabase_client import SupabaseClientError

FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


class FakeBackend:
    """
    In-memory table store + object storage with the SupabaseClient interface.

    `calls` records ("upload", key), ("public_url", key) and
    ("insert", table, row) in call order. Set `fail_upload_at` /
    `fail_insert_at` to {n: message} to make the nth call fail, and
    `fail_public_url` to a message to make every public URL lookup fail.
    """

    def __init__(self, bucket: str = "designbase-assets"):
        self.bucket = bucket
        self.objects: dict[str, dict[str, Any]] = {}
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple] = []
        self.fail_upload_at: dict[int, str] = {}
        self.fail_insert_at: dict[int, str] = {}
        self.fail_public_url: str | None = None
        self.upload_count = 0
        self.insert_count = 0
        self.on_upload = None

    # -- helpers ---------------------------------------------------------------

    def seed(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        self.tables.setdefault(table, []).append(dict(row))
        return row

    def calls_of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]

    # -- storage ---------------------------------------------------------------

    def upload_object(self, key, data, content_type=None, overwrite=False, cache_control_seconds=None):
        self.upload_count += 1
        self.calls.append(("upload", key))
        if self.on_upload is not None:
            self.on_upload(key)
        if self.upload_count in self.fail_upload_at:
            raise SupabaseClientError(self.fail_upload_at[self.upload_count], code="UPLOAD_FAILED")
        if key in self.objects and not overwrite:
            raise SupabaseClientError("The resource already exists", code="UPLOAD_FAILED")
        self.objects[key] = {
            "data": data,
            "content_type": content_type,
            "overwrite": overwrite,
            "cache_control_seconds": cache_control_seconds,
        }
        return key

    def get_public_url(self, key):
        self.calls.append(("public_url", key))
        if self.fail_public_url is not None:
            raise SupabaseClientError(self.fail_public_url, code="PUBLIC_URL_FAILED")
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.bucket}/{key}"

    # -- tables ----------------------------------------------------------------

    def insert_row(self, table, row):
        self.insert_count += 1
        self.calls.append(("insert", table, dict(row)))
        if self.insert_count in self.fail_insert_at:
            raise SupabaseClientError(self.fail_insert_at[self.insert_count], code="INSERT_FAILED")
        rows = self.tables.setdefault(table, [])
        stored = {
            "id": f"{table}-{len(rows) + 1}",
            "created_at": f"2024-01-15T10:{30 + len(rows):02d}:00+00:00",
            **row,
        }
        rows.append(stored)
        return dict(stored)

    def select_rows(self, table, columns="*", filters=None, order_by=None, desc=False):
        rows = [
            r for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows = sorted(rows, key=lambda r: r.get(order_by) or "", reverse=desc)
        return [dict(r) for r in rows]

    def fetch_row(self, table, row_id, columns="*"):
        for r in self.tables.get(table, []):
            if str(r.get("id")) == str(row_id):
                return dict(r)
        return None

    def update_rows(self, table, values, filters):
        updated = []
        for r in self.tables.get(table, []):
            if all(r.get(k) == v for k, v in filters.items()):
                r.update(values)
                updated.append(dict(r))
        return updated

    def check_database(self, table="projects"):
        return None

    def check_storage(self):
        return None


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return FakeBackend()


@pytest.fixture
def token_factory():
    """Deterministic tokens: tok-1, tok-2, ..."""
    counter = count(1)
    return lambda: f"tok-{next(counter)}"


@pytest.fixture
def sample_project():
    """Sample project row."""
    return {
        "id": "proj-1",
        "title": "Harbour Pavilion",
        "description": "Competition entry",
        "cover_image_url": None,
        "location": "Sydney",
        "created_at": "2024-01-10T09:00:00+00:00",
    }
