# =============================================================================
# lib/storage_path.py - Storage Key Construction
# =============================================================================
# Builds object-storage keys for uploaded assets and project covers.
#
# Asset keys:  {project_id}/{YYYY-MM-DD}_{token}_{sanitized_name}
# Cover paths: projects/{project_id}/cover/{safe_name}
# =============================================================================

import re
from datetime import datetime

# Lowercase extensions that get a public thumbnail URL
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "webp", "gif"})

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9._-]+")
_UNSAFE_CHAR = re.compile(r"[^A-Za-z0-9._-]")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_file_name(name: str) -> str:
    """
    Make a file name safe for use inside a storage key.

    Every run of characters outside [A-Za-z0-9._-] becomes a single "_".
    Applying it twice gives the same result as applying it once.

    Example:
        sanitize_file_name("site plan (v2).pdf")  # "site_plan_v2_.pdf"
    """
    return _UNSAFE_RUN.sub("_", name)


def build_asset_key(project_id: str, file_name: str, now: datetime, token: str) -> str:
    """Storage key for one uploaded asset."""
    return f"{project_id}/{now.strftime('%Y-%m-%d')}_{token}_{sanitize_file_name(file_name)}"


def file_extension(name: str | None) -> str:
    """Lowercase extension without the dot, or "" when there is none."""
    if not name or "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def is_image_file(name: str | None) -> bool:
    """True when the name ends in a raster image extension (case-insensitive)."""
    return file_extension(name) in IMAGE_EXTENSIONS


def build_project_cover_path(project_id: str, file_name: str) -> str:
    """
    Storage path for a project's cover image.

    The name is trimmed, whitespace runs become "-", and any remaining
    character outside [A-Za-z0-9._-] is dropped.
    """
    safe_name = _WHITESPACE_RUN.sub("-", file_name.strip())
    safe_name = _UNSAFE_CHAR.sub("", safe_name)
    return f"projects/{project_id}/cover/{safe_name}"
