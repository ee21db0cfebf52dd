# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Blank optional text is normalized to null
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    AssetDetail,
    AssetResponse,
    PendingFileResponse,
    ProjectCreate,
    ProjectDetail,
    ProjectList,
    ProjectResponse,
    SubmitOutcome,
    SubmitResult,
    UploadSessionResponse,
    UploadState,
    matches_query,
)


# =============================================================================
# Project Model Tests
# =============================================================================

class TestProjectCreate:
    """Tests for ProjectCreate model."""

    def test_valid_project(self):
        """Title and optional fields are trimmed."""
        project = ProjectCreate(title="  Harbour Pavilion ", description=" Entry ", location=" Sydney ")

        assert project.title == "Harbour Pavilion"
        assert project.description == "Entry"
        assert project.location == "Sydney"

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_title_rejected(self, title):
        """Blank titles fail with the form's message."""
        with pytest.raises(ValidationError) as exc_info:
            ProjectCreate(title=title)
        assert "Title is required." in str(exc_info.value)

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            ProjectCreate()

    def test_blank_optionals_become_none(self):
        project = ProjectCreate(title="A", description="   ", location="")
        assert project.description is None
        assert project.location is None

    def test_status_trimmed_and_sent(self):
        project = ProjectCreate(title="A", status=" Concept ")

        assert project.status == "Concept"
        assert project.to_row() == {"title": "A", "description": None, "status": "Concept"}

    def test_blank_status_omitted(self):
        project = ProjectCreate(title="A", status="  ")

        assert project.status is None
        assert "status" not in project.to_row()

    def test_to_row_omits_missing_location(self):
        """Location is only sent when provided; description always is."""
        assert ProjectCreate(title="A").to_row() == {"title": "A", "description": None}
        assert ProjectCreate(title="A", location="Oslo").to_row() == {
            "title": "A",
            "description": None,
            "location": "Oslo",
        }


class TestProjectResponse:
    """Tests for ProjectResponse and ProjectList."""

    def test_uuid_id_serialized_as_string(self):
        project_id = uuid4()
        project = ProjectResponse(id=project_id, title="A")
        assert project.id == str(project_id)

    def test_status_round_trips_from_row(self):
        project = ProjectResponse(id="p1", title="A", status="Construction")
        assert project.model_dump()["status"] == "Construction"

    def test_extra_columns_ignored(self):
        project = ProjectResponse(id="p1", title="A", owner_id="someone")
        assert "owner_id" not in project.model_dump()

    def test_project_list_defaults(self):
        listing = ProjectList()
        assert listing.projects == []
        assert listing.total == 0

    def test_project_detail_includes_assets(self):
        detail = ProjectDetail(
            id="p1",
            title="A",
            assets=[{"id": "a1", "project_id": "p1", "file_name": "plan.png"}],
        )
        assert detail.assets[0].file_name == "plan.png"


class TestMatchesQuery:
    """Tests for the list search helper."""

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_blank_query_matches_everything(self, query):
        assert matches_query(query, None)

    def test_case_insensitive_substring(self):
        assert matches_query("PAVIL", "Harbour Pavilion", None)
        assert matches_query("entry", None, "Competition entry")
        assert not matches_query("museum", "Harbour Pavilion", "Competition entry")


# =============================================================================
# Asset Model Tests
# =============================================================================

class TestAssetModels:
    """Tests for AssetResponse and AssetDetail."""

    def test_asset_from_row(self):
        asset = AssetResponse(**{
            "id": uuid4(),
            "project_id": uuid4(),
            "file_name": "plan.png",
            "storage_path": "p/2024-01-15_x_plan.png",
            "file_size": 10,
            "notes": None,
            "thumb_url": None,
            "uploaded_at": "2024-01-15T10:30:00+00:00",
            "created_at": "2024-01-15T10:30:00+00:00",
        })
        assert isinstance(asset.id, str)
        assert isinstance(asset.project_id, str)
        assert asset.uploaded_at.year == 2024

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            AssetResponse(id="a1", file_size=-1)

    def test_detail_without_project(self):
        detail = AssetDetail(asset={"id": "a1"})
        assert detail.project is None
        assert detail.file_url is None
        assert detail.is_image is False


# =============================================================================
# Upload Model Tests
# =============================================================================

class TestUploadModels:
    """Tests for upload session schemas."""

    def test_state_values(self):
        assert [s.value for s in UploadState] == ["empty", "staged", "submitting", "done", "closed"]

    def test_submit_result_defaults(self):
        result = SubmitResult(outcome=SubmitOutcome.COMPLETED)
        assert result.assets == []
        assert result.recorded_file_ids == []
        assert result.error is None
        assert result.orphaned_key is None

    def test_session_response_serializes_enums(self):
        response = UploadSessionResponse(
            upload_id="u1",
            project_id="p1",
            state=UploadState.STAGED,
            is_open=True,
            pending=[PendingFileResponse(id="f1", file_name="a.png", size=3)],
            last_result=SubmitResult(outcome=SubmitOutcome.FAILED, error="boom"),
        )
        data = response.model_dump(mode="json")

        assert data["state"] == "staged"
        assert data["pending"][0]["selected"] is False
        assert data["last_result"]["outcome"] == "failed"

    def test_pending_size_non_negative(self):
        with pytest.raises(ValidationError):
            PendingFileResponse(id="f1", file_name="a", size=-1)
