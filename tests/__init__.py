# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the designbase API:
# - test_upload_workflow.py: The batch upload state machine
# - test_storage_path.py: Storage key construction
# - test_models.py: Pydantic model validation
# - test_services.py: Service layer against the in-memory backend
# - test_supabase_client.py: Supabase wrapper against a mocked client
# - test_api.py / test_auth.py: HTTP endpoints and token checks
#
# Run tests with: pytest
# =============================================================================
