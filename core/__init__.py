# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic:
# - models/: Pydantic schemas for data validation
# - services/: Project, asset and storage services plus the upload workflow
#
# Code in this package receives its backend client as an argument and
# does not import FastAPI routing, which keeps it testable with a fake.
# =============================================================================
