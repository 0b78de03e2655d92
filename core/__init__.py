# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the gift pipeline's business logic:
# - models/: Pydantic schemas for gifts and uploaded images
# - services/: Repository, object store adapter, blur placeholder
#   generator, visibility filter and the submission pipeline
#
# Code in this package should NOT import FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
