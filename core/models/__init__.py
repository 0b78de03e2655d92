# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - gift.py: Gift records, projections and the uploaded image type
#
# These models define the "contract" between API and clients.
# =============================================================================

from .gift import (
    GiftList,
    GiftListItem,
    GiftMutationResponse,
    GiftOwner,
    GiftRecord,
    GiftResponse,
    ImageUpload,
)

__all__ = [
    "GiftList",
    "GiftListItem",
    "GiftMutationResponse",
    "GiftOwner",
    "GiftRecord",
    "GiftResponse",
    "ImageUpload",
]
