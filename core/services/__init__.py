# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .gift_repository import GiftRepository
from .gift_service import GiftService, validate_gift_fields
from .placeholder_service import PlaceholderGenerator
from .storage_service import StorageService
from .visibility import filter_gifts_for_viewer

__all__ = [
    "GiftRepository",
    "GiftService",
    "validate_gift_fields",
    "PlaceholderGenerator",
    "StorageService",
    "filter_gifts_for_viewer",
]
