# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and can be swapped
# with app.dependency_overrides in tests.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from core.services.gift_service import GiftService


def get_gift_service() -> GiftService:
    """
    Get a gift pipeline wired to Supabase.

    The Supabase client itself is a shared singleton, so building the
    service per request is cheap.
    """
    return GiftService()


# Type aliases for dependency injection
GiftServiceDep = Annotated[GiftService, Depends(get_gift_service)]
CurrentUserDep = Annotated[AuthUser, Depends(get_current_user)]
