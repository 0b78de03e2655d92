# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import datetime
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated principal extracted from a Supabase JWT.

    `is_admin` comes from the token's app_metadata, which only the service
    role can write (see scripts/grant_admin.py).
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    is_admin: bool = False


class UserResponse(BaseModel):
    """
    Full user response for API endpoints.

    Includes profile data from the public.users table.
    """
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus app/user metadata.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: str  # Audience (should be "authenticated")
    exp: int  # Expiration timestamp
    iat: Optional[int] = None
    role: Optional[str] = None  # Postgres role, not the admin flag
    app_metadata: dict = {}

    @property
    def is_admin(self) -> bool:
        return bool(self.app_metadata.get("is_admin", False))
