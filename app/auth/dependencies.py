# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError

from app.config import settings
from app.auth.models import AuthUser, TokenPayload
from app.exceptions import UnauthenticatedError
from lib.cache import TTLCache

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches get_current_user and becomes
# our own 401 instead of FastAPI's default response
security = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour
_jwks_cache = TTLCache(ttl=JWKS_CACHE_TTL)
# Last successfully fetched JWKS, served when a refresh fails
_jwks_last_good: dict[str, dict] = {}


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    cached = _jwks_cache.get("jwks")
    if cached is not None:
        return cached

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        jwks = response.json()
        _jwks_cache.set("jwks", jwks)
        _jwks_last_good["jwks"] = jwks
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return jwks
    except (httpx.HTTPError, ValueError) as e:
        stale = _jwks_last_good.get("jwks")
        if stale is not None:
            logger.warning(f"Failed to refresh JWKS, using last fetched keys: {e}")
            return stale
        logger.warning(f"Failed to fetch JWKS: {e}")
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the principal from its claims.

    Raises:
        UnauthenticatedError: If the token is invalid, expired or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = TokenPayload(**jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        ))
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise UnauthenticatedError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise UnauthenticatedError(f"Invalid token: {e}")
    except ValidationError as e:
        logger.warning(f"JWT payload missing required claims: {e}")
        raise UnauthenticatedError("Invalid token: missing required claims")

    try:
        user_uuid = UUID(payload.sub)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {payload.sub}")
        raise UnauthenticatedError("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_uuid}")
    return AuthUser(id=user_uuid, email=payload.email, is_admin=payload.is_admin)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the principal from the Authorization header.

    Runs before any form parsing or validation in the gift routes, so an
    unauthenticated request is rejected without touching storage or the
    database.

    Raises:
        UnauthenticatedError: 401 if the header is missing or the token is invalid
    """
    if credentials is None:
        raise UnauthenticatedError()

    return decode_access_token(credentials.credentials)
