# =============================================================================
# app/exceptions.py - Error Taxonomy and Exception Handlers
# =============================================================================
# Every failure the gift pipeline can report is one of the GiftFeedException
# subclasses below. Routes never inspect error shapes; the handler turns any
# of them into a structured JSON body with a stable code.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class GiftFeedException(Exception):
    """
    Base exception for the GiftFeed API.

    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "GIFTFEED_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Access Exceptions
# =============================================================================

class UnauthenticatedError(GiftFeedException):
    """Raised when a request carries no valid principal."""

    def __init__(self, reason: str = "Authentication required"):
        super().__init__(
            message=reason,
            code="UNAUTHENTICATED",
            status_code=401,
            suggestion="Sign in and send the access token as a Bearer header",
        )


class ForbiddenError(GiftFeedException):
    """Raised when the principal does not own the gift it is acting on."""

    def __init__(self, gift_id: str, action: str = "modify"):
        super().__init__(
            message=f"Forbidden - you can only {action} your own gifts",
            code="FORBIDDEN",
            status_code=403,
            details={"gift_id": gift_id},
        )


class GiftNotFoundError(GiftFeedException):
    """Raised when a gift ID doesn't exist."""

    def __init__(self, gift_id: str):
        super().__init__(
            message=f"Gift not found: {gift_id}",
            code="GIFT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the gift_id is correct and the gift hasn't been deleted",
            details={"gift_id": gift_id},
        )


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationFailedError(GiftFeedException):
    """
    Raised when submitted gift fields or the image are missing or malformed.

    `fields` names every offending form field so clients can highlight them.
    """

    def __init__(
        self,
        message: str,
        fields: list[str],
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            suggestion=suggestion,
            details={"fields": fields, **(details or {})},
        )
        self.fields = fields


# =============================================================================
# Storage / Persistence Exceptions
# =============================================================================

class StorageFailureError(GiftFeedException):
    """Raised when the object store rejects an upload."""

    def __init__(self, error: str, path: str | None = None):
        details = {"error": error}
        if path:
            details["path"] = path
        super().__init__(
            message=f"Failed to upload image to storage: {error}",
            code="STORAGE_FAILURE",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details=details,
        )


class PersistenceFailureError(GiftFeedException):
    """Raised when a gift row cannot be read or written."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation} gift: {error}",
            code="PERSISTENCE_FAILURE",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error},
        )


class UpstreamDegradedError(GiftFeedException):
    """
    Raised inside the placeholder generator when the preview can't be built.

    Never reaches a route: PlaceholderGenerator.generate converts it to None.
    """

    def __init__(self, url: str, error: str):
        super().__init__(
            message=f"Blur placeholder unavailable: {error}",
            code="UPSTREAM_DEGRADED",
            status_code=503,
            details={"url": url, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def giftfeed_exception_handler(
    request: Request,
    exc: GiftFeedException
) -> JSONResponse:
    """
    Convert GiftFeedException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle FastAPI request validation errors (malformed path/query params).
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "REQUEST_VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
