# =============================================================================
# lib/gift_client.py - GiftFeed API Client
# =============================================================================
# httpx client for the gift endpoints, for scripts and front-end backends.
#
# - The gift list is cached in a TTLCache owned by the client instance
#   (30 seconds by default) so repeated renders don't refetch it.
# - Every create/update/delete made through the client invalidates that cache
#   immediately, so the next list shows the change.
# - Images are checked against the same type/size/length rules the server
#   applies before anything is sent.
#
# The cache only saves reads; the server still decides who may see or change
# what.
#
# Usage:
#   with GiftApiClient("http://localhost:8000", access_token) as client:
#       client.create_gift("Happy birthday!", "Have the best day", image)
#       feed = client.list_gifts()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx

from app.config import settings
from core.models.gift import (
    GiftList,
    GiftListItem,
    GiftMutationResponse,
    GiftRecord,
    GiftResponse,
    ImageUpload,
)
from core.services.gift_service import validate_gift_fields
from lib.cache import TTLCache

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/gifts"


class GiftApiError(Exception):
    """
    Non-2xx response from the GiftFeed API.

    Carries the structured error body the server returns.
    """

    def __init__(self, status_code: int, code: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.status_code} {self.code}] {self.message}"


class GiftApiClient:
    """
    Client for the /api/v1/gifts endpoints.

    Args:
        base_url: API root, e.g. "http://localhost:8000"
        access_token: Supabase access token sent as a Bearer header
        cache: Cache for list results; a private one is created if omitted
        http_client: Preconfigured httpx.Client (its base_url is used as-is)
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        cache: TTLCache | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.access_token = access_token
        self.cache = cache if cache is not None else TTLCache(ttl=settings.GIFT_CACHE_TTL_SECONDS)
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=30)

    def __enter__(self) -> "GiftApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _list_key(mine: bool) -> str:
        return f"gifts:mine={mine}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        response = self._http.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        raise GiftApiError(
            status_code=response.status_code,
            code=body.get("code", "HTTP_ERROR"),
            message=body.get("detail", response.reason_phrase),
            details=body.get("details"),
        )

    @staticmethod
    def _form(title: str, message: str, image: ImageUpload | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"data": {"title": title, "message": message}}
        if image is not None:
            kwargs["files"] = {"image": (image.filename, image.content, image.content_type)}
        return kwargs

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_gifts(self, mine: bool = False) -> list[GiftListItem]:
        """
        List the feed, reusing a cached result younger than the cache TTL.

        Each call returns a fresh list; the cache holds an immutable tuple.
        """
        key = self._list_key(mine)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Serving {key} from cache")
            return list(cached)

        gifts = GiftList(**self._request("GET", "", params={"mine": mine})).gifts
        self.cache.set(key, tuple(gifts))
        return list(gifts)

    def get_gift(self, gift_id: UUID | str) -> GiftRecord:
        """Fetch one of the caller's own gifts. Never cached."""
        return GiftRecord(**self._request("GET", f"/{gift_id}")["gift"])

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_gift(self, title: str, message: str, image: ImageUpload) -> GiftResponse:
        """
        Submit a gift.

        Raises:
            ValidationFailedError: Before any request, if the fields break the rules
            GiftApiError: If the server rejects the submission
        """
        validate_gift_fields(title, message, image, image_required=True)
        body = self._request("POST", "", **self._form(title, message, image))
        self.cache.invalidate()
        return GiftMutationResponse(**body).gift

    def update_gift(
        self,
        gift_id: UUID | str,
        title: str,
        message: str,
        image: ImageUpload | None = None,
    ) -> GiftResponse:
        """Update a gift; the image is kept unless a new one is given."""
        validate_gift_fields(title, message, image, image_required=False)
        body = self._request("PUT", f"/{gift_id}", **self._form(title, message, image))
        self.cache.invalidate()
        return GiftMutationResponse(**body).gift

    def delete_gift(self, gift_id: UUID | str) -> None:
        """Delete a gift."""
        self._request("DELETE", f"/{gift_id}")
        self.cache.invalidate()
