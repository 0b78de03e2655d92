# =============================================================================
# core/services/placeholder_service.py - Blur Placeholder Generation
# =============================================================================
# Builds a tiny base64 PNG preview of an uploaded image so clients can show a
# blurred version while the full image loads.
#
# Generation is a non-critical enhancement: generate() returns None on any
# failure and never raises, so it cannot abort a gift write.
#
# Usage:
#   placeholder = PlaceholderGenerator().generate(image_url)
#   # -> "data:image/png;base64,iVBORw0..." or None
# =============================================================================

import base64
import io
import logging

import httpx
from PIL import Image

from app.config import settings
from app.exceptions import UpstreamDegradedError

logger = logging.getLogger(__name__)


class PlaceholderGenerator:
    """
    Fetches an image once and encodes a downscaled copy as a data URL.

    Args:
        http_client: httpx client to fetch with; a short-lived one is
            created per call when omitted
        size: Long-edge size of the preview in pixels
        timeout: Fetch timeout in seconds
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        size: int | None = None,
        timeout: float | None = None,
    ):
        self._http_client = http_client
        self.size = size or settings.PLACEHOLDER_SIZE
        self.timeout = timeout or settings.PLACEHOLDER_TIMEOUT_SECONDS

    def _fetch(self, url: str) -> bytes:
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamDegradedError(url, f"fetch failed: {e}")

        return response.content

    def _encode(self, url: str, content: bytes) -> str:
        try:
            with Image.open(io.BytesIO(content)) as img:
                preview = img.convert("RGBA")
                preview.thumbnail((self.size, self.size), Image.Resampling.LANCZOS)
                buffer = io.BytesIO()
                preview.save(buffer, format="PNG", optimize=True)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise UpstreamDegradedError(url, f"could not decode image: {e}")

        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    def build(self, url: str) -> str:
        """
        Build the placeholder, raising on failure.

        Raises:
            UpstreamDegradedError: If the image can't be fetched or decoded
        """
        return self._encode(url, self._fetch(url))

    def generate(self, url: str) -> str | None:
        """
        Build the placeholder, or return None if it can't be built.

        A single attempt is made; there is no retry.
        """
        try:
            return self.build(url)
        except UpstreamDegradedError as e:
            logger.warning(f"Failed to generate blur placeholder for {url}: {e.message}")
        except Exception as e:
            logger.warning(f"Unexpected error generating blur placeholder for {url}: {e!r}")
        return None
