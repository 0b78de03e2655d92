# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - gifts.py: Gift submission, feed and owner-only management endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import gifts

__all__ = [
    "health",
    "gifts",
]
