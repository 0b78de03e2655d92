# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client singleton and user lookups
# - cache.py: TTLCache, an explicit time-boxed cache object
# - gift_client.py: httpx client for the gift API (import it directly)
# - utils.py: Shared utilities (UUID normalization, filename sanitizing)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.cache import TTLCache
from lib.utils import normalize_uuid, sanitize_filename

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Caching
    "TTLCache",
    # Utils
    "normalize_uuid",
    "sanitize_filename",
]
