# =============================================================================
# lib/cache.py - Time-Boxed Key/Value Cache
# =============================================================================
# A small explicit cache object. Callers own an instance and pass it where it
# is needed, so cached data is scoped to whoever created it (one API client,
# one JWKS lookup) rather than living in a module-level variable.
#
# Usage:
#   cache = TTLCache(ttl=30)
#   cache.set("gifts", gifts)
#   cache.get("gifts")        # -> gifts until 30s have passed, then None
#   cache.invalidate("gifts")
# =============================================================================

from __future__ import annotations

import time
from typing import Any, Callable


class TTLCache:
    """
    Key/value cache whose entries expire `ttl` seconds after being set.

    Args:
        ttl: Default lifetime of an entry in seconds
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value; `ttl` overrides the default lifetime for this entry."""
        lifetime = self.ttl if ttl is None else ttl
        self._entries[key] = (self._clock() + lifetime, value)

    def invalidate(self, key: str | None = None) -> None:
        """Drop one entry, or every entry when no key is given."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
