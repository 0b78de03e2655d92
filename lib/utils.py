# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from pathlib import PurePosixPath
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        gift_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        gift_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Filename Utilities
# =============================================================================

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str | None, default: str = "image") -> str:
    """
    Reduce an uploaded filename to a safe object-store key segment.

    Drops any directory part, replaces runs of unsafe characters with "-"
    and caps the length at 100 characters (keeping the extension).

    Example:
        sanitize_filename("../My Cake (1).PNG")  # "My-Cake-1-.PNG"
        sanitize_filename("")                    # "image"
    """
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("-", name).strip(".-")
    if not name:
        return default

    if len(name) > 100:
        stem, dot, ext = name.rpartition(".")
        if dot and len(ext) <= 10:
            name = f"{stem[:99 - len(ext)]}.{ext}"
        else:
            name = name[:100]
    return name
