# =============================================================================
# core/services/visibility.py - Gift Visibility Filter
# =============================================================================
# Projects gifts for a particular viewer before they leave the API.
#
# Rule: a gift's private message is visible only to admins and to the gift's
# owner. Everyone else gets message=None. Everything else is always visible.
# =============================================================================

from typing import Iterable
from uuid import UUID

from core.models.gift import GiftListItem, GiftRecord


def can_view_message(gift: GiftRecord, current_user_id: UUID | str | None, is_admin: bool) -> bool:
    """Check whether the viewer may read this gift's message."""
    if is_admin:
        return True
    return current_user_id is not None and str(gift.user_id) == str(current_user_id)


def filter_gifts_for_viewer(
    gifts: Iterable[GiftRecord],
    current_user_id: UUID | str | None,
    is_admin: bool,
) -> list[GiftListItem]:
    """
    Redact gift messages the viewer may not read.

    Pure and order-preserving: the output has one item per input gift, in the
    same order.
    """
    return [
        GiftListItem(
            id=gift.id,
            title=gift.title,
            message=gift.message if can_view_message(gift, current_user_id, is_admin) else None,
            image_url=gift.image_url,
            blur_data_url=gift.blur_data_url,
            created_at=gift.created_at,
            user=gift.user,
        )
        for gift in gifts
    ]
