# =============================================================================
# core/services/gift_repository.py - Gift Persistence
# =============================================================================
# Persistence boundary for the Gift entity, backed by the Supabase `gifts`
# table. Every database error is wrapped in PersistenceFailureError so the
# pipeline only ever sees the project's own error taxonomy.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from supabase import Client

from app.exceptions import PersistenceFailureError
from core.models.gift import GiftRecord
from lib.supabase_client import SupabaseClient, is_no_rows_error
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

TABLE_NAME = "gifts"

# Embeds the owner as `user` via the gifts.user_id -> users.id foreign key
SELECT_WITH_OWNER = "*, user:users(id, name, email)"


class GiftRepository:
    """
    CRUD operations on the gifts table.

    Args:
        client: Supabase client to use; defaults to the shared singleton
    """

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def create(
        self,
        user_id: UUID | str,
        title: str,
        message: str,
        image_url: str,
        blur_data_url: str | None = None,
    ) -> GiftRecord:
        """
        Insert a gift row in a single call.

        Returns:
            The created GiftRecord with generated id and created_at

        Raises:
            PersistenceFailureError: If the insert fails or returns no row
        """
        data = {
            "user_id": normalize_uuid(user_id),
            "title": title,
            "message": message,
            "image_url": image_url,
            "blur_data_url": blur_data_url,
        }

        try:
            response = self.client.table(TABLE_NAME).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create gift: {e}")
            raise PersistenceFailureError("create", str(e))

        if not response.data:
            raise PersistenceFailureError("create", "Insert returned no data")

        gift = GiftRecord(**response.data[0])
        logger.info(f"Created gift: {gift.id} for user: {user_id}")
        return gift

    def get(self, gift_id: UUID | str) -> GiftRecord | None:
        """
        Fetch one gift with its owner embedded.

        Returns:
            GiftRecord, or None if no gift has this id

        Raises:
            PersistenceFailureError: If the query fails
        """
        gift_id_str = normalize_uuid(gift_id)

        try:
            response = (
                self.client.table(TABLE_NAME)
                .select(SELECT_WITH_OWNER)
                .eq("id", gift_id_str)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            logger.error(f"Failed to fetch gift {gift_id_str}: {e}")
            raise PersistenceFailureError("fetch", str(e))

        return GiftRecord(**response.data) if response.data else None

    def list(self, user_id: UUID | str | None = None) -> list[GiftRecord]:
        """
        List gifts newest first, with owners embedded.

        Args:
            user_id: If provided, only this user's gifts are returned

        Raises:
            PersistenceFailureError: If the query fails
        """
        query = self.client.table(TABLE_NAME).select(SELECT_WITH_OWNER)
        if user_id is not None:
            query = query.eq("user_id", normalize_uuid(user_id))
        query = query.order("created_at", desc=True)

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to list gifts: {e}")
            raise PersistenceFailureError("list", str(e))

        return [GiftRecord(**row) for row in response.data or []]

    def update(
        self,
        gift_id: UUID | str,
        title: str,
        message: str,
        image_url: str,
        blur_data_url: str | None,
    ) -> GiftRecord:
        """
        Overwrite the editable fields of a gift.

        `user_id` is deliberately not part of the update payload.

        Raises:
            PersistenceFailureError: If the update fails or matches no row
        """
        gift_id_str = normalize_uuid(gift_id)
        data: dict[str, Any] = {
            "title": title,
            "message": message,
            "image_url": image_url,
            "blur_data_url": blur_data_url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = (
                self.client.table(TABLE_NAME)
                .update(data)
                .eq("id", gift_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update gift {gift_id_str}: {e}")
            raise PersistenceFailureError("update", str(e))

        if not response.data:
            raise PersistenceFailureError("update", "Update matched no rows")

        logger.info(f"Updated gift: {gift_id_str}")
        return GiftRecord(**response.data[0])

    def delete(self, gift_id: UUID | str) -> None:
        """
        Delete a gift row.

        Raises:
            PersistenceFailureError: If the delete fails
        """
        gift_id_str = normalize_uuid(gift_id)

        try:
            self.client.table(TABLE_NAME).delete().eq("id", gift_id_str).execute()
        except Exception as e:
            logger.error(f"Failed to delete gift {gift_id_str}: {e}")
            raise PersistenceFailureError("delete", str(e))

        logger.info(f"Deleted gift: {gift_id_str}")
