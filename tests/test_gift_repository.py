# =============================================================================
# tests/test_gift_repository.py - Gift Repository Tests
# =============================================================================
# Tests use a MagicMock Supabase client; PostgREST query builders are
# chainable, so every builder method returns the same mock.
# =============================================================================

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from app.exceptions import PersistenceFailureError
from core.services.gift_repository import SELECT_WITH_OWNER, GiftRepository

GIFT_ID = str(uuid4())
USER_ID = str(uuid4())


def gift_row(**overrides):
    row = {
        "id": GIFT_ID,
        "title": "Happy birthday",
        "message": "Have the best day",
        "image_url": "https://example.com/cake.png",
        "blur_data_url": None,
        "user_id": USER_ID,
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:30:00Z",
    }
    row.update(overrides)
    return row


@pytest.fixture
def query():
    """A chainable query builder mock."""
    builder = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "order", "single"):
        getattr(builder, method).return_value = builder
    return builder


@pytest.fixture
def repository(query):
    client = MagicMock()
    client.table.return_value = query
    return GiftRepository(client=client)


class TestCreate:

    def test_inserts_row(self, repository, query):
        query.execute.return_value = MagicMock(data=[gift_row()])

        gift = repository.create(USER_ID, "Happy birthday", "Have the best day", "https://example.com/cake.png")

        payload = query.insert.call_args.args[0]
        assert payload["user_id"] == USER_ID
        assert payload["blur_data_url"] is None
        assert str(gift.id) == GIFT_ID

    def test_insert_error_raises_persistence_failure(self, repository, query):
        query.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(PersistenceFailureError) as exc_info:
            repository.create(USER_ID, "Happy birthday", "Hi", "https://example.com/cake.png")

        assert exc_info.value.details["operation"] == "create"

    def test_empty_insert_response_raises(self, repository, query):
        query.execute.return_value = MagicMock(data=[])

        with pytest.raises(PersistenceFailureError):
            repository.create(USER_ID, "Happy birthday", "Hi", "https://example.com/cake.png")


class TestRead:

    def test_get_embeds_owner(self, repository, query):
        owner = {"id": USER_ID, "name": "Sam", "email": "sam@example.com"}
        query.execute.return_value = MagicMock(data=gift_row(user=owner))

        gift = repository.get(GIFT_ID)

        query.select.assert_called_with(SELECT_WITH_OWNER)
        assert gift.user.name == "Sam"

    def test_get_missing_returns_none(self, repository, query):
        query.execute.side_effect = RuntimeError("{'code': 'PGRST116', 'message': 'no rows'}")

        assert repository.get(GIFT_ID) is None

    def test_get_error_raises(self, repository, query):
        query.execute.side_effect = RuntimeError("timeout")

        with pytest.raises(PersistenceFailureError):
            repository.get(GIFT_ID)

    def test_list_orders_newest_first(self, repository, query):
        query.execute.return_value = MagicMock(data=[gift_row(), gift_row(id=str(uuid4()))])

        gifts = repository.list()

        query.order.assert_called_once_with("created_at", desc=True)
        query.eq.assert_not_called()
        assert len(gifts) == 2

    def test_list_scoped_to_owner(self, repository, query):
        query.execute.return_value = MagicMock(data=[])

        assert repository.list(user_id=USER_ID) == []

        query.eq.assert_called_once_with("user_id", USER_ID)


class TestWrite:

    def test_update_never_writes_user_id(self, repository, query):
        query.execute.return_value = MagicMock(data=[gift_row(title="New title")])

        gift = repository.update(GIFT_ID, "New title", "Hi", "https://example.com/cake.png", None)

        payload = query.update.call_args.args[0]
        assert "user_id" not in payload
        assert "updated_at" in payload
        assert gift.title == "New title"

    def test_update_matching_nothing_raises(self, repository, query):
        query.execute.return_value = MagicMock(data=[])

        with pytest.raises(PersistenceFailureError):
            repository.update(GIFT_ID, "New title", "Hi", "https://example.com/cake.png", None)

    def test_delete(self, repository, query):
        repository.delete(GIFT_ID)

        query.delete.assert_called_once()
        query.eq.assert_called_once_with("id", GIFT_ID)

    def test_delete_error_raises(self, repository, query):
        query.execute.side_effect = RuntimeError("timeout")

        with pytest.raises(PersistenceFailureError):
            repository.delete(GIFT_ID)
