# =============================================================================
# tests/test_gift_routes.py - Gift API Endpoint Tests
# =============================================================================
# Drives the /api/v1/gifts endpoints through FastAPI's TestClient with real
# signed tokens and in-memory collaborators, checking status codes and the
# structured error bodies.
# =============================================================================

from uuid import uuid4

import pytest

from tests.conftest import auth_header, make_png, make_token

GIFTS = "/api/v1/gifts"


def gift_form(title="Happy birthday", message="Have the best day"):
    return {"title": title, "message": message}


def png_file(name="cake.png", content_type="image/png"):
    return {"image": (name, make_png(), content_type)}


# =============================================================================
# Authentication
# =============================================================================

class TestAuthentication:
    """Every gift endpoint needs a valid token, checked before anything else."""

    @pytest.mark.parametrize("method,path", [
        ("post", ""),
        ("get", ""),
        ("get", "/{id}"),
        ("put", "/{id}"),
        ("delete", "/{id}"),
    ])
    def test_missing_token_returns_401(self, client, method, path):
        response = client.request(method.upper(), GIFTS + path.format(id=uuid4()))

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_401_happens_before_validation_and_storage(self, client, storage, repository):
        response = client.post(GIFTS, data=gift_form(title="Hi"), files=png_file(content_type="text/plain"))

        assert response.status_code == 401
        assert storage.put_calls == []
        assert repository.calls == []

    def test_invalid_token_returns_401(self, client):
        response = client.get(GIFTS, headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_expired_token_returns_401(self, client, owner):
        token = make_token(owner, expires_in=-60)

        response = client.get(GIFTS, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert "expired" in response.json()["detail"].lower()


# =============================================================================
# POST /gifts
# =============================================================================

class TestCreateGift:
    """Submitting gifts."""

    def test_create_returns_201_with_projection(self, client, owner, repository):
        response = client.post(GIFTS, data=gift_form(), files=png_file(), headers=auth_header(owner))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Gift created successfully"
        gift = body["gift"]
        assert set(gift) >= {"id", "title", "message", "image_url", "blur_data_url", "created_at"}
        assert "user_id" not in gift
        assert gift["message"] == "Have the best day"
        assert gift["id"] in repository.rows

    def test_missing_fields_are_named(self, client, owner):
        response = client.post(GIFTS, data={"title": "Happy birthday"}, headers=auth_header(owner))

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert body["details"]["fields"] == ["message", "image"]

    def test_short_title_rejected(self, client, owner):
        response = client.post(GIFTS, data=gift_form(title="Hi"), files=png_file(), headers=auth_header(owner))

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["title"]

    def test_empty_image_file_is_rejected(self, client, owner, storage, repository):
        response = client.post(
            GIFTS,
            data=gift_form(),
            files={"image": ("empty.png", b"", "image/png")},
            headers=auth_header(owner),
        )

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["image"]
        assert storage.put_calls == []
        assert repository.rows == {}

    def test_non_image_rejected_even_with_image_extension(self, client, owner, storage):
        response = client.post(
            GIFTS,
            data=gift_form(),
            files=png_file(name="photo.png", content_type="text/plain"),
            headers=auth_header(owner),
        )

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["image"]
        assert storage.put_calls == []

    def test_storage_failure_returns_500(self, client, owner, storage, repository):
        storage.fail_put = True

        response = client.post(GIFTS, data=gift_form(), files=png_file(), headers=auth_header(owner))

        assert response.status_code == 500
        assert response.json()["code"] == "STORAGE_FAILURE"
        assert repository.rows == {}

    def test_persistence_failure_returns_500_and_cleans_up(self, client, owner, storage, repository):
        repository.fail_on.add("create")

        response = client.post(GIFTS, data=gift_form(), files=png_file(), headers=auth_header(owner))

        assert response.status_code == 500
        assert response.json()["code"] == "PERSISTENCE_FAILURE"
        assert len(storage.delete_calls) == 1
        assert storage.objects == {}


# =============================================================================
# GET /gifts
# =============================================================================

class TestListGifts:
    """The feed with message redaction."""

    def test_messages_redacted_for_non_owners(self, client, repository, owner, other_user):
        repository.add(owner.id, message="from owner")
        repository.add(other_user.id, message="from friend")

        response = client.get(GIFTS, headers=auth_header(owner))

        assert response.status_code == 200
        gifts = response.json()["gifts"]
        assert [g["message"] for g in gifts] == [None, "from owner"]
        assert gifts[0]["user"]["name"] == "Friend"

    def test_admin_flag_from_token_reveals_messages(self, client, repository, owner, other_user, admin):
        repository.add(owner.id, message="from owner")
        repository.add(other_user.id, message="from friend")

        response = client.get(GIFTS, headers=auth_header(admin))

        assert [g["message"] for g in response.json()["gifts"]] == ["from friend", "from owner"]

    def test_mine_filter(self, client, repository, owner, other_user):
        repository.add(owner.id)
        repository.add(other_user.id)

        response = client.get(GIFTS, params={"mine": "true"}, headers=auth_header(owner))

        gifts = response.json()["gifts"]
        assert len(gifts) == 1
        assert gifts[0]["user"]["id"] == str(owner.id)

    def test_repeated_list_is_identical(self, client, repository, owner):
        repository.add(owner.id)
        repository.add(owner.id)

        first = client.get(GIFTS, headers=auth_header(owner)).json()
        second = client.get(GIFTS, headers=auth_header(owner)).json()

        assert first == second

    def test_new_gift_listed_first(self, client, repository, owner, other_user):
        repository.add(other_user.id)

        created = client.post(GIFTS, data=gift_form(), files=png_file(), headers=auth_header(owner)).json()
        gifts = client.get(GIFTS, headers=auth_header(owner)).json()["gifts"]

        assert gifts[0]["id"] == created["gift"]["id"]


# =============================================================================
# GET / PUT / DELETE /gifts/{id}
# =============================================================================

class TestSingleGift:
    """Owner-only access to one gift."""

    @pytest.fixture
    def gift(self, repository, owner):
        return repository.add(owner.id, title="Original", message="Old message")

    def test_owner_gets_gift_with_owner(self, client, gift, owner):
        response = client.get(f"{GIFTS}/{gift.id}", headers=auth_header(owner))

        assert response.status_code == 200
        body = response.json()["gift"]
        assert body["message"] == "Old message"
        assert body["user"]["email"] == owner.email

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_non_owner_gets_403(self, client, gift, other_user, method):
        kwargs = {"data": gift_form()} if method == "PUT" else {}

        response = client.request(method, f"{GIFTS}/{gift.id}", headers=auth_header(other_user), **kwargs)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_missing_gift_gets_404(self, client, owner, method):
        kwargs = {"data": gift_form()} if method == "PUT" else {}

        response = client.request(method, f"{GIFTS}/{uuid4()}", headers=auth_header(owner), **kwargs)

        assert response.status_code == 404
        assert response.json()["code"] == "GIFT_NOT_FOUND"

    def test_update_without_image_keeps_image(self, client, gift, owner):
        response = client.put(f"{GIFTS}/{gift.id}", data=gift_form(title="New title"), headers=auth_header(owner))

        assert response.status_code == 200
        updated = response.json()["gift"]
        assert updated["title"] == "New title"
        assert updated["image_url"] == gift.image_url
        assert updated["blur_data_url"] == gift.blur_data_url
        assert updated["updated_at"] is not None

    def test_update_with_image(self, client, gift, owner):
        response = client.put(
            f"{GIFTS}/{gift.id}", data=gift_form(), files=png_file(), headers=auth_header(owner)
        )

        assert response.status_code == 200
        assert response.json()["gift"]["image_url"] != gift.image_url

    def test_update_with_empty_image_is_rejected(self, client, gift, owner, storage, repository):
        response = client.put(
            f"{GIFTS}/{gift.id}",
            data=gift_form(),
            files={"image": ("empty.png", b"", "image/png")},
            headers=auth_header(owner),
        )

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["image"]
        assert storage.put_calls == []
        assert storage.delete_calls == []
        assert repository.rows[str(gift.id)].image_url == gift.image_url

    def test_update_validation(self, client, gift, owner):
        response = client.put(f"{GIFTS}/{gift.id}", data=gift_form(message="m" * 501), headers=auth_header(owner))

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["message"]

    def test_delete(self, client, gift, owner, repository):
        response = client.delete(f"{GIFTS}/{gift.id}", headers=auth_header(owner))

        assert response.status_code == 200
        assert response.json()["message"] == "Gift deleted successfully"
        assert repository.rows == {}

    def test_malformed_id_is_rejected(self, client, owner):
        response = client.get(f"{GIFTS}/not-a-uuid", headers=auth_header(owner))

        assert response.status_code == 422
