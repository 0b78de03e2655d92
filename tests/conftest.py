# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Builds signed test tokens for owner / other user / admin principals
# - Wires the FastAPI app to in-memory collaborators
# =============================================================================

import io
import os
import time
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-hs256-tokens")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from PIL import Image

from app.auth.models import AuthUser
from app.config import settings
from app.dependencies import get_gift_service
from app.main import app
from core.models.gift import GiftOwner, ImageUpload
from core.services.gift_service import GiftService
from tests.fakes import FakeGiftRepository, FakePlaceholder, FakeStorage


# =============================================================================
# Helpers
# =============================================================================

def make_token(user: AuthUser, expires_in: int = 3600, **claims) -> str:
    """Sign a Supabase-style access token for a principal."""
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "aud": "authenticated",
        "iat": int(time.time()),
        "exp": int(time.time()) + expires_in,
        "role": "authenticated",
        "app_metadata": {"is_admin": user.is_admin},
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def auth_header(user: AuthUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


def make_png(size: tuple[int, int] = (64, 48), color=(220, 40, 90)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_corrupt_png() -> bytes:
    """
    A PNG whose header decodes but whose second IDAT chunk type is garbage,
    so Pillow only fails once it starts reading pixel data.
    """
    noise = Image.frombytes("RGB", (320, 320), os.urandom(320 * 320 * 3))
    buffer = io.BytesIO()
    noise.save(buffer, format="PNG")
    data = buffer.getvalue()

    second_idat = data.index(b"IDAT", data.index(b"IDAT") + 4)
    return data[:second_idat] + b"\x00DAT" + data[second_idat + 4:]


# =============================================================================
# Principals
# =============================================================================

@pytest.fixture
def owner():
    return AuthUser(id=uuid4(), email="owner@example.com")


@pytest.fixture
def other_user():
    return AuthUser(id=uuid4(), email="friend@example.com")


@pytest.fixture
def admin():
    return AuthUser(id=uuid4(), email="birthday@example.com", is_admin=True)


# =============================================================================
# Collaborators
# =============================================================================

@pytest.fixture
def repository(owner, other_user, admin):
    """In-memory repository that knows every test principal as an owner."""
    return FakeGiftRepository(owners={
        str(owner.id): GiftOwner(id=owner.id, name="Owner", email=owner.email),
        str(other_user.id): GiftOwner(id=other_user.id, name="Friend", email=other_user.email),
        str(admin.id): GiftOwner(id=admin.id, name="Birthday Person", email=admin.email),
    })


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def placeholder():
    return FakePlaceholder()


@pytest.fixture
def service(repository, storage, placeholder):
    return GiftService(repository=repository, storage=storage, placeholder=placeholder)


@pytest.fixture
def png_image():
    return ImageUpload(filename="cake.png", content_type="image/png", content=make_png())


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture
def client(service):
    """TestClient whose gift routes run against the in-memory collaborators."""
    app.dependency_overrides[get_gift_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
