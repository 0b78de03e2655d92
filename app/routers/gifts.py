# =============================================================================
# app/routers/gifts.py - Gift CRUD Endpoints
# =============================================================================
# Thin HTTP layer over GiftService. All endpoints require authentication;
# the principal is resolved before the form is validated or any storage or
# database work happens.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Path, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from app.dependencies import CurrentUserDep, GiftServiceDep
from core.models.gift import (
    GiftList,
    GiftMutationResponse,
    GiftRecord,
    GiftResponse,
    ImageUpload,
)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class GiftDetailResponse(BaseModel):
    """Response of GET /gifts/{id}: the full gift with its owner."""
    gift: GiftRecord


class GiftDeleteResponse(BaseModel):
    """Response when deleting a gift."""
    message: str = Field(default="Gift deleted successfully")


# =============================================================================
# Helper Functions
# =============================================================================

async def _read_image(image: UploadFile | None) -> ImageUpload | None:
    """
    Read a multipart image field into memory.

    Browsers send an empty, nameless file part when no file was chosen;
    that counts as "no image".
    """
    if image is None:
        return None

    content = await image.read()
    if not image.filename and not content:
        return None

    return ImageUpload(
        filename=image.filename or "image",
        content_type=image.content_type or "",
        content=content,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=GiftMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_gift(
    user: CurrentUserDep,
    service: GiftServiceDep,
    title: Annotated[str | None, Form(description="Short caption (at least 3 characters)")] = None,
    message: Annotated[str | None, Form(description="Private message (at most 500 characters)")] = None,
    image: Annotated[UploadFile | None, File(description="JPEG, PNG, GIF or WebP image")] = None,
):
    """
    Submit a gift.

    This endpoint:
    1. Validates the fields and the image (type, size)
    2. Uploads the image to storage
    3. Generates a blur placeholder (best-effort)
    4. Saves the gift, removing the uploaded image if the save fails
    """
    upload = await _read_image(image)
    gift = await run_in_threadpool(service.create_gift, user, title, message, upload)

    return GiftMutationResponse(
        message="Gift created successfully",
        gift=GiftResponse.from_record(gift),
    )


@router.get("", response_model=GiftList)
async def list_gifts(
    user: CurrentUserDep,
    service: GiftServiceDep,
    mine: Annotated[bool, Query(description="Only return your own gifts")] = False,
):
    """
    List gifts, newest first.

    Messages are only included for gifts you own, or for every gift if you
    are an admin.
    """
    gifts = await run_in_threadpool(service.list_gifts, user, mine)
    return GiftList(gifts=gifts)


@router.get("/{gift_id}", response_model=GiftDetailResponse)
async def get_gift(
    gift_id: Annotated[UUID, Path(description="Gift UUID")],
    user: CurrentUserDep,
    service: GiftServiceDep,
):
    """
    Get one of your own gifts, with its owner.

    Returns 403 for gifts owned by someone else.
    """
    gift = await run_in_threadpool(service.get_gift, user, gift_id)
    return GiftDetailResponse(gift=gift)


@router.put("/{gift_id}", response_model=GiftMutationResponse)
async def update_gift(
    gift_id: Annotated[UUID, Path(description="Gift UUID")],
    user: CurrentUserDep,
    service: GiftServiceDep,
    title: Annotated[str | None, Form()] = None,
    message: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File(description="Optional replacement image")] = None,
):
    """
    Update one of your own gifts.

    The image is only replaced when a new one is uploaded; otherwise the
    existing image and placeholder are kept.
    """
    upload = await _read_image(image)
    gift = await run_in_threadpool(service.update_gift, user, gift_id, title, message, upload)

    return GiftMutationResponse(
        message="Gift updated successfully",
        gift=GiftResponse.from_record(gift),
    )


@router.delete("/{gift_id}", response_model=GiftDeleteResponse)
async def delete_gift(
    gift_id: Annotated[UUID, Path(description="Gift UUID")],
    user: CurrentUserDep,
    service: GiftServiceDep,
):
    """
    Delete one of your own gifts.
    """
    await run_in_threadpool(service.delete_gift, user, gift_id)
    return GiftDeleteResponse()
