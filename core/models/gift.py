# =============================================================================
# core/models/gift.py - Gift Schemas
# =============================================================================
# These models define the API contract for gift operations:
# - ImageUpload: An uploaded image file handed to the submission pipeline
# - GiftOwner: The embedded owner of a gift ({id, name, email})
# - GiftRecord: A full row from the gifts table
# - GiftResponse: Projection returned after create/update
# - GiftListItem: Projection returned by the feed (message may be redacted)
#
# A gift is one submission: image + caption + private message + owner.
# =============================================================================

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ImageUpload:
    """
    An image received from a multipart form, fully read into memory.

    `content_type` is the declared MIME type; it alone decides whether the
    file is accepted, whatever its extension says.
    """
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class GiftOwner(BaseModel):
    """Owner embedded in gift responses."""

    id: UUID
    name: str | None = None
    email: str | None = None


class GiftRecord(BaseModel):
    """
    A gift row as stored in the `gifts` table.

    `user` is only populated when the repository joins the owner in.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "title": "Happy birthday!",
            "message": "Have the best day",
            "image_url": "https://xxx.supabase.co/storage/v1/object/public/gifts/ab12-cake.png",
            "blur_data_url": "data:image/png;base64,iVBORw0...",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "created_at": "2024-01-15T10:30:00Z",
            "updated_at": "2024-01-15T10:30:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Unique gift identifier")

    title: str = Field(..., description="Short caption")

    message: str = Field(..., description="Private message (access-controlled on read)")

    image_url: str = Field(..., description="Public URL of the uploaded image")

    blur_data_url: str | None = Field(
        default=None,
        description="Small base64 preview; None when generation failed"
    )

    # Set once at creation from the authenticated principal
    user_id: UUID = Field(..., description="Owning user")

    created_at: datetime = Field(..., description="When the gift was created")

    updated_at: datetime | None = Field(default=None, description="When the gift was last updated")

    user: GiftOwner | None = Field(default=None, description="Embedded owner, when joined")


class GiftResponse(BaseModel):
    """
    Public projection returned by create and update.

    The owner id is not echoed back; the caller already knows who they are.
    """

    id: UUID
    title: str
    message: str
    image_url: str
    blur_data_url: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: GiftRecord) -> "GiftResponse":
        return cls(
            id=record.id,
            title=record.title,
            message=record.message,
            image_url=record.image_url,
            blur_data_url=record.blur_data_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class GiftListItem(BaseModel):
    """
    One entry of the gift feed.

    `message` is None unless the viewer is an admin or the gift's owner.
    """

    id: UUID
    title: str
    message: str | None = None
    image_url: str
    blur_data_url: str | None = None
    created_at: datetime
    user: GiftOwner | None = None


class GiftList(BaseModel):
    """Response body of GET /gifts."""

    gifts: list[GiftListItem] = Field(default_factory=list)


class GiftMutationResponse(BaseModel):
    """Response body of POST /gifts and PUT /gifts/{id}."""

    message: str
    gift: GiftResponse
