# =============================================================================
# core/services/gift_service.py - Gift Submission Pipeline
# =============================================================================
# Orchestrates every gift operation:
#
#   create: authenticate -> validate -> upload image -> blur placeholder
#           (best-effort) -> insert row, deleting the upload if the insert fails
#   update: authenticate -> fetch -> authorize -> validate -> optional new
#           upload + placeholder -> update row (same compensation)
#   delete: authenticate -> fetch -> authorize -> delete row -> reap image
#   read:   authenticate -> fetch/list -> ownership check or visibility filter
#
# Upload-then-commit is a two-step saga with one compensation: if anything
# after the upload fails (placeholder or commit), the image uploaded for it is
# deleted exactly once. A failed
# compensation is logged and the original error is what the caller sees.
# =============================================================================

import logging
from typing import Callable
from uuid import UUID

from app.auth.models import AuthUser
from app.config import Settings, settings as default_settings
from app.exceptions import (
    ForbiddenError,
    GiftNotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from core.models.gift import GiftListItem, GiftRecord, ImageUpload
from core.services.gift_repository import GiftRepository
from core.services.placeholder_service import PlaceholderGenerator
from core.services.storage_service import StorageService
from core.services.visibility import filter_gifts_for_viewer

logger = logging.getLogger(__name__)


def normalize_content_type(content_type: str | None) -> str:
    """Lower-case a MIME type and drop parameters ("image/PNG; x=y" -> "image/png")."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_gift_fields(
    title: str | None,
    message: str | None,
    image: ImageUpload | None,
    image_required: bool,
    config: Settings = default_settings,
) -> tuple[str, str]:
    """
    Check submitted gift fields against the content rules.

    Missing fields are reported first, together. Otherwise every rule
    violation (image type, image size, title length, message length) is
    reported in one error.

    Returns:
        (title, message) with the title trimmed

    Raises:
        ValidationFailedError: Naming every offending field
    """
    missing = []
    if not title or not title.strip():
        missing.append("title")
    if not message or not message.strip():
        missing.append("message")
    if image_required and (image is None or image.size == 0):
        missing.append("image")

    if missing:
        raise ValidationFailedError(
            message=f"Missing required field(s): {', '.join(missing)}",
            fields=missing,
            suggestion="Provide a title, a message and an image",
        )

    problems: list[tuple[str, str]] = []

    if image is not None:
        content_type = normalize_content_type(image.content_type)
        allowed = config.allowed_image_types_list
        if image.size == 0:
            problems.append(("image", "Image file is empty"))
        elif content_type not in allowed:
            problems.append(("image", f"File must be an image of type {', '.join(allowed)} (got '{content_type or 'unknown'}')"))
        elif image.size > config.max_image_size_bytes:
            size_mb = image.size / (1024 * 1024)
            problems.append(("image", f"Image too large: {size_mb:.1f}MB (max: {config.MAX_IMAGE_SIZE_MB}MB)"))

    title = title.strip()
    if len(title) < config.TITLE_MIN_LENGTH:
        problems.append(("title", f"Title must be at least {config.TITLE_MIN_LENGTH} characters"))

    if len(message) > config.MESSAGE_MAX_LENGTH:
        problems.append(("message", f"Message must be at most {config.MESSAGE_MAX_LENGTH} characters"))

    if problems:
        raise ValidationFailedError(
            message="; ".join(text for _, text in problems),
            fields=[field for field, _ in problems],
        )

    return title, message


class GiftService:
    """
    The gift submission and visibility pipeline.

    Collaborators are injected so each step can be replaced in tests; the
    defaults talk to Supabase.
    """

    def __init__(
        self,
        repository: GiftRepository | None = None,
        storage: StorageService | None = None,
        placeholder: PlaceholderGenerator | None = None,
        config: Settings | None = None,
    ):
        self.config = config or default_settings
        self.repository = repository or GiftRepository()
        self.storage = storage or StorageService()
        self.placeholder = placeholder or PlaceholderGenerator()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_user(user: AuthUser | None) -> AuthUser:
        if user is None:
            raise UnauthenticatedError()
        return user

    def _get_owned(self, user: AuthUser, gift_id: UUID | str, action: str) -> GiftRecord:
        """Fetch a gift and check the user owns it (404 before 403)."""
        gift = self.repository.get(gift_id)
        if gift is None:
            raise GiftNotFoundError(str(gift_id))

        if str(gift.user_id) != str(user.id):
            logger.warning(f"User {user.id} tried to {action} gift {gift_id} owned by {gift.user_id}")
            raise ForbiddenError(str(gift_id), action=action)

        return gift

    def _upload(self, image: ImageUpload) -> str:
        """Upload an image and return its public URL."""
        return self.storage.put(
            image.filename,
            image.content,
            normalize_content_type(image.content_type),
        )

    def _commit_with_compensation(
        self,
        uploaded_url: str,
        commit: Callable[[str | None], GiftRecord],
    ) -> GiftRecord:
        """
        Run everything after the upload as one guarded step.

        The blur placeholder is built first and handed to `commit`. If either
        raises, the just-uploaded object is deleted once and the exception
        propagates unchanged.
        """
        try:
            blur_data_url = self.placeholder.generate(uploaded_url)
            return commit(blur_data_url)
        except Exception:
            logger.error(f"Gift commit failed, removing uploaded image {uploaded_url}")
            if not self.storage.delete(uploaded_url):
                logger.error(f"Compensation failed, image left orphaned: {uploaded_url}")
            raise

    def _reap(self, image_url: str) -> None:
        if self.config.REAP_ORPHANED_IMAGES:
            self.storage.delete(image_url)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create_gift(
        self,
        user: AuthUser | None,
        title: str | None,
        message: str | None,
        image: ImageUpload | None,
    ) -> GiftRecord:
        """
        Create a gift for the acting user.

        Raises:
            UnauthenticatedError: No acting user
            ValidationFailedError: Missing or invalid fields
            StorageFailureError: Image upload failed (nothing was written)
            PersistenceFailureError: Insert failed (upload was rolled back)
        """
        user = self._require_user(user)
        title, message = validate_gift_fields(
            title, message, image, image_required=True, config=self.config
        )

        image_url = self._upload(image)

        gift = self._commit_with_compensation(
            image_url,
            lambda blur_data_url: self.repository.create(
                user_id=user.id,
                title=title,
                message=message,
                image_url=image_url,
                blur_data_url=blur_data_url,
            ),
        )
        logger.info(f"Gift {gift.id} submitted by user {user.id} (placeholder: {gift.blur_data_url is not None})")
        return gift

    def get_gift(self, user: AuthUser | None, gift_id: UUID | str) -> GiftRecord:
        """
        Fetch one gift, with its owner, for its owner only.

        Raises:
            UnauthenticatedError, GiftNotFoundError, ForbiddenError
        """
        user = self._require_user(user)
        return self._get_owned(user, gift_id, action="view")

    def list_gifts(self, user: AuthUser | None, mine: bool = False) -> list[GiftListItem]:
        """
        List gifts newest first, with messages redacted for this viewer.

        Args:
            mine: Only return the acting user's own gifts
        """
        user = self._require_user(user)
        gifts = self.repository.list(user_id=user.id if mine else None)
        return filter_gifts_for_viewer(gifts, user.id, user.is_admin)

    def update_gift(
        self,
        user: AuthUser | None,
        gift_id: UUID | str,
        title: str | None,
        message: str | None,
        image: ImageUpload | None = None,
    ) -> GiftRecord:
        """
        Update an owned gift; the image is only replaced when a new one is given.

        Raises:
            UnauthenticatedError, GiftNotFoundError, ForbiddenError,
            ValidationFailedError, StorageFailureError, PersistenceFailureError
        """
        user = self._require_user(user)
        existing = self._get_owned(user, gift_id, action="edit")
        title, message = validate_gift_fields(
            title, message, image, image_required=False, config=self.config
        )

        if image is None:
            return self.repository.update(
                existing.id,
                title=title,
                message=message,
                image_url=existing.image_url,
                blur_data_url=existing.blur_data_url,
            )

        image_url = self._upload(image)
        updated = self._commit_with_compensation(
            image_url,
            lambda blur_data_url: self.repository.update(
                existing.id,
                title=title,
                message=message,
                image_url=image_url,
                blur_data_url=blur_data_url,
            ),
        )

        if existing.image_url != updated.image_url:
            self._reap(existing.image_url)
        return updated

    def delete_gift(self, user: AuthUser | None, gift_id: UUID | str) -> None:
        """
        Delete an owned gift and, when enabled, its stored image.

        Raises:
            UnauthenticatedError, GiftNotFoundError, ForbiddenError,
            PersistenceFailureError
        """
        user = self._require_user(user)
        existing = self._get_owned(user, gift_id, action="delete")
        self.repository.delete(existing.id)
        self._reap(existing.image_url)
