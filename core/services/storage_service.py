# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Object store adapter for gift images:
# - put(): upload bytes, return the public URL (raises StorageFailureError)
# - delete(): remove an object by its public URL (best-effort, never raises)
# =============================================================================

import logging
from urllib.parse import unquote, urlsplit
from uuid import uuid4

from supabase import Client

from app.config import settings
from app.exceptions import StorageFailureError
from lib.supabase_client import SupabaseClient
from lib.utils import sanitize_filename

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations on the gift image bucket.

    Args:
        client: Supabase client to use; defaults to the shared singleton
        bucket: Bucket name; defaults to settings.STORAGE_BUCKET
    """

    def __init__(self, client: Client | None = None, bucket: str | None = None):
        self._client = client
        self.bucket = bucket or settings.STORAGE_BUCKET

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    @staticmethod
    def build_object_path(filename: str | None) -> str:
        """
        Derive a unique object path from the original filename.

        Example:
            build_object_path("cake.png")  # "3f2a...e9-cake.png"
        """
        return f"{uuid4().hex}-{sanitize_filename(filename)}"

    def put(self, filename: str | None, content: bytes, content_type: str) -> str:
        """
        Upload an image and return its public URL.

        Args:
            filename: Original filename (used to derive the object name)
            content: File bytes
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageFailureError: If the upload or URL lookup fails
        """
        path = self.build_object_path(filename)
        bucket = self.client.storage.from_(self.bucket)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type},
            )
            url = bucket.get_public_url(path)
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            raise StorageFailureError(str(e), path=path)

        logger.info(f"Uploaded image to storage: {path} ({len(content)} bytes)")
        return url

    def path_from_url(self, url: str) -> str | None:
        """
        Map a public URL produced by put() back to its object path.

        Returns:
            Object path, or None if the URL doesn't belong to this bucket
        """
        marker = f"/object/public/{self.bucket}/"
        path = urlsplit(url).path
        if marker not in path:
            return None
        return unquote(path.split(marker, 1)[1]) or None

    def delete(self, url: str) -> bool:
        """
        Delete an image by its public URL.

        Failures are logged and reported as False; callers doing cleanup
        carry on regardless.

        Returns:
            True if deleted successfully
        """
        path = self.path_from_url(url)
        if path is None:
            logger.warning(f"Not deleting image outside bucket '{self.bucket}': {url}")
            return False

        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            logger.error(f"Failed to delete image {path}: {e}")
            return False

        logger.info(f"Deleted image from storage: {path}")
        return True
