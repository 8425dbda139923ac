"""
Storage Service
Uploads images to Supabase Storage and returns their public URLs
"""
import logging
import uuid
from typing import Optional

from supabase import Client, create_client

from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

_client: Optional[Client] = None


class StorageError(Exception):
    pass


def get_storage_client() -> Client:
    """Lazily create the Supabase client (service role key)"""
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise StorageError("Image storage is not configured")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def build_object_path(content_type: str, folder: str = "uploads") -> str:
    extension = ALLOWED_IMAGE_TYPES[content_type]
    return f"{folder}/{uuid.uuid4().hex}.{extension}"


def upload_image(content: bytes, content_type: str, folder: str = "uploads") -> str:
    """
    Store an image in the configured bucket

    Args:
        content: Raw file bytes (already size-checked)
        content_type: One of ALLOWED_IMAGE_TYPES
        folder: Object prefix inside the bucket

    Returns:
        Public URL of the stored object
    """
    path = build_object_path(content_type, folder)
    bucket = get_storage_client().storage.from_(settings.SUPABASE_STORAGE_BUCKET)

    bucket.upload(path, content, {"content-type": content_type})
    url = bucket.get_public_url(path)

    logger.info(f"Uploaded {len(content)} bytes to {settings.SUPABASE_STORAGE_BUCKET}/{path}")
    return url
