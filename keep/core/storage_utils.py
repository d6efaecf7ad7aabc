# keep/core/storage_utils.py
import logging
import uuid
from functools import lru_cache

from fastapi import HTTPException, status

from keep.core.config import get_settings
from keep.core.errors import access_denied
from keep.core.supabase_client import supabase_admin

settings = get_settings()
logger = logging.getLogger(__name__)

PHOTO_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

DOCUMENT_CONTENT_TYPES: dict[str, str] = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "text/plain": "txt",
}


class StorageBucket:
    """
    Thin wrapper around one Supabase Storage bucket.

    The Supabase client is created on first use so importing this module
    does not require storage credentials.
    """

    def __init__(self, name: str, public: bool):
        self.name = name
        self.public = public

    @property
    def _bucket(self):
        return supabase_admin().storage.from_(self.name)

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> None:
        """
        Upload raw bytes to `path`. Existing objects are never overwritten.

        Raises:
            Any exception raised by the Supabase client if upload fails.
        """
        self._bucket.upload(
            path,
            file_bytes,
            {"content-type": content_type, "upsert": "false"},
        )

    def public_url(self, path: str) -> str:
        return self._bucket.get_public_url(path)

    def signed_url(self, path: str, expires_in: int) -> str:
        """
        Short-lived download link for a private object.
        """
        result = self._bucket.create_signed_url(path, expires_in)
        # storage3 has returned both spellings across releases
        return result.get("signedURL") or result.get("signedUrl")

    def remove(self, paths: list[str]) -> None:
        """
        Delete objects by path. The Supabase client expects a list.
        """
        if paths:
            self._bucket.remove(paths)


class AssetStorage:
    """
    The two buckets used by asset photos and documents.
    """

    def __init__(self, photos: StorageBucket, documents: StorageBucket):
        self.photos = photos
        self.documents = documents


@lru_cache
def get_storage() -> AssetStorage:
    """
    FastAPI dependency returning the configured buckets.
    """
    return AssetStorage(
        photos=StorageBucket(settings.PHOTO_BUCKET, public=True),
        documents=StorageBucket(settings.DOCUMENT_BUCKET, public=False),
    )


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "pdf")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"


def build_object_path(owner_id: uuid.UUID, asset_id: uuid.UUID, ext: str) -> str:
    """
    Path pattern:
        <owner_id>/<asset_id>/<uuid>.<ext>

    The first folder is always the owner's id; bucket policies and
    `ensure_owner_prefix` both rely on it.
    """
    return f"{owner_id}/{asset_id}/{generate_filename(ext)}"


def ensure_owner_prefix(path: str, owner_id: uuid.UUID) -> None:
    """
    A principal may only write or delete objects under their own folder.
    """
    folder = path.split("/", 1)[0]
    if folder != str(owner_id):
        raise access_denied()


def validate_upload(
    content_type: str | None,
    file_bytes: bytes,
    allowed: dict[str, str],
    type_message: str,
) -> str:
    """
    Check MIME type and size before anything is uploaded.

    Returns:
        The file extension to use for the stored object.
    """
    if not content_type or content_type not in allowed:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=type_message,
        )

    if len(file_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File is too large. Maximum size is 10MB.",
        )

    if not file_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )

    return allowed[content_type]
