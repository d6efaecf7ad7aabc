# keep/services/attachment_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.config import get_settings
from keep.core.errors import translate_integrity_error, translate_storage_error, validation_failed
from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.core.storage_utils import (
    DOCUMENT_CONTENT_TYPES,
    PHOTO_CONTENT_TYPES,
    AssetStorage,
    StorageBucket,
    build_object_path,
    ensure_owner_prefix,
    validate_upload,
)
from keep.models.asset_detail import AssetDocument, AssetPhoto
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import DocumentDownload, PhotoUpdate
from keep.schemas.common import optional_text, required_text

settings = get_settings()
logger = logging.getLogger(__name__)


class AttachmentService:
    """
    Photos (public bucket) and documents (private bucket) of an asset.

    Upload order:
      1. policy check on the intended row
      2. MIME/size validation
      3. object upload under "<owner>/<asset>/"
      4. metadata insert

    A failed upload leaves no row. A failed insert after a successful
    upload leaves an orphaned object, which is logged.
    """

    def __init__(self, repo: AssetDetailRepository):
        self.repo = repo

    # ----- Helpers -----

    def _store(
        self,
        bucket: StorageBucket,
        principal: Profile,
        asset_id: uuid.UUID,
        file_bytes: bytes,
        content_type: str,
        ext: str,
    ) -> str:
        path = build_object_path(principal.id, asset_id, ext)
        ensure_owner_prefix(path, principal.id)
        try:
            bucket.upload(path, file_bytes, content_type)
        except Exception as exc:
            raise translate_storage_error(exc, f"upload to {bucket.name}") from exc
        return path

    def _insert(self, session: Session, bucket: StorageBucket, row, operation: str):
        try:
            return self.repo.save(session, row)
        except IntegrityError as exc:
            session.rollback()
            logger.warning(
                "Metadata insert failed; orphaned object %s left in %s",
                row.file_path,
                bucket.name,
            )
            raise translate_integrity_error(exc, operation) from exc

    def _remove(self, bucket: StorageBucket, principal: Profile, path: str) -> None:
        ensure_owner_prefix(path, principal.id)
        try:
            bucket.remove([path])
        except Exception as exc:
            raise translate_storage_error(exc, f"delete from {bucket.name}") from exc

    # ----- Photos -----

    def list_photos(self, session: Session, principal: Profile, asset_id: uuid.UUID) -> list[AssetPhoto]:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        return self.repo.list_photos(session, principal.id, asset_id)

    def upload_photo(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        asset_id: uuid.UUID,
        file_bytes: bytes,
        content_type: str | None,
        description: str | None = None,
        is_primary: bool = False,
    ) -> AssetPhoto:
        """
        Store an image and register it. The first photo of an asset, or
        one uploaded with is_primary, becomes the primary photo.
        """
        draft = {"asset_id": asset_id, "owner_id": principal.id}
        ensure_authorized(session, Operation.CREATE, EntityType.PHOTO, draft, principal.id)

        ext = validate_upload(
            content_type,
            file_bytes,
            PHOTO_CONTENT_TYPES,
            "Invalid file type. Only JPEG, PNG, and WebP images are allowed.",
        )
        if description is not None and len(description) > 500:
            raise validation_failed(["Photo description must be at most 500 characters"])

        make_primary = is_primary or not self.repo.list_photos(session, principal.id, asset_id)

        path = self._store(storage.photos, principal, asset_id, file_bytes, content_type, ext)

        if make_primary:
            self.repo.clear_primary(session, asset_id)

        photo = AssetPhoto(
            asset_id=asset_id,
            owner_id=principal.id,
            photo_url=storage.photos.public_url(path),
            file_path=path,
            photo_description=optional_text(description),
            is_primary=make_primary,
            file_size=len(file_bytes),
        )
        return self._insert(session, storage.photos, photo, "save photo")

    def update_photo(
        self,
        session: Session,
        principal: Profile,
        photo_id: uuid.UUID,
        payload: PhotoUpdate,
    ) -> AssetPhoto:
        photo = load_authorized(session, Operation.UPDATE, EntityType.PHOTO, photo_id, principal.id)

        if "photo_description" in payload.model_fields_set:
            photo.photo_description = payload.photo_description
        if payload.is_primary:
            self.repo.clear_primary(session, photo.asset_id, keep_id=photo.id)
            photo.is_primary = True
        elif payload.is_primary is False:
            photo.is_primary = False

        return self.repo.save(session, photo)

    def delete_photo(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        photo_id: uuid.UUID,
    ) -> None:
        photo = load_authorized(session, Operation.DELETE, EntityType.PHOTO, photo_id, principal.id)
        self._remove(storage.photos, principal, photo.file_path)
        self.repo.delete(session, photo)

    # ----- Documents -----

    def list_documents(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
    ) -> list[AssetDocument]:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        return self.repo.list_documents(session, principal.id, asset_id)

    def upload_document(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        asset_id: uuid.UUID,
        file_bytes: bytes,
        content_type: str | None,
        document_name: str,
        document_type: str,
    ) -> AssetDocument:
        draft = {"asset_id": asset_id, "owner_id": principal.id}
        ensure_authorized(session, Operation.CREATE, EntityType.DOCUMENT, draft, principal.id)

        ext = validate_upload(
            content_type,
            file_bytes,
            DOCUMENT_CONTENT_TYPES,
            "Invalid file type. Only PDF, DOC, DOCX, images, and text files are allowed.",
        )
        try:
            document_name = required_text(document_name)
        except ValueError:
            raise validation_failed(["Document name is required"])

        path = self._store(storage.documents, principal, asset_id, file_bytes, content_type, ext)

        document = AssetDocument(
            asset_id=asset_id,
            owner_id=principal.id,
            document_name=document_name[:255],
            document_type=document_type,
            file_path=path,
            content_type=content_type,
            file_size=len(file_bytes),
        )
        return self._insert(session, storage.documents, document, "save document")

    def get_download_url(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        document_id: uuid.UUID,
    ) -> DocumentDownload:
        document = load_authorized(
            session, Operation.READ, EntityType.DOCUMENT, document_id, principal.id
        )
        expires_in = settings.SIGNED_URL_TTL_SECONDS
        try:
            url = storage.documents.signed_url(document.file_path, expires_in)
        except Exception as exc:
            raise translate_storage_error(exc, "sign document url") from exc
        return DocumentDownload(url=url, expires_in=expires_in)

    def delete_document(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        document_id: uuid.UUID,
    ) -> None:
        document = load_authorized(
            session, Operation.DELETE, EntityType.DOCUMENT, document_id, principal.id
        )
        self._remove(storage.documents, principal, document.file_path)
        self.repo.delete(session, document)
