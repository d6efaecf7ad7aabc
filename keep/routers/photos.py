# keep/routers/photos.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.core.storage_utils import AssetStorage, get_storage
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import PhotoRead, PhotoUpdate
from keep.services.attachment_service import AttachmentService

router = APIRouter(tags=["Photos"])

repo = AssetDetailRepository()
service = AttachmentService(repo)


@router.get("/assets/{asset_id}/photos", response_model=list[PhotoRead])
def list_photos(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Photos of an asset, primary photo first.
    """
    return service.list_photos(session, principal, asset_id)


@router.post(
    "/assets/{asset_id}/photos",
    response_model=PhotoRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a photo for an asset",
)
def upload_photo(
    asset_id: uuid.UUID,
    file: UploadFile = File(...),
    description: str | None = Form(None),
    is_primary: bool = Form(False),
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    """
    Upload an image to the public photo bucket.

    - Accepts JPEG, PNG, WEBP up to 10MB.
    - The first photo of an asset becomes primary automatically.
    """
    file_bytes = file.file.read()
    return service.upload_photo(
        session=session,
        storage=storage,
        principal=principal,
        asset_id=asset_id,
        file_bytes=file_bytes,
        content_type=file.content_type,
        description=description,
        is_primary=is_primary,
    )


@router.patch("/photos/{photo_id}", response_model=PhotoRead)
def update_photo(
    photo_id: uuid.UUID,
    payload: PhotoUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Change the description, or make this the asset's primary photo.
    """
    return service.update_photo(session, principal, photo_id, payload)


@router.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(
    photo_id: uuid.UUID,
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    """
    Remove the stored image, then its metadata row.
    """
    service.delete_photo(session, storage, principal, photo_id)
    return None
