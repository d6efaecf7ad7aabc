# keep/routers/documents.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.core.storage_utils import AssetStorage, get_storage
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import DocumentDownload, DocumentRead, DocumentType
from keep.services.attachment_service import AttachmentService

router = APIRouter(tags=["Documents"])

repo = AssetDetailRepository()
service = AttachmentService(repo)


@router.get("/assets/{asset_id}/documents", response_model=list[DocumentRead])
def list_documents(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.list_documents(session, principal, asset_id)


@router.post(
    "/assets/{asset_id}/documents",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a document for an asset",
)
def upload_document(
    asset_id: uuid.UUID,
    file: UploadFile = File(...),
    document_name: str = Form(..., max_length=255),
    document_type: DocumentType = Form(...),
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    """
    Upload a file to the private document bucket.

    - Accepts PDF, DOC, DOCX, JPEG, PNG and plain text up to 10MB.
    - Download through /documents/{id}/download.
    """
    file_bytes = file.file.read()
    return service.upload_document(
        session=session,
        storage=storage,
        principal=principal,
        asset_id=asset_id,
        file_bytes=file_bytes,
        content_type=file.content_type,
        document_name=document_name,
        document_type=document_type,
    )


@router.get("/documents/{document_id}/download", response_model=DocumentDownload)
def download_document(
    document_id: uuid.UUID,
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    """
    Short-lived signed URL for a private document.
    """
    return service.get_download_url(session, storage, principal, document_id)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: uuid.UUID,
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    service.delete_document(session, storage, principal, document_id)
    return None
