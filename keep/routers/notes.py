# keep/routers/notes.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import NoteCategory, NoteCreate, NoteRead, NoteUpdate
from keep.services.note_service import NoteService

router = APIRouter(tags=["Notes"])

repo = AssetDetailRepository()
service = NoteService(repo)


@router.get("/assets/{asset_id}/notes", response_model=list[NoteRead])
def list_notes(
    asset_id: uuid.UUID,
    category: NoteCategory | None = None,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.list_notes(session, principal, asset_id, category)


@router.post(
    "/assets/{asset_id}/notes",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
)
def create_note(
    asset_id: uuid.UUID,
    payload: NoteCreate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.create_note(session, principal, asset_id, payload)


@router.patch("/notes/{note_id}", response_model=NoteRead)
def update_note(
    note_id: uuid.UUID,
    payload: NoteUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.update_note(session, principal, note_id, payload)


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    service.delete_note(session, principal, note_id)
    return None
