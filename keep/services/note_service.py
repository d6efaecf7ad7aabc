# keep/services/note_service.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.asset_detail import AssetNote
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import NoteCreate, NoteUpdate


class NoteService:
    """
    Notes attached to an asset. Only the asset's owner sees or edits them.
    """

    def __init__(self, repo: AssetDetailRepository):
        self.repo = repo

    def list_notes(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
        category: str | None = None,
    ) -> list[AssetNote]:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        return self.repo.list_notes(session, principal.id, asset_id, category)

    def create_note(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
        payload: NoteCreate,
    ) -> AssetNote:
        note = AssetNote(
            asset_id=asset_id,
            owner_id=principal.id,
            note_text=payload.note_text,
            note_category=payload.note_category,
        )
        ensure_authorized(session, Operation.CREATE, EntityType.NOTE, note, principal.id)
        return self.repo.save(session, note)

    def update_note(
        self,
        session: Session,
        principal: Profile,
        note_id: uuid.UUID,
        payload: NoteUpdate,
    ) -> AssetNote:
        note = load_authorized(session, Operation.UPDATE, EntityType.NOTE, note_id, principal.id)

        if payload.note_text is not None:
            note.note_text = payload.note_text
        if payload.note_category is not None:
            note.note_category = payload.note_category
        note.updated_at = datetime.now(timezone.utc)

        return self.repo.save(session, note)

    def delete_note(self, session: Session, principal: Profile, note_id: uuid.UUID) -> None:
        note = load_authorized(session, Operation.DELETE, EntityType.NOTE, note_id, principal.id)
        self.repo.delete(session, note)
