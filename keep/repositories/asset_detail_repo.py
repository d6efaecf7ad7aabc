# keep/repositories/asset_detail_repo.py
import uuid

from sqlmodel import Session, select

from keep.core.policy import EntityType, read_scope
from keep.models.asset_detail import AssetDocument, AssetInsurance, AssetNote, AssetPhoto


class AssetDetailRepository:
    """
    Data access layer for notes, insurance, documents and photos.

    All four tables carry a stamped owner_id, so reads are filtered on it.
    """

    # ----- Generic -----

    def get(self, session: Session, model: type, row_id: uuid.UUID):
        return session.get(model, row_id)

    def save(self, session: Session, row):
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def delete(self, session: Session, row) -> None:
        session.delete(row)
        session.commit()

    # ----- Notes -----

    def list_notes(
        self,
        session: Session,
        principal_id: uuid.UUID,
        asset_id: uuid.UUID,
        category: str | None = None,
    ) -> list[AssetNote]:
        stmt = (
            select(AssetNote)
            .where(read_scope(EntityType.NOTE, principal_id))
            .where(AssetNote.asset_id == asset_id)
        )
        if category is not None:
            stmt = stmt.where(AssetNote.note_category == category)
        stmt = stmt.order_by(AssetNote.created_at.desc())
        return list(session.exec(stmt).all())

    # ----- Insurance -----

    def get_insurance(
        self,
        session: Session,
        principal_id: uuid.UUID,
        asset_id: uuid.UUID,
    ) -> AssetInsurance | None:
        stmt = select(AssetInsurance).where(
            read_scope(EntityType.INSURANCE, principal_id),
            AssetInsurance.asset_id == asset_id,
        )
        return session.exec(stmt).first()

    # ----- Photos -----

    def list_photos(
        self,
        session: Session,
        principal_id: uuid.UUID,
        asset_id: uuid.UUID,
    ) -> list[AssetPhoto]:
        stmt = (
            select(AssetPhoto)
            .where(read_scope(EntityType.PHOTO, principal_id))
            .where(AssetPhoto.asset_id == asset_id)
            .order_by(AssetPhoto.is_primary.desc(), AssetPhoto.created_at)
        )
        return list(session.exec(stmt).all())

    def clear_primary(self, session: Session, asset_id: uuid.UUID, keep_id: uuid.UUID | None = None) -> None:
        """Unset the primary flag on every photo of the asset except `keep_id` (no commit)."""
        stmt = select(AssetPhoto).where(
            AssetPhoto.asset_id == asset_id,
            AssetPhoto.is_primary == True,  # noqa: E712
        )
        for photo in session.exec(stmt).all():
            if photo.id != keep_id:
                photo.is_primary = False
                session.add(photo)

    # ----- Documents -----

    def list_documents(
        self,
        session: Session,
        principal_id: uuid.UUID,
        asset_id: uuid.UUID,
    ) -> list[AssetDocument]:
        stmt = (
            select(AssetDocument)
            .where(read_scope(EntityType.DOCUMENT, principal_id))
            .where(AssetDocument.asset_id == asset_id)
            .order_by(AssetDocument.created_at.desc())
        )
        return list(session.exec(stmt).all())
