# keep/repositories/asset_repo.py
import uuid

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from keep.core.policy import EntityType, read_scope
from keep.models.asset import Asset, Category
from keep.models.asset_detail import AssetDocument, AssetInsurance, AssetNote, AssetPhoto
from keep.models.assignment import AssetAssignment
from keep.models.theft_report import TheftReport

# Tables that hang off an asset and go away with it
DEPENDENT_MODELS = (
    AssetAssignment,
    AssetNote,
    AssetInsurance,
    AssetDocument,
    AssetPhoto,
    TheftReport,
)


class AssetRepository:
    """
    Data access layer for Asset.

    - Pure DB operations (CRUD + queries).
    - Every list query is limited to rows the principal may read.
    """

    def get_by_id(self, session: Session, asset_id: uuid.UUID) -> Asset | None:
        return session.get(Asset, asset_id)

    def list_for_principal(
        self,
        session: Session,
        principal_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
        category: str | None = None,
    ) -> list[Asset]:
        stmt = select(Asset).where(read_scope(EntityType.ASSET, principal_id))
        if status is not None:
            stmt = stmt.where(Asset.status == status)
        if category is not None:
            stmt = stmt.where(Asset.category == category)
        stmt = stmt.order_by(Asset.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def search_candidates(
        self,
        session: Session,
        principal_id: uuid.UUID,
        terms: list[str],
    ) -> list[Asset]:
        """
        Assets where every term appears (case-insensitive) in at least one
        of name, description, serial number or VIN. Ranking happens in the
        service.
        """
        searchable = (
            Asset.name,
            Asset.description,
            Asset.serial_number,
            Asset.vin_identifier,
        )
        per_term = [
            or_(*(col.icontains(term, autoescape=True) for col in searchable))
            for term in terms
        ]
        stmt = (
            select(Asset)
            .where(read_scope(EntityType.ASSET, principal_id))
            .where(and_(*per_term))
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, asset: Asset) -> Asset:
        session.add(asset)
        session.commit()
        session.refresh(asset)
        return asset

    def update(self, session: Session, asset: Asset) -> Asset:
        session.add(asset)
        session.commit()
        session.refresh(asset)
        return asset

    def stage(self, session: Session, asset: Asset) -> Asset:
        """
        Add changes without committing; used when the asset is updated in
        the same transaction as an assignment.
        """
        session.add(asset)
        session.flush()
        return asset

    def list_file_paths(self, session: Session, asset_id: uuid.UUID) -> tuple[list[str], list[str]]:
        """Stored object paths of (photos, documents) for an asset."""
        photo_paths = session.exec(
            select(AssetPhoto.file_path).where(AssetPhoto.asset_id == asset_id)
        ).all()
        document_paths = session.exec(
            select(AssetDocument.file_path).where(AssetDocument.asset_id == asset_id)
        ).all()
        return list(photo_paths), list(document_paths)

    def delete_with_dependents(self, session: Session, asset: Asset) -> None:
        """
        Delete an asset and every row that references it in one transaction.

        Postgres would cascade on its own; deleting explicitly keeps the
        behaviour identical on engines without enforced foreign keys.
        """
        for model in DEPENDENT_MODELS:
            rows = session.exec(select(model).where(model.asset_id == asset.id)).all()
            for row in rows:
                session.delete(row)
        session.flush()
        session.delete(asset)
        session.commit()


class CategoryRepository:
    """
    Data access layer for Category.
    """

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def list_visible(self, session: Session, principal_id: uuid.UUID) -> list[Category]:
        """Own categories plus global defaults, ordered by name."""
        stmt = (
            select(Category)
            .where(read_scope(EntityType.CATEGORY, principal_id))
            .order_by(Category.name)
        )
        return list(session.exec(stmt).all())

    def get_by_owner_and_name(
        self,
        session: Session,
        owner_id: uuid.UUID | None,
        name: str,
    ) -> Category | None:
        if owner_id is None:
            owner_clause = Category.owner_id.is_(None)
        else:
            owner_clause = Category.owner_id == owner_id
        stmt = select(Category).where(owner_clause, Category.name == name)
        return session.exec(stmt).first()

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete(self, session: Session, category: Category) -> None:
        session.delete(category)
        session.commit()
