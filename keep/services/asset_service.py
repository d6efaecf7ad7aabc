# keep/services/asset_service.py
import logging
import uuid
from datetime import datetime, timezone
from io import BytesIO

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.errors import translate_integrity_error
from keep.core.policy import (
    PUBLIC_ASSET_FIELDS,
    EntityType,
    Operation,
    ensure_authorized,
    load_authorized,
)
from keep.core.qr import generate_qr_code_image, public_asset_url
from keep.core.storage_utils import AssetStorage
from keep.models.asset import Asset
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.assignment_repo import AssignmentRepository
from keep.schemas.asset import AssetCreate, AssetSearchResult, AssetRead, AssetUpdate, PublicAssetRead

logger = logging.getLogger(__name__)

# Search weights per matched field
NAME_WEIGHT = 3.0
IDENTIFIER_WEIGHT = 2.0
DESCRIPTION_WEIGHT = 1.0

REQUIRED_FIELDS = frozenset({"name", "category", "status", "asset_condition"})


class AssetService:
    """
    Business logic for assets.

    Responsibilities:
      - owner stamping and QR payload generation on create
      - owner-only read/update/delete (via core.policy)
      - keep status consistent with the assignment workflow
      - delete cascade, including stored files
      - owner-scoped search
    """

    def __init__(self, repo: AssetRepository, assignment_repo: AssignmentRepository):
        self.repo = repo
        self.assignment_repo = assignment_repo

    # ----- Helpers -----

    @staticmethod
    def _rank(asset: Asset, terms: list[str]) -> float:
        score = 0.0
        name = asset.name.lower()
        identifiers = " ".join(
            v.lower() for v in (asset.serial_number, asset.vin_identifier) if v
        )
        description = (asset.description or "").lower()
        for term in terms:
            if term in name:
                score += NAME_WEIGHT
            if term in identifiers:
                score += IDENTIFIER_WEIGHT
            if term in description:
                score += DESCRIPTION_WEIGHT
        return score

    # ----- Queries -----

    def list_assets(
        self,
        session: Session,
        principal: Profile,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
        category: str | None = None,
    ) -> list[Asset]:
        return self.repo.list_for_principal(
            session,
            principal.id,
            skip=skip,
            limit=limit,
            status=status,
            category=category,
        )

    def search_assets(
        self,
        session: Session,
        principal: Profile,
        query: str,
        skip: int = 0,
        limit: int = 50,
    ) -> list[AssetSearchResult]:
        """
        Search the caller's assets by name, description, serial number
        and VIN. Results are ordered by relevance, then newest first.
        """
        terms = [t.lower() for t in query.split() if t.strip()]
        if not terms:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Search query cannot be empty",
            )

        candidates = self.repo.search_candidates(session, principal.id, terms)
        ranked = sorted(
            ((self._rank(asset, terms), asset) for asset in candidates),
            key=lambda pair: (pair[0], pair[1].created_at),
            reverse=True,
        )

        results: list[AssetSearchResult] = []
        for score, asset in ranked[skip : skip + limit]:
            data = AssetRead.model_validate(asset).model_dump()
            results.append(AssetSearchResult(**data, rank=score))
        return results

    def get_asset(self, session: Session, principal: Profile, asset_id: uuid.UUID) -> Asset:
        return load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)

    def get_public_asset(self, session: Session, asset_id: uuid.UUID) -> PublicAssetRead:
        """
        Restricted view for anonymous QR lookups: id, name and category only.
        """
        asset = self.repo.get_by_id(session, asset_id)
        if not asset:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Asset not found",
            )
        return PublicAssetRead(**{field: getattr(asset, field) for field in PUBLIC_ASSET_FIELDS})

    def get_qr_code_png(self, session: Session, principal: Profile, asset_id: uuid.UUID) -> BytesIO:
        asset = self.get_asset(session, principal, asset_id)
        return generate_qr_code_image(asset.qr_code or public_asset_url(asset.id))

    # ----- Mutations -----

    def create_asset(
        self,
        session: Session,
        principal: Profile,
        payload: AssetCreate,
    ) -> Asset:
        """
        Register a new asset owned by the caller.

        - Status 'assigned' can only be reached through an assignment.
        """
        if payload.status == "assigned":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="New assets cannot start as assigned; create an assignment instead",
            )

        asset = Asset(**payload.model_dump(), owner_id=principal.id)
        asset.qr_code = public_asset_url(asset.id)

        ensure_authorized(session, Operation.CREATE, EntityType.ASSET, asset, principal.id)

        try:
            return self.repo.create(session, asset)
        except IntegrityError as exc:
            session.rollback()
            raise translate_integrity_error(exc, "create asset") from exc

    def update_asset(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
        payload: AssetUpdate,
    ) -> Asset:
        """
        Partial update of an asset.

        - owner_id never changes.
        - status cannot be set to 'assigned' directly, and cannot leave
          'assigned' while an assignment is open.
        """
        asset = load_authorized(session, Operation.UPDATE, EntityType.ASSET, asset_id, principal.id)
        changes = payload.model_dump(exclude_unset=True)

        new_status = changes.get("status")
        if new_status is not None and new_status != asset.status:
            if new_status == "assigned":
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Use the assignment workflow to assign an asset",
                )
            if self.assignment_repo.get_open_for_asset(session, asset.id) is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Return the asset before changing its status",
                )

        for field, value in changes.items():
            # Required columns ignore explicit nulls
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(asset, field, value)

        asset.updated_at = datetime.now(timezone.utc)
        ensure_authorized(session, Operation.UPDATE, EntityType.ASSET, asset, principal.id)

        try:
            return self.repo.update(session, asset)
        except IntegrityError as exc:
            session.rollback()
            raise translate_integrity_error(exc, "update asset") from exc

    def delete_asset(
        self,
        session: Session,
        storage: AssetStorage,
        principal: Profile,
        asset_id: uuid.UUID,
    ) -> None:
        """
        Delete an asset with all dependent rows, then clean up Storage.

        File cleanup runs after the commit; a failure there leaves orphaned
        objects but never resurrects the rows.
        """
        asset = load_authorized(session, Operation.DELETE, EntityType.ASSET, asset_id, principal.id)
        photo_paths, document_paths = self.repo.list_file_paths(session, asset.id)

        self.repo.delete_with_dependents(session, asset)

        try:
            storage.photos.remove(photo_paths)
            storage.documents.remove(document_paths)
        except Exception:
            logger.warning(
                "Asset %s deleted but %d stored file(s) could not be removed",
                asset_id,
                len(photo_paths) + len(document_paths),
                exc_info=True,
            )
