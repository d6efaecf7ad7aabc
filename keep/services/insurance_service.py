# keep/services/insurance_service.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.errors import access_denied, translate_integrity_error
from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.asset_detail import AssetInsurance
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import InsuranceUpsert


class InsuranceService:
    """
    One insurance record per (asset, owner).

    A missing record is reported with the same 403 as a foreign one.
    """

    def __init__(self, repo: AssetDetailRepository):
        self.repo = repo

    def _load(self, session: Session, principal: Profile, asset_id: uuid.UUID) -> AssetInsurance:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        insurance = self.repo.get_insurance(session, principal.id, asset_id)
        if insurance is None:
            raise access_denied()
        return insurance

    def get_insurance(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
    ) -> AssetInsurance:
        insurance = self._load(session, principal, asset_id)
        ensure_authorized(session, Operation.READ, EntityType.INSURANCE, insurance, principal.id)
        return insurance

    def upsert_insurance(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
        payload: InsuranceUpsert,
    ) -> AssetInsurance:
        """
        Create the record on first save, replace its values afterwards.
        """
        insurance = self.repo.get_insurance(session, principal.id, asset_id)

        if insurance is None:
            insurance = AssetInsurance(asset_id=asset_id, owner_id=principal.id)
            operation = Operation.CREATE
        else:
            operation = Operation.UPDATE

        for field, value in payload.model_dump().items():
            setattr(insurance, field, value)
        insurance.updated_at = datetime.now(timezone.utc)

        ensure_authorized(session, operation, EntityType.INSURANCE, insurance, principal.id)

        try:
            return self.repo.save(session, insurance)
        except IntegrityError as exc:
            session.rollback()
            raise translate_integrity_error(exc, "save insurance") from exc

    def delete_insurance(self, session: Session, principal: Profile, asset_id: uuid.UUID) -> None:
        insurance = self._load(session, principal, asset_id)
        ensure_authorized(session, Operation.DELETE, EntityType.INSURANCE, insurance, principal.id)
        self.repo.delete(session, insurance)
