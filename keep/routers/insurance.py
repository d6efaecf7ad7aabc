# keep/routers/insurance.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_detail_repo import AssetDetailRepository
from keep.schemas.asset_detail import InsuranceRead, InsuranceUpsert
from keep.services.insurance_service import InsuranceService

router = APIRouter(prefix="/assets/{asset_id}/insurance", tags=["Insurance"])

repo = AssetDetailRepository()
service = InsuranceService(repo)


@router.get("", response_model=InsuranceRead)
def get_insurance(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.get_insurance(session, principal, asset_id)


@router.put("", response_model=InsuranceRead)
def upsert_insurance(
    asset_id: uuid.UUID,
    payload: InsuranceUpsert,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Create or replace the insurance record of an asset.

    - insurance_provider is required when is_insured is true.
    """
    return service.upsert_insurance(session, principal, asset_id, payload)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_insurance(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    service.delete_insurance(session, principal, asset_id)
    return None
