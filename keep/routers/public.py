# keep/routers/public.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import get_optional_principal
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.assignment_repo import AssignmentRepository
from keep.repositories.theft_report_repo import TheftReportRepository
from keep.schemas.asset import PublicAssetRead
from keep.schemas.theft_report import TheftReportCreate, TheftReportReceipt
from keep.services.asset_service import AssetService
from keep.services.theft_report_service import TheftReportService

router = APIRouter(prefix="/public", tags=["Public"])

asset_repo = AssetRepository()
asset_service = AssetService(asset_repo, AssignmentRepository())
report_service = TheftReportService(TheftReportRepository(), asset_repo)


# -------- Anonymous endpoints (QR page) --------


@router.get("/assets/{asset_id}", response_model=PublicAssetRead)
def get_public_asset(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    What a stranger sees after scanning a QR code: id, name, category.
    """
    return asset_service.get_public_asset(session, asset_id)


@router.post(
    "/assets/{asset_id}/theft-reports",
    response_model=TheftReportReceipt,
    status_code=status.HTTP_201_CREATED,
)
def report_found_or_stolen(
    asset_id: uuid.UUID,
    payload: TheftReportCreate,
    session: Session = Depends(get_session),
    principal: Profile | None = Depends(get_optional_principal),
):
    """
    File a found/stolen report. No account required.
    """
    return report_service.create_report(session, principal, asset_id, payload)
