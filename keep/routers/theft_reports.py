# keep/routers/theft_reports.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.theft_report_repo import TheftReportRepository
from keep.schemas.theft_report import TheftReportRead, TheftReportStatus, TheftReportUpdate
from keep.services.theft_report_service import TheftReportService

router = APIRouter(tags=["Theft Reports"])

repo = TheftReportRepository()
asset_repo = AssetRepository()
service = TheftReportService(repo, asset_repo)


@router.get("/theft-reports", response_model=list[TheftReportRead])
def list_theft_reports(
    status_filter: TheftReportStatus | None = Query(None, alias="status"),
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Every report filed against the caller's assets, newest first.
    """
    return service.list_reports(session, principal, status=status_filter)


@router.get("/assets/{asset_id}/theft-reports", response_model=list[TheftReportRead])
def list_asset_theft_reports(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.list_for_asset(session, principal, asset_id)


@router.patch("/theft-reports/{report_id}", response_model=TheftReportRead)
def update_theft_report(
    report_id: uuid.UUID,
    payload: TheftReportUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Triage a report (pending -> resolved / dismissed). Owner only.
    """
    return service.update_report(session, principal, report_id, payload)
