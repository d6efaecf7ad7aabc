# keep/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.stats_repo import StatsRepository
from keep.schemas.stats import AssetStatistics, OverdueAssignment, RenewalReminder
from keep.services.stats_service import StatsService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

repo = StatsRepository()
service = StatsService(repo)


@router.get("/stats", response_model=AssetStatistics)
def get_asset_statistics(
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Totals for the caller's inventory: counts per status, total value,
    insured assets, assets with notes and the five newest assets.
    """
    return service.get_asset_statistics(session, principal)


@router.get("/renewals", response_model=list[RenewalReminder])
def get_renewal_reminders(
    days_ahead: int = 30,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Insurance renewals due within the next `days_ahead` days (0 to 365).
    """
    return service.get_renewal_reminders(session, principal, days_ahead)


@router.get("/overdue-assignments", response_model=list[OverdueAssignment])
def get_overdue_assignments(
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.get_overdue_assignments(session, principal)
