# keep/services/theft_report_service.py
import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.profile import Profile
from keep.models.theft_report import TheftReport
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.theft_report_repo import TheftReportRepository
from keep.schemas.theft_report import TheftReportCreate, TheftReportUpdate

logger = logging.getLogger(__name__)


class TheftReportService:
    """
    Found/stolen reports filed from the public QR page.

    Responsibilities:
      - accept reports from anyone, including anonymous visitors
      - show and triage reports only for the asset's current owner
      - purge old resolved reports (maintenance)
    """

    def __init__(self, repo: TheftReportRepository, asset_repo: AssetRepository):
        self.repo = repo
        self.asset_repo = asset_repo

    def create_report(
        self,
        session: Session,
        principal: Profile | None,
        asset_id: uuid.UUID,
        payload: TheftReportCreate,
    ) -> TheftReport:
        """
        File a report against an asset. The status always starts as
        'pending', whatever the reporter sends.
        """
        if self.asset_repo.get_by_id(session, asset_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Asset not found",
            )

        report = TheftReport(asset_id=asset_id, **payload.model_dump(), status="pending")
        principal_id = principal.id if principal else None
        ensure_authorized(session, Operation.CREATE, EntityType.THEFT_REPORT, report, principal_id)

        report = self.repo.create(session, report)
        logger.info("Theft report %s filed for asset %s", report.id, asset_id)
        return report

    def list_reports(
        self,
        session: Session,
        principal: Profile,
        status: str | None = None,
    ) -> list[TheftReport]:
        return self.repo.list_for_principal(session, principal.id, status=status)

    def list_for_asset(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
    ) -> list[TheftReport]:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        return self.repo.list_for_principal(session, principal.id, asset_id=asset_id)

    def update_report(
        self,
        session: Session,
        principal: Profile,
        report_id: uuid.UUID,
        payload: TheftReportUpdate,
    ) -> TheftReport:
        report = load_authorized(
            session, Operation.UPDATE, EntityType.THEFT_REPORT, report_id, principal.id
        )

        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "status" and value is None:
                continue
            setattr(report, field, value)

        return self.repo.update(session, report)

    def cleanup_resolved(self, session: Session, days_old: int = 365) -> int:
        """
        Delete resolved reports older than `days_old` days.

        Runs with the service-role session, outside any principal.
        """
        if days_old < 0:
            raise ValueError("days_old must be non-negative")
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        removed = self.repo.delete_resolved_before(session, cutoff)
        logger.info("Removed %d resolved theft report(s) older than %d days", removed, days_old)
        return removed
