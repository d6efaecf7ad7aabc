# keep/repositories/theft_report_repo.py
import uuid
from datetime import datetime

from sqlmodel import Session, select

from keep.core.policy import EntityType, read_scope
from keep.models.theft_report import TheftReport


class TheftReportRepository:
    """
    Data access layer for theft_reports.
    """

    def get_by_id(self, session: Session, report_id: uuid.UUID) -> TheftReport | None:
        return session.get(TheftReport, report_id)

    def list_for_principal(
        self,
        session: Session,
        principal_id: uuid.UUID | None,
        asset_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> list[TheftReport]:
        """Reports on assets the principal currently owns, newest first."""
        stmt = select(TheftReport).where(read_scope(EntityType.THEFT_REPORT, principal_id))
        if asset_id is not None:
            stmt = stmt.where(TheftReport.asset_id == asset_id)
        if status is not None:
            stmt = stmt.where(TheftReport.status == status)
        stmt = stmt.order_by(TheftReport.created_at.desc())
        return list(session.exec(stmt).all())

    def create(self, session: Session, report: TheftReport) -> TheftReport:
        session.add(report)
        session.commit()
        session.refresh(report)
        return report

    def update(self, session: Session, report: TheftReport) -> TheftReport:
        session.add(report)
        session.commit()
        session.refresh(report)
        return report

    def delete_resolved_before(self, session: Session, cutoff: datetime) -> int:
        """
        Remove resolved reports created before `cutoff`. Service-role only:
        this is not scoped to a principal.
        """
        stmt = select(TheftReport).where(
            TheftReport.status == "resolved",
            TheftReport.created_at < cutoff,
        )
        rows = session.exec(stmt).all()
        for row in rows:
            session.delete(row)
        session.commit()
        return len(rows)
