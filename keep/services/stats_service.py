# keep/services/stats_service.py
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from keep.models.profile import Profile
from keep.repositories.stats_repo import StatsRepository
from keep.schemas.common import to_utc
from keep.schemas.stats import (
    AssetStatistics,
    OverdueAssignment,
    RecentAssetSummary,
    RenewalReminder,
)

MAX_RENEWAL_WINDOW_DAYS = 365


class StatsService:
    """
    Orchestrates the dashboard aggregates for the caller's own inventory.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_asset_statistics(self, session: Session, principal: Profile) -> AssetStatistics:
        by_status = self.repo.count_by_status(session, principal.id)

        recent_assets = [
            RecentAssetSummary(
                id=a.id,
                name=a.name,
                category=a.category,
                status=a.status,
                created_at=a.created_at,
            )
            for a in self.repo.recent_assets(session, principal.id, limit=5)
        ]

        return AssetStatistics(
            total_assets=sum(by_status.values()),
            available_assets=by_status.get("available", 0),
            assigned_assets=by_status.get("assigned", 0),
            maintenance_assets=by_status.get("maintenance", 0),
            retired_assets=by_status.get("retired", 0),
            total_value=self.repo.total_value(session, principal.id),
            insured_assets=self.repo.count_insured(session, principal.id),
            assets_with_notes=self.repo.count_assets_with_notes(session, principal.id),
            recent_assets=recent_assets,
        )

    def get_renewal_reminders(
        self,
        session: Session,
        principal: Profile,
        days_ahead: int = 30,
    ) -> list[RenewalReminder]:
        if not 0 <= days_ahead <= MAX_RENEWAL_WINDOW_DAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"days_ahead must be between 0 and {MAX_RENEWAL_WINDOW_DAYS}",
            )

        today = datetime.now(timezone.utc).date()
        rows = self.repo.renewals_between(
            session, principal.id, today, today + timedelta(days=days_ahead)
        )

        reminders: list[RenewalReminder] = []
        for asset_id, name, provider, renewal_date in rows:
            reminders.append(
                RenewalReminder(
                    asset_id=asset_id,
                    asset_name=name,
                    insurance_provider=provider,
                    renewal_date=renewal_date,
                    days_until_renewal=(renewal_date - today).days,
                )
            )
        return reminders

    def get_overdue_assignments(self, session: Session, principal: Profile) -> list[OverdueAssignment]:
        now = datetime.now(timezone.utc)
        rows = self.repo.overdue_assignments(session, principal.id, now)

        overdue: list[OverdueAssignment] = []
        for assignment_id, asset_id, asset_name, full_name, email, due_date in rows:
            due_date = to_utc(due_date)
            overdue.append(
                OverdueAssignment(
                    assignment_id=assignment_id,
                    asset_id=asset_id,
                    asset_name=asset_name,
                    assigned_to_name=full_name,
                    assigned_to_email=email,
                    due_date=due_date,
                    days_overdue=(now - due_date).days,
                )
            )
        return overdue
