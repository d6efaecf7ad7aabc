# keep/repositories/stats_repo.py
import uuid
from datetime import date, datetime

from sqlalchemy import func
from sqlmodel import Session, select

from keep.core.policy import EntityType, read_scope
from keep.models.asset import Asset
from keep.models.asset_detail import AssetInsurance, AssetNote
from keep.models.assignment import AssetAssignment
from keep.models.profile import Profile


class StatsRepository:
    """
    Read-only aggregated queries for the dashboard.

    Every query is restricted with the same read scope as the row-level
    endpoints, so totals only ever cover the caller's own inventory.
    """

    def count_by_status(self, session: Session, principal_id: uuid.UUID) -> dict[str, int]:
        stmt = (
            select(Asset.status, func.count())
            .where(read_scope(EntityType.ASSET, principal_id))
            .group_by(Asset.status)
        )
        return {status: int(count) for status, count in session.exec(stmt).all()}

    def total_value(self, session: Session, principal_id: uuid.UUID) -> float:
        stmt = select(func.coalesce(func.sum(Asset.asset_value_zar), 0.0)).where(
            read_scope(EntityType.ASSET, principal_id)
        )
        value = session.exec(stmt).one()
        return float(value or 0.0)

    def count_insured(self, session: Session, principal_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(AssetInsurance)
            .where(
                read_scope(EntityType.INSURANCE, principal_id),
                AssetInsurance.is_insured == True,  # noqa: E712
            )
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_assets_with_notes(self, session: Session, principal_id: uuid.UUID) -> int:
        stmt = select(func.count(func.distinct(AssetNote.asset_id))).where(
            read_scope(EntityType.NOTE, principal_id)
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def recent_assets(
        self,
        session: Session,
        principal_id: uuid.UUID,
        limit: int = 5,
    ) -> list[Asset]:
        stmt = (
            select(Asset)
            .where(read_scope(EntityType.ASSET, principal_id))
            .order_by(Asset.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def renewals_between(
        self,
        session: Session,
        principal_id: uuid.UUID,
        start: date,
        end: date,
    ) -> list[tuple]:
        """
        Insured assets whose renewal date falls in [start, end], soonest first.
        """
        stmt = (
            select(
                Asset.id,
                Asset.name,
                AssetInsurance.insurance_provider,
                AssetInsurance.renewal_date,
            )
            .join(AssetInsurance, AssetInsurance.asset_id == Asset.id)
            .where(
                read_scope(EntityType.ASSET, principal_id),
                read_scope(EntityType.INSURANCE, principal_id),
                AssetInsurance.is_insured == True,  # noqa: E712
                AssetInsurance.renewal_date.is_not(None),
                AssetInsurance.renewal_date >= start,
                AssetInsurance.renewal_date <= end,
            )
            .order_by(AssetInsurance.renewal_date)
        )
        return list(session.exec(stmt).all())

    def overdue_assignments(
        self,
        session: Session,
        principal_id: uuid.UUID,
        now: datetime,
    ) -> list[tuple]:
        """
        Open assignments whose due date has passed, oldest due first.
        """
        stmt = (
            select(
                AssetAssignment.id,
                Asset.id,
                Asset.name,
                Profile.full_name,
                Profile.email,
                AssetAssignment.due_date,
            )
            .join(Asset, Asset.id == AssetAssignment.asset_id)
            .join(Profile, Profile.id == AssetAssignment.assigned_to)
            .where(
                read_scope(EntityType.ASSIGNMENT, principal_id),
                AssetAssignment.return_date.is_(None),
                AssetAssignment.due_date.is_not(None),
                AssetAssignment.due_date < now,
            )
            .order_by(AssetAssignment.due_date)
        )
        return list(session.exec(stmt).all())
