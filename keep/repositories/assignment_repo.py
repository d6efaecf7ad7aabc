# keep/repositories/assignment_repo.py
import uuid

from sqlmodel import Session, select

from keep.core.policy import EntityType, read_scope
from keep.models.assignment import AssetAssignment


class AssignmentRepository:
    """
    Data access layer for asset_assignments.

    NOTE:
      - No commits here; assigning and returning also change the asset's
        status, so the service commits both rows together.
    """

    def get_by_id(self, session: Session, assignment_id: uuid.UUID) -> AssetAssignment | None:
        return session.get(AssetAssignment, assignment_id)

    def list_for_asset(
        self,
        session: Session,
        principal_id: uuid.UUID,
        asset_id: uuid.UUID,
    ) -> list[AssetAssignment]:
        stmt = (
            select(AssetAssignment)
            .where(read_scope(EntityType.ASSIGNMENT, principal_id))
            .where(AssetAssignment.asset_id == asset_id)
            .order_by(AssetAssignment.assigned_date.desc())
        )
        return list(session.exec(stmt).all())

    def get_open_for_asset(
        self,
        session: Session,
        asset_id: uuid.UUID,
    ) -> AssetAssignment | None:
        stmt = select(AssetAssignment).where(
            AssetAssignment.asset_id == asset_id,
            AssetAssignment.return_date.is_(None),
        )
        return session.exec(stmt).first()

    def stage(self, session: Session, assignment: AssetAssignment) -> AssetAssignment:
        """
        Insert or update without committing, but ensure defaults are populated.
        """
        session.add(assignment)
        session.flush()
        session.refresh(assignment)
        return assignment
