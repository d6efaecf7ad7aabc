# keep/services/assignment_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.errors import is_unique_violation, translate_integrity_error
from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.assignment import AssetAssignment
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.assignment_repo import AssignmentRepository
from keep.repositories.profile_repo import ProfileRepository
from keep.schemas.assignment import AssignmentCreate, AssignmentReturn, AssignmentUpdate


def _already_assigned() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Asset already has an open assignment",
    )


class AssignmentService:
    """
    Business logic for handing assets out and taking them back.

    Responsibilities:
      - access follows the parent asset's current owner
      - at most one open assignment per asset
      - asset.status moves to 'assigned' / back to 'available' in the
        same transaction as the assignment row
    """

    def __init__(
        self,
        repo: AssignmentRepository,
        asset_repo: AssetRepository,
        profile_repo: ProfileRepository,
    ):
        self.repo = repo
        self.asset_repo = asset_repo
        self.profile_repo = profile_repo

    def list_for_asset(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
    ) -> list[AssetAssignment]:
        load_authorized(session, Operation.READ, EntityType.ASSET, asset_id, principal.id)
        return self.repo.list_for_asset(session, principal.id, asset_id)

    def assign(
        self,
        session: Session,
        principal: Profile,
        asset_id: uuid.UUID,
        payload: AssignmentCreate,
    ) -> AssetAssignment:
        """
        Open a new assignment on an asset the caller owns.

        Rules:
          - assignee must be an existing profile
          - retired assets cannot be assigned
          - an asset with an open assignment cannot be assigned again
        """
        assignment = AssetAssignment(
            asset_id=asset_id,
            assigned_to=payload.assigned_to,
            assigned_by=principal.id,
            due_date=payload.due_date,
        )
        ensure_authorized(session, Operation.CREATE, EntityType.ASSIGNMENT, assignment, principal.id)

        if self.profile_repo.get_by_id(session, payload.assigned_to) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assignee profile does not exist",
            )

        asset = self.asset_repo.get_by_id(session, asset_id)
        if asset.status == "retired":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Retired assets cannot be assigned",
            )
        if self.repo.get_open_for_asset(session, asset_id) is not None:
            raise _already_assigned()

        try:
            self.repo.stage(session, assignment)
            asset.status = "assigned"
            asset.updated_at = datetime.now(timezone.utc)
            self.asset_repo.stage(session, asset)
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            # Lost a race against another assign on the same asset
            if is_unique_violation(exc):
                raise _already_assigned() from exc
            raise translate_integrity_error(exc, "assign asset") from exc

        session.refresh(assignment)
        return assignment

    def update_assignment(
        self,
        session: Session,
        principal: Profile,
        assignment_id: uuid.UUID,
        payload: AssignmentUpdate,
    ) -> AssetAssignment:
        assignment = load_authorized(
            session, Operation.UPDATE, EntityType.ASSIGNMENT, assignment_id, principal.id
        )
        if assignment.return_date is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Assignment already returned",
            )

        if "due_date" in payload.model_fields_set:
            assignment.due_date = payload.due_date

        self.repo.stage(session, assignment)
        session.commit()
        session.refresh(assignment)
        return assignment

    def return_asset(
        self,
        session: Session,
        principal: Profile,
        assignment_id: uuid.UUID,
        payload: AssignmentReturn,
    ) -> AssetAssignment:
        """
        Close an open assignment and make the asset available again.
        """
        assignment = load_authorized(
            session, Operation.UPDATE, EntityType.ASSIGNMENT, assignment_id, principal.id
        )
        if assignment.return_date is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Assignment already returned",
            )

        now = datetime.now(timezone.utc)
        assignment.return_date = now
        assignment.return_condition = payload.return_condition
        self.repo.stage(session, assignment)

        asset = self.asset_repo.get_by_id(session, assignment.asset_id)
        if asset.status == "assigned":
            asset.status = "available"
            asset.updated_at = now
            self.asset_repo.stage(session, asset)

        session.commit()
        session.refresh(assignment)
        return assignment
