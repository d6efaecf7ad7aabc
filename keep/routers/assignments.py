# keep/routers/assignments.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.assignment_repo import AssignmentRepository
from keep.repositories.profile_repo import ProfileRepository
from keep.schemas.assignment import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentReturn,
    AssignmentUpdate,
)
from keep.services.assignment_service import AssignmentService

router = APIRouter(tags=["Assignments"])

repo = AssignmentRepository()
asset_repo = AssetRepository()
profile_repo = ProfileRepository()
service = AssignmentService(repo, asset_repo, profile_repo)


@router.get("/assets/{asset_id}/assignments", response_model=list[AssignmentRead])
def list_assignments(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Assignment history of an asset, newest first.
    """
    return service.list_for_asset(session, principal, asset_id)


@router.post(
    "/assets/{asset_id}/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_asset(
    asset_id: uuid.UUID,
    payload: AssignmentCreate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Hand an asset to a profile.

    - 409 if the asset already has an open assignment or is retired.
    - The asset's status becomes 'assigned'.
    """
    return service.assign(session, principal, asset_id, payload)


@router.patch("/assignments/{assignment_id}", response_model=AssignmentRead)
def update_assignment(
    assignment_id: uuid.UUID,
    payload: AssignmentUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.update_assignment(session, principal, assignment_id, payload)


@router.post("/assignments/{assignment_id}/return", response_model=AssignmentRead)
def return_asset(
    assignment_id: uuid.UUID,
    payload: AssignmentReturn,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Close the assignment; the asset becomes 'available' again.
    """
    return service.return_asset(session, principal, assignment_id, payload)
