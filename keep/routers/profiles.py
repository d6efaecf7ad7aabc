# keep/routers/profiles.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.profile_repo import ProfileRepository
from keep.schemas.profile import ProfileCreate, ProfileRead, ProfileUpdate
from keep.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])

repo = ProfileRepository()
service = ProfileService(repo)


@router.get("/me", response_model=ProfileRead)
def get_me(
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Return the authenticated principal's profile.
    """
    return service.get_me(session, principal)


@router.post(
    "/me",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
)
def create_me(
    payload: ProfileCreate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Create (or complete) the caller's profile.

    Safe to call repeatedly: an existing profile is returned, never duplicated.
    """
    return service.create_me(session, principal, payload)


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Update full_name / avatar_url. Email and role are not editable here.
    """
    return service.update_me(session, principal, payload)
