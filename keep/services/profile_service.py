# keep/services/profile_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from keep.core.auth import provision_profile
from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.profile import Profile
from keep.repositories.profile_repo import ProfileRepository
from keep.schemas.profile import ProfileCreate, ProfileUpdate


class ProfileService:
    """
    Business logic for Profile.

    Responsibilities:
      - idempotent profile creation for the calling principal
      - enforce app rules (no email change, no role change)
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    def get_me(self, session: Session, principal: Profile) -> Profile:
        """Return the caller's own profile."""
        return load_authorized(
            session, Operation.READ, EntityType.PROFILE, principal.id, principal.id
        )

    def create_me(
        self,
        session: Session,
        principal: Profile,
        payload: ProfileCreate,
    ) -> Profile:
        """
        First-time profile completion.

        Creating a profile that already exists is not an error: the
        existing row is returned (and completed with the given fields).

        Rules:
          - the row id is always the caller's id
          - email cannot be changed via this endpoint
        """
        if payload.email and payload.email.lower() != principal.email.lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email cannot be changed",
            )

        ensure_authorized(
            session, Operation.CREATE, EntityType.PROFILE, {"id": principal.id}, principal.id
        )
        profile = provision_profile(session, principal.id, principal.email, payload.full_name)

        if payload.full_name is not None:
            profile.full_name = payload.full_name
        if payload.avatar_url is not None:
            profile.avatar_url = payload.avatar_url

        ensure_authorized(session, Operation.UPDATE, EntityType.PROFILE, profile, principal.id)
        return self.repo.update(session, profile)

    def update_me(
        self,
        session: Session,
        principal: Profile,
        payload: ProfileUpdate,
    ) -> Profile:
        """
        Partial update for profile edits.
        """
        profile = load_authorized(
            session, Operation.UPDATE, EntityType.PROFILE, principal.id, principal.id
        )

        if payload.full_name is not None:
            profile.full_name = payload.full_name
        if payload.avatar_url is not None:
            profile.avatar_url = payload.avatar_url

        return self.repo.update(session, profile)
