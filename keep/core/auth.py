# keep/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.config import get_settings
from keep.core.errors import authentication_required, is_unique_violation
from keep.database import get_session
from keep.models.profile import Profile

settings = get_settings()
logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public endpoints (QR lookup, theft reports) work for anonymous visitors.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email if the user has not
    completed their profile yet.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


def provision_profile(
    session: Session,
    principal_id: uuid.UUID,
    email: str,
    full_name: str | None = None,
) -> Profile:
    """
    Return the profile for `principal_id`, creating it if needed.

    Two concurrent first requests may both try the insert; the loser's
    duplicate-key error is swallowed and the winner's row is returned.
    """
    profile = session.get(Profile, principal_id)
    if profile is not None:
        return profile

    profile = Profile(
        id=principal_id,
        email=email,
        full_name=full_name or default_name_from_email(email),
        role="user",
    )
    session.add(profile)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if not is_unique_violation(exc):
            raise
        logger.info("Profile %s already provisioned by a concurrent request", principal_id)
        existing = session.get(Profile, principal_id)
        if existing is None:
            raise
        return existing

    session.refresh(profile)
    logger.info("Provisioned profile for %s", principal_id)
    return profile


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Profile | None:
    """
    Resolve the acting principal from a Supabase JWT.

    Flow:
      1. If no Authorization header => anonymous => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Convert 'sub' to UUID to match Profile.id type.
      4. Load the profile, provisioning it on first sign-in.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return provision_profile(session, sub_uuid, email)


def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Profile | None:
    """
    Like get_current_principal, but a token that fails verification is
    treated as anonymous instead of raising 401.

    Used on routes open to anyone, where a stale session in the visitor's
    browser must not block the request.
    """
    try:
        return get_current_principal(credentials, session)
    except HTTPException as exc:
        if exc.status_code != status.HTTP_401_UNAUTHORIZED:
            raise
        logger.info("Ignoring unusable bearer token on public route: %s", exc.detail)
        return None


def require_auth(principal: Profile | None = Depends(get_current_principal)) -> Profile:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if the request is anonymous.
    """
    if principal is None:
        raise authentication_required()
    return principal
