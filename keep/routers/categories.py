# keep/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_repo import CategoryRepository
from keep.schemas.asset import CategoryCreate, CategoryRead, CategoryUpdate
from keep.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)


@router.get("", response_model=list[CategoryRead])
def list_categories(
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    The caller's own categories plus the shared defaults, by name.
    """
    return service.list_categories(session, principal)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.create_category(session, principal, payload)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Rename / describe one of the caller's categories.
    Shared defaults cannot be changed.
    """
    return service.update_category(session, principal, category_id, payload)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    service.delete_category(session, principal, category_id)
    return None
