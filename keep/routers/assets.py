# keep/routers/assets.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from keep.core.auth import require_auth
from keep.core.storage_utils import AssetStorage, get_storage
from keep.database import get_session
from keep.models.profile import Profile
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.assignment_repo import AssignmentRepository
from keep.schemas.asset import (
    AssetCreate,
    AssetRead,
    AssetSearchResult,
    AssetStatus,
    AssetUpdate,
)
from keep.services.asset_service import AssetService

router = APIRouter(prefix="/assets", tags=["Assets"])

repo = AssetRepository()
assignment_repo = AssignmentRepository()
service = AssetService(repo, assignment_repo)


@router.get("", response_model=list[AssetRead])
def list_assets(
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    status_filter: AssetStatus | None = Query(None, alias="status"),
    category: str | None = None,
):
    """
    List the caller's assets, newest first.

    Optional filters: status, category.
    """
    return service.list_assets(
        session, principal, skip=skip, limit=limit, status=status_filter, category=category
    )


@router.get("/search", response_model=list[AssetSearchResult])
def search_assets(
    q: str = Query(..., min_length=1, max_length=200),
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    Term search over name, description, serial number and VIN.

    Matches in the name weigh most, then identifiers, then description.
    """
    return service.search_assets(session, principal, q, skip=skip, limit=limit)


@router.get("/{asset_id}", response_model=AssetRead)
def get_asset(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.get_asset(session, principal, asset_id)


@router.get(
    "/{asset_id}/qr-code.png",
    response_class=StreamingResponse,
    summary="QR code pointing at the public asset page",
)
def get_asset_qr_code(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    image = service.get_qr_code_png(session, principal, asset_id)
    return StreamingResponse(image, media_type="image/png")


@router.post(
    "",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
)
def create_asset(
    payload: AssetCreate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    """
    Register an asset owned by the caller.

    - owner_id is taken from the token.
    - qr_code is generated from the new id.
    """
    return service.create_asset(session, principal, payload)


@router.patch("/{asset_id}", response_model=AssetRead)
def update_asset(
    asset_id: uuid.UUID,
    payload: AssetUpdate,
    session: Session = Depends(get_session),
    principal: Profile = Depends(require_auth),
):
    return service.update_asset(session, principal, asset_id, payload)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    asset_id: uuid.UUID,
    session: Session = Depends(get_session),
    storage: AssetStorage = Depends(get_storage),
    principal: Profile = Depends(require_auth),
):
    """
    Delete the asset with its assignments, notes, insurance, photos,
    documents and theft reports. Stored files are removed as well.
    """
    service.delete_asset(session, storage, principal, asset_id)
    return None
