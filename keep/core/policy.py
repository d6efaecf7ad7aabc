# keep/core/policy.py
"""
Ownership-based authorization for every table.

This module is the single place where "who may do what" is decided:

    Entity                 create                 read              update        delete
    ---------------------  ---------------------  ----------------  ------------  -------
    profiles               id == requester        own row           own row       never
    assets                 owner == requester     owner             owner         owner
    categories             owner == requester     owner or global   owner         owner
    asset_assignments      owns parent asset      owns parent       owns parent   never
    notes/insurance/       owner == requester     owner             owner         owner
    documents/photos       AND owns parent asset
    theft_reports          anyone (anonymous ok)  owns parent       owns parent   never

Ownership is read from the row's owner_id column, except for
assignments and theft reports whose owner is always the *current* owner
of the parent asset (live lookup).

Everything fails closed: unknown parent, missing owner, missing record or
anonymous requester => DENY (except the public theft report create path).
"""

import logging
import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Any

from sqlalchemy import false, or_
from sqlmodel import Session, select

from keep.core.errors import access_denied
from keep.models.asset import Asset, Category
from keep.models.asset_detail import AssetDocument, AssetInsurance, AssetNote, AssetPhoto
from keep.models.assignment import AssetAssignment
from keep.models.profile import Profile
from keep.models.theft_report import TheftReport

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class EntityType(str, Enum):
    PROFILE = "profiles"
    ASSET = "assets"
    CATEGORY = "categories"
    ASSIGNMENT = "asset_assignments"
    NOTE = "asset_notes"
    INSURANCE = "asset_insurance"
    DOCUMENT = "asset_documents"
    PHOTO = "asset_photos"
    THEFT_REPORT = "theft_reports"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


MODELS: dict[EntityType, type] = {
    EntityType.PROFILE: Profile,
    EntityType.ASSET: Asset,
    EntityType.CATEGORY: Category,
    EntityType.ASSIGNMENT: AssetAssignment,
    EntityType.NOTE: AssetNote,
    EntityType.INSURANCE: AssetInsurance,
    EntityType.DOCUMENT: AssetDocument,
    EntityType.PHOTO: AssetPhoto,
    EntityType.THEFT_REPORT: TheftReport,
}

# Owner follows the parent asset
DERIVED_OWNER = frozenset({EntityType.ASSIGNMENT, EntityType.THEFT_REPORT})

# Owner stamped on the row; must match the parent asset's owner at creation
ASSET_CHILDREN = frozenset(
    {EntityType.NOTE, EntityType.INSURANCE, EntityType.DOCUMENT, EntityType.PHOTO}
)

# Fields an anonymous visitor may see on the QR lookup page
PUBLIC_ASSET_FIELDS = ("id", "name", "category")


def _field(record: Any, name: str) -> Any:
    # Rows are model instances; intended values for a create may be a plain dict
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _as_uuid(value: Any) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def asset_owner(session: Session, asset_id: Any) -> uuid.UUID | None:
    """Owner of the asset with this id, or None when it does not exist."""
    asset_uuid = _as_uuid(asset_id)
    if asset_uuid is None:
        return None
    asset = session.get(Asset, asset_uuid)
    if asset is None:
        return None
    return _as_uuid(asset.owner_id)


def owns_asset(session: Session, asset_id: Any, principal_id: uuid.UUID | None) -> bool:
    """Ownership predicate used by every asset-scoped lookup."""
    if principal_id is None:
        return False
    owner = asset_owner(session, asset_id)
    return owner is not None and owner == principal_id


def resolve_owner(session: Session, entity_type: EntityType, record: Any) -> uuid.UUID | None:
    """
    Return the principal that controls `record`, or None if it cannot be
    determined (which callers must treat as a denial).
    """
    if record is None:
        return None
    if entity_type is EntityType.PROFILE:
        return _as_uuid(_field(record, "id"))
    if entity_type in DERIVED_OWNER:
        return asset_owner(session, _field(record, "asset_id"))
    return _as_uuid(_field(record, "owner_id"))


def _evaluate(
    session: Session,
    operation: Operation,
    entity_type: EntityType,
    record: Any,
    principal_id: uuid.UUID | None,
) -> bool:
    # The one deliberate public write path: strangers reporting a found item
    if entity_type is EntityType.THEFT_REPORT and operation is Operation.CREATE:
        return True

    if principal_id is None or record is None:
        return False

    if operation is Operation.DELETE and (
        entity_type is EntityType.PROFILE or entity_type in DERIVED_OWNER
    ):
        return False

    owner = resolve_owner(session, entity_type, record)

    if entity_type is EntityType.CATEGORY and operation is Operation.READ and owner is None:
        return True

    if owner is None or owner != principal_id:
        return False

    if entity_type in ASSET_CHILDREN and operation is Operation.CREATE:
        return owns_asset(session, _field(record, "asset_id"), principal_id)

    return True


def authorize(
    session: Session,
    operation: Operation,
    entity_type: EntityType,
    record: Any,
    principal_id: uuid.UUID | None,
) -> Decision:
    """
    Decide whether `principal_id` (None = anonymous) may perform
    `operation` on `record`.

    For CREATE, `record` holds the intended values (unsaved instance or
    dict). For UPDATE it must already carry the new values, so that both
    the existing row and its replacement are checked.
    """
    principal_id = _as_uuid(principal_id)
    if _evaluate(session, operation, entity_type, record, principal_id):
        return Decision.ALLOW

    logger.debug(
        "Policy denied %s on %s for principal %s",
        operation.value,
        entity_type.value,
        principal_id or "anonymous",
    )
    return Decision.DENY


def ensure_authorized(
    session: Session,
    operation: Operation,
    entity_type: EntityType,
    record: Any,
    principal_id: uuid.UUID | None,
) -> None:
    """Raise the uniform 403 unless `authorize` allows the operation."""
    if authorize(session, operation, entity_type, record, principal_id) is Decision.DENY:
        raise access_denied()


def load_authorized(
    session: Session,
    operation: Operation,
    entity_type: EntityType,
    record_id: uuid.UUID,
    principal_id: uuid.UUID | None,
):
    """
    Fetch a row by primary key and check `operation` on it.

    A missing row and a row owned by someone else produce the same 403.
    """
    record = session.get(MODELS[entity_type], record_id)
    ensure_authorized(session, operation, entity_type, record, principal_id)
    return record


def read_scope(entity_type: EntityType, principal_id: uuid.UUID | None):
    """
    SQL predicate selecting exactly the rows `principal_id` may read.

    Repositories apply this to list and aggregate queries so that row
    visibility matches `authorize(..., Operation.READ, ...)`.
    """
    if principal_id is None:
        return false()

    if entity_type is EntityType.PROFILE:
        return Profile.id == principal_id
    if entity_type is EntityType.CATEGORY:
        return or_(Category.owner_id == principal_id, Category.owner_id.is_(None))
    if entity_type in DERIVED_OWNER:
        model = MODELS[entity_type]
        # correlate(None): stays a standalone subquery even when the outer
        # query already joins assets
        owned_assets = select(Asset.id).where(Asset.owner_id == principal_id).correlate(None)
        return model.asset_id.in_(owned_assets)
    return MODELS[entity_type].owner_id == principal_id
