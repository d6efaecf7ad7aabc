# keep/models/assignment.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field


class AssetAssignment(SQLModel, table=True):
    """
    Hand-over of an asset to a profile.

    Ownership is not stored here: it is always read from the parent
    asset, so access follows the asset's current owner.

    An assignment is "open" while return_date is NULL. At most one open
    assignment per asset is allowed (partial unique index below, checked
    first by the service so callers get a readable 409).
    """

    __tablename__ = "asset_assignments"
    __table_args__ = (
        Index(
            "uq_asset_assignments_open",
            "asset_id",
            unique=True,
            postgresql_where=text("return_date IS NULL"),
            sqlite_where=text("return_date IS NULL"),
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    asset_id: uuid.UUID = Field(
        foreign_key="assets.id",
        ondelete="CASCADE",
        index=True,
    )

    assigned_to: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    assigned_by: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    assigned_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    due_date: datetime | None = None
    return_date: datetime | None = Field(default=None, index=True)
    return_condition: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
