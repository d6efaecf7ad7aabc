# keep/models/theft_report.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class TheftReport(SQLModel, table=True):
    """
    Found/stolen report filed from the public QR page.

    Anyone (including anonymous visitors) may create one; only the owner
    of the referenced asset may read or update it. Like assignments, the
    owner is resolved through the parent asset at check time.
    """

    __tablename__ = "theft_reports"

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

    reporter_name: str | None = None
    reporter_email: str | None = None
    reporter_phone: str | None = None
    location: str | None = None
    description: str | None = None

    # pending | resolved | dismissed
    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
