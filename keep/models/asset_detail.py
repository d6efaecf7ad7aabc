# keep/models/asset_detail.py
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class AssetNote(SQLModel, table=True):
    """
    Free-text note on an asset.

    owner_id is stamped from the requester and must equal the asset's owner.
    """

    __tablename__ = "asset_notes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    asset_id: uuid.UUID = Field(
        foreign_key="assets.id",
        ondelete="CASCADE",
        index=True,
    )
    owner_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)

    note_text: str

    # general | maintenance | repairs | modifications | insurance
    note_category: str = Field(default="general", index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AssetInsurance(SQLModel, table=True):
    """
    Insurance record; one row per (asset, owner).
    """

    __tablename__ = "asset_insurance"
    __table_args__ = (
        UniqueConstraint("asset_id", "owner_id", name="uq_asset_insurance_asset_owner"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    asset_id: uuid.UUID = Field(
        foreign_key="assets.id",
        ondelete="CASCADE",
        index=True,
    )
    owner_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)

    is_insured: bool = False
    insurance_provider: str | None = None
    policy_number: str | None = None
    coverage_amount: float | None = None
    premium_amount: float | None = None
    renewal_date: date | None = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AssetDocument(SQLModel, table=True):
    """
    Metadata for a file in the private document bucket.

    file_path is the object path inside the bucket ("<owner>/<asset>/<file>");
    downloads go through short-lived signed URLs.
    """

    __tablename__ = "asset_documents"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    asset_id: uuid.UUID = Field(
        foreign_key="assets.id",
        ondelete="CASCADE",
        index=True,
    )
    owner_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)

    document_name: str

    # proof_of_purchase | insurance_document | warranty | manual | fica_compliance | other
    document_type: str = Field(index=True)

    file_path: str
    content_type: str | None = None
    file_size: int | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AssetPhoto(SQLModel, table=True):
    """
    Metadata for an image in the public photo bucket.
    """

    __tablename__ = "asset_photos"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    asset_id: uuid.UUID = Field(
        foreign_key="assets.id",
        ondelete="CASCADE",
        index=True,
    )
    owner_id: uuid.UUID = Field(foreign_key="profiles.id", index=True)

    photo_url: str
    file_path: str
    photo_description: str | None = None
    is_primary: bool = Field(default=False, index=True)
    file_size: int | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
