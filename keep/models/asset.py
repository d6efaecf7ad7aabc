# keep/models/asset.py
import uuid
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field


class Asset(SQLModel, table=True):
    """
    Inventory item owned by exactly one principal.

    - owner_id is stamped at creation and never changes.
    - status moves between available/assigned through the assignment
      workflow; maintenance/retired are set by the owner.
    - qr_code holds the public lookup URL encoded in the printed QR label.
    """

    __tablename__ = "assets"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the asset",
    )

    category: str = Field(
        index=True,
        description="Category name (free text, usually one of the visible categories)",
    )

    description: str | None = None
    serial_number: str | None = Field(default=None, max_length=100)
    vin_identifier: str | None = Field(
        default=None,
        max_length=100,
        description="VIN or other alternate identifier",
    )

    purchase_date: date | None = None

    asset_value_zar: float | None = Field(
        default=None,
        ge=0,
        description="Replacement value in ZAR",
    )

    # available | assigned | maintenance | retired
    status: str = Field(
        default="available",
        index=True,
    )

    asset_location: str | None = None

    # excellent | good | fair | poor
    asset_condition: str = Field(default="excellent")

    owner_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    custom_fields: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    qr_code: str | None = Field(
        default=None,
        description="Public lookup URL encoded in the QR label",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Category(SQLModel, table=True):
    """
    Asset category.

    owner_id NULL  => shared default visible to every principal.
    owner_id set   => private to that principal.
    """

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_categories_owner_name"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100, index=True)
    description: str | None = Field(default=None, max_length=500)

    owner_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="profiles.id",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
