# keep/schemas/asset.py
import uuid
from datetime import date, datetime
from typing import Any, Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from keep.schemas.common import optional_text, required_text

AssetStatus = Literal["available", "assigned", "maintenance", "retired"]
AssetCondition = Literal["excellent", "good", "fair", "poor"]


class AssetCreate(SQLModel):
    """
    Payload for registering an asset.

    Backend derives:
      - owner_id from token
      - qr_code from the generated id
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    category: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    serial_number: str | None = Field(default=None, max_length=100)
    vin_identifier: str | None = Field(default=None, max_length=100)
    purchase_date: date | None = None
    asset_value_zar: float | None = Field(default=None, ge=0)
    status: AssetStatus = "available"
    asset_location: str | None = None
    asset_condition: AssetCondition = "excellent"
    custom_fields: dict[str, Any] | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return required_text(v)

    @field_validator("description", "serial_number", "vin_identifier", "asset_location")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return optional_text(v)


class AssetUpdate(SQLModel):
    """
    Partial update payload. owner_id and qr_code are never editable.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    serial_number: str | None = Field(default=None, max_length=100)
    vin_identifier: str | None = Field(default=None, max_length=100)
    purchase_date: date | None = None
    asset_value_zar: float | None = Field(default=None, ge=0)
    status: AssetStatus | None = None
    asset_location: str | None = None
    asset_condition: AssetCondition | None = None
    custom_fields: dict[str, Any] | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return required_text(v)

    @field_validator("description", "serial_number", "vin_identifier", "asset_location")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return optional_text(v)


class AssetRead(SQLModel):
    """
    Full asset representation, returned to the owner only.
    """

    id: uuid.UUID
    name: str
    category: str
    description: str | None
    serial_number: str | None
    vin_identifier: str | None
    purchase_date: date | None
    asset_value_zar: float | None
    status: AssetStatus
    asset_location: str | None
    asset_condition: AssetCondition
    owner_id: uuid.UUID
    custom_fields: dict[str, Any] | None
    qr_code: str | None
    created_at: datetime
    updated_at: datetime


class AssetSearchResult(AssetRead):
    rank: float


class PublicAssetRead(SQLModel):
    """
    What an anonymous visitor sees after scanning a QR label.
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    name: str
    category: str


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return required_text(v)

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        return optional_text(v)


class CategoryUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return required_text(v)

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        return optional_text(v)


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
    owner_id: uuid.UUID | None
    created_at: datetime
