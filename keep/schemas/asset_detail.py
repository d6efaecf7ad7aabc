# keep/schemas/asset_detail.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from keep.schemas.common import optional_text, required_text

NoteCategory = Literal["general", "maintenance", "repairs", "modifications", "insurance"]
DocumentType = Literal[
    "proof_of_purchase",
    "insurance_document",
    "warranty",
    "manual",
    "fica_compliance",
    "other",
]


# ---- Notes ----


class NoteCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    note_text: str = Field(max_length=2000)
    note_category: NoteCategory = "general"

    @field_validator("note_text")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return required_text(v)


class NoteUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    note_text: str | None = Field(default=None, max_length=2000)
    note_category: NoteCategory | None = None

    @field_validator("note_text")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return required_text(v)


class NoteRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    owner_id: uuid.UUID
    note_text: str
    note_category: NoteCategory
    created_at: datetime
    updated_at: datetime


# ---- Insurance ----


class InsuranceUpsert(SQLModel):
    """
    Full insurance record for an asset (PUT semantics).

    When `is_insured` is true a provider is required.
    """

    model_config = ConfigDict(extra="forbid")

    is_insured: bool = False
    insurance_provider: str | None = None
    policy_number: str | None = None
    coverage_amount: float | None = Field(default=None, ge=0)
    premium_amount: float | None = Field(default=None, ge=0)
    renewal_date: date | None = None

    @field_validator("insurance_provider", "policy_number")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return optional_text(v)

    @model_validator(mode="after")
    def provider_required_when_insured(self):
        if self.is_insured and not self.insurance_provider:
            raise ValueError("Insurance provider is required when asset is insured")
        return self


class InsuranceRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    owner_id: uuid.UUID
    is_insured: bool
    insurance_provider: str | None
    policy_number: str | None
    coverage_amount: float | None
    premium_amount: float | None
    renewal_date: date | None
    created_at: datetime
    updated_at: datetime


# ---- Photos & documents ----


class PhotoUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    photo_description: str | None = Field(default=None, max_length=500)
    is_primary: bool | None = None

    @field_validator("photo_description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        return optional_text(v)


class PhotoRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    owner_id: uuid.UUID
    photo_url: str
    photo_description: str | None
    is_primary: bool
    file_size: int | None
    created_at: datetime


class DocumentRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    owner_id: uuid.UUID
    document_name: str
    document_type: DocumentType
    content_type: str | None
    file_size: int | None
    created_at: datetime


class DocumentDownload(SQLModel):
    url: str
    expires_in: int
