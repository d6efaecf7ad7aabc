# keep/schemas/theft_report.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from keep.schemas.common import optional_text

TheftReportStatus = Literal["pending", "resolved", "dismissed"]


class TheftReportCreate(SQLModel):
    """
    Public report filed from the QR page.

    Backend derives:
      - asset_id from the path
      - status = 'pending'
    """

    model_config = ConfigDict(extra="forbid")

    reporter_name: str | None = Field(default=None, max_length=255)
    reporter_email: EmailStr | None = None
    reporter_phone: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("reporter_name", "reporter_phone", "location", "description")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return optional_text(v)

    @field_validator("reporter_email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TheftReportUpdate(SQLModel):
    """
    Owner-side triage of a report.
    """

    model_config = ConfigDict(extra="forbid")

    status: TheftReportStatus | None = None
    location: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("location", "description")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return optional_text(v)


class TheftReportRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    reporter_name: str | None
    reporter_email: str | None
    reporter_phone: str | None
    location: str | None
    description: str | None
    status: TheftReportStatus
    created_at: datetime


class TheftReportReceipt(SQLModel):
    """
    Returned to the (possibly anonymous) reporter. Deliberately carries
    nothing about the asset or its owner.
    """

    id: uuid.UUID
    status: TheftReportStatus
    created_at: datetime
