# keep/schemas/assignment.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from keep.schemas.common import optional_text, to_utc


class AssignmentCreate(SQLModel):
    """
    Payload for handing an asset to a profile.

    Backend derives:
      - asset_id from the path
      - assigned_by from token
      - assigned_date = now
    """

    model_config = ConfigDict(extra="forbid")

    assigned_to: uuid.UUID
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)


class AssignmentUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)


class AssignmentReturn(SQLModel):
    model_config = ConfigDict(extra="forbid")

    return_condition: str | None = Field(default=None, max_length=500)

    @field_validator("return_condition")
    @classmethod
    def normalize_condition(cls, v: str | None) -> str | None:
        return optional_text(v)


class AssignmentRead(SQLModel):
    id: uuid.UUID
    asset_id: uuid.UUID
    assigned_to: uuid.UUID
    assigned_by: uuid.UUID
    assigned_date: datetime
    due_date: datetime | None
    return_date: datetime | None
    return_condition: str | None
    created_at: datetime
