# keep/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from keep.schemas.common import optional_text

# Application roles. Anonymous visitors have no profile.
Role = Literal["admin", "user", "viewer"]


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    email: str
    full_name: str | None
    avatar_url: str | None
    role: Role
    created_at: datetime


class ProfileCreate(SQLModel):
    """
    Payload for first-time profile completion (after Supabase sign-up).

    The row itself is keyed by the token's subject; `email` is accepted
    only as a cross-check and must match the token email.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr | None = None
    full_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = None

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return optional_text(v)


class ProfileUpdate(SQLModel):
    """
    Partial profile update. Email and role are not editable here.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = None

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return optional_text(v)
