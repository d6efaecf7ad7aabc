# keep/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Persistent profile for an authenticated principal.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "admin" | "user" | "viewer"
      - anonymous visitors have no row.

    Rows are created lazily on first sign-in and are never deleted
    through the API.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        index=True,
        description="Email from Supabase auth.users",
    )

    full_name: str | None = Field(
        default=None,
        max_length=255,
        description="Display name; first part of email by default",
    )

    avatar_url: str | None = None

    role: str = Field(
        default="user",
        index=True,
        description="Application role: admin | user | viewer",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
