# keep/schemas/stats.py
import uuid
from datetime import date, datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from keep.schemas.asset import AssetStatus


class RecentAssetSummary(SQLModel):
    """
    Lightweight info for the last N assets registered.
    """
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    name: str
    category: str
    status: AssetStatus
    created_at: datetime


class AssetStatistics(SQLModel):
    """
    Dashboard totals for the caller's inventory.
    """
    model_config = ConfigDict(extra="forbid")

    total_assets: int
    available_assets: int
    assigned_assets: int
    maintenance_assets: int
    retired_assets: int
    total_value: float
    insured_assets: int
    assets_with_notes: int
    recent_assets: list[RecentAssetSummary]


class RenewalReminder(SQLModel):
    model_config = ConfigDict(extra="forbid")

    asset_id: uuid.UUID
    asset_name: str
    insurance_provider: str | None
    renewal_date: date
    days_until_renewal: int


class OverdueAssignment(SQLModel):
    model_config = ConfigDict(extra="forbid")

    assignment_id: uuid.UUID
    asset_id: uuid.UUID
    asset_name: str
    assigned_to_name: str | None
    assigned_to_email: str
    due_date: datetime
    days_overdue: int
