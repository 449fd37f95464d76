"""Agency Portal — Campaign Models.

`Campaign` is the stored record. `CampaignSnapshot` is what the classifier
produces from one upstream campaign; the reconciler copies it onto a
`Campaign` row field by field.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field, UniqueConstraint


class CampaignStatus(str, Enum):
    ACTIVE = "Active"
    PAUSED = "Paused"
    COMPLETED = "Completed"


class Platform(str, Enum):
    META = "Meta"
    GOOGLE = "Google"
    TIKTOK = "TikTok"


class DatePreset(str, Enum):
    """Reporting windows accepted by Meta's `date_preset` parameter."""

    MAXIMUM = "maximum"  # all-time
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7D = "last_7d"
    LAST_30D = "last_30d"
    THIS_MONTH = "this_month"

    @property
    def is_all_time(self) -> bool:
        return self is DatePreset.MAXIMUM


class Campaign(SQLModel, table=True):
    """Advertising campaign, either typed in by hand or mirrored from Meta.

    Unique constraint on (client_id, external_id) keeps sync idempotent:
    re-running a sync updates rows in place instead of duplicating them.
    Rows without an external_id are manual and never reconciled.
    """

    __tablename__ = "campaigns"
    __table_args__ = (
        UniqueConstraint("client_id", "external_id", name="uq_campaign_external"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: Optional[str] = Field(default=None, index=True, foreign_key="clients.id")
    external_id: Optional[str] = Field(
        default=None, index=True, description="Meta campaign id"
    )
    name: str
    status: CampaignStatus = Field(default=CampaignStatus.ACTIVE)
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    ctr: float = Field(default=0.0, description="Percent")
    cpc: float = 0.0
    roas: float = 0.0
    conversations: int = 0
    leads: int = 0
    platform: Platform = Field(default=Platform.META)
    age_breakdown: Optional[Dict[str, float]] = Field(
        default=None, sa_column=Column(JSON)
    )
    gender_breakdown: Optional[Dict[str, float]] = Field(
        default=None, sa_column=Column(JSON)
    )
    platform_breakdown: Optional[Dict[str, float]] = Field(
        default=None, sa_column=Column(JSON)
    )
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Metrics reset when a campaign had no activity inside a bounded window
ZEROED_METRICS = (
    "spend",
    "impressions",
    "clicks",
    "ctr",
    "cpc",
    "roas",
    "conversations",
    "leads",
)


class CampaignSnapshot(BaseModel):
    """Classified view of one upstream campaign for the requested window."""

    external_id: str
    name: str
    status: CampaignStatus
    objective: str = ""
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    cpc: float = 0.0
    roas: float = 0.0
    conversations: int = 0
    leads: int = 0
    purchase_revenue: float = 0.0
    platform: Platform = Platform.META
    age_breakdown: Dict[str, float] = {}
    gender_breakdown: Dict[str, float] = {}
    platform_breakdown: Dict[str, float] = {}

    def stored_fields(self) -> dict:
        """Fields copied verbatim onto the stored Campaign row."""
        return self.model_dump(exclude={"objective", "purchase_revenue"})


class CampaignCreate(BaseModel):
    """Request body for a manually authored campaign."""

    client_id: Optional[str] = None
    name: str
    status: CampaignStatus = CampaignStatus.ACTIVE
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    cpc: float = 0.0
    roas: float = 0.0
    conversations: int = 0
    leads: int = 0
    platform: Platform = Platform.META


class SyncResult(BaseModel):
    """Outcome of one sync run."""

    status: str = "success"
    client_id: str
    account_id: str
    date_preset: str
    fetched: int = 0
    created: int = 0
    updated: int = 0
    zeroed: int = 0
    paused: int = 0
    message: str = ""


class PurgeResult(BaseModel):
    deleted: int = 0
    batches: int = 0
