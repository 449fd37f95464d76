"""Agency Portal — Client Accounts & Integration Settings."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    TEAM = "TEAM"
    CLIENT = "CLIENT"


class ClientAccount(SQLModel, table=True):
    """A portal user profile. CLIENT profiles own campaigns and tasks.

    The id is the uid issued by the auth provider.
    """

    __tablename__ = "clients"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    name: str
    email: str = Field(default="", index=True)
    role: UserRole = Field(default=UserRole.CLIENT, index=True)
    company_name: Optional[str] = None
    ad_account_id: Optional[str] = Field(
        default=None, description="External ad account id, e.g. act_123456"
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


SETTINGS_KEY = "integrations"


class AppSettings(SQLModel, table=True):
    """Singleton record with the agency-wide integration credentials."""

    __tablename__ = "app_settings"

    id: str = Field(default=SETTINGS_KEY, primary_key=True)
    meta_ads_token: str = ""
    google_ads_key: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
