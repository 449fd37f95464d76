"""Agency Portal — Meta API Endpoints.

Fetch functions for the three reads a campaign sync needs. Each returns the
raw `data` rows; classification happens in the transformer.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List

from app.config import settings
from app.connectors.meta.client import MetaClient, META_BASE
from app.core.errors import TransportFailure
from app.core.logging import get_logger
from app.models.campaign_models import DatePreset

logger = get_logger("meta.endpoints")

# Performance fields nested under each campaign
INSIGHT_FIELDS = (
    "spend,impressions,clicks,cpc,ctr,actions,action_values,inline_link_clicks"
)
CAMPAIGN_FIELDS = "name,status,effective_status,objective"

AGE_GENDER_FIELDS = "campaign_id,impressions"
PLATFORM_FIELDS = "campaign_id,spend"


@dataclass
class SyncBundle:
    """Joined result of the three sync reads."""

    campaigns: List[Dict[str, Any]]
    age_gender_rows: List[Dict[str, Any]] = field(default_factory=list)
    platform_rows: List[Dict[str, Any]] = field(default_factory=list)


class MetaEndpoints:
    """Fetch raw campaign data for one ad account."""

    def __init__(self, client: MetaClient, page_limit: int | None = None):
        self.client = client
        self.ad_account_id = client.ad_account_id
        self.page_limit = page_limit or settings.meta_page_limit

    # ── Campaigns + nested insights ──

    async def fetch_campaigns(self, date_preset: DatePreset) -> List[Dict[str, Any]]:
        """Fetch campaigns with their performance aggregate for the window."""
        url = f"{META_BASE}/{self.ad_account_id}/campaigns"
        params = {
            "fields": (
                f"{CAMPAIGN_FIELDS},"
                f"insights.date_preset({date_preset.value}){{{INSIGHT_FIELDS}}}"
            ),
            "date_preset": date_preset.value,
            "use_account_attribution_setting": "true",
            "limit": self.page_limit,
        }
        data = await self.client._paginated_get(url, params)
        logger.info(
            f"Fetched {len(data)} campaigns",
            extra={"account_id": self.ad_account_id, "date_preset": date_preset.value},
        )
        return data

    # ── Breakdowns ──

    async def _fetch_breakdown(
        self, date_preset: DatePreset, breakdowns: str, fields: str
    ) -> List[Dict[str, Any]]:
        url = f"{META_BASE}/{self.ad_account_id}/insights"
        params = {
            "level": "campaign",
            "fields": fields,
            "breakdowns": breakdowns,
            "date_preset": date_preset.value,
            "limit": self.page_limit,
        }
        data = await self.client._paginated_get(url, params)
        logger.info(f"Fetched {len(data)} {breakdowns} breakdown rows")
        return data

    async def fetch_age_gender_breakdown(
        self, date_preset: DatePreset
    ) -> List[Dict[str, Any]]:
        """Impressions per campaign broken down by age bracket and gender."""
        return await self._fetch_breakdown(date_preset, "age,gender", AGE_GENDER_FIELDS)

    async def fetch_platform_breakdown(
        self, date_preset: DatePreset
    ) -> List[Dict[str, Any]]:
        """Spend per campaign broken down by publishing surface."""
        return await self._fetch_breakdown(
            date_preset, "publisher_platform", PLATFORM_FIELDS
        )

    # ── Joined fetch ──

    async def fetch_sync_bundle(self, date_preset: DatePreset) -> SyncBundle:
        """Run the three reads concurrently and wait for all of them.

        Any error on the campaign read is fatal. On the breakdown reads a
        transport failure degrades to "no breakdown data", while a structured
        Meta error is still fatal.
        """
        campaigns, age_gender, platform = await asyncio.gather(
            self.fetch_campaigns(date_preset),
            self.fetch_age_gender_breakdown(date_preset),
            self.fetch_platform_breakdown(date_preset),
            return_exceptions=True,
        )

        if isinstance(campaigns, BaseException):
            raise campaigns

        return SyncBundle(
            campaigns=campaigns,
            age_gender_rows=self._auxiliary(age_gender, "age,gender"),
            platform_rows=self._auxiliary(platform, "publisher_platform"),
        )

    def _auxiliary(self, result: Any, label: str) -> List[Dict[str, Any]]:
        if isinstance(result, TransportFailure):
            logger.warning(
                f"{label} breakdown unavailable: {result}",
                extra={"account_id": self.ad_account_id},
            )
            return []
        if isinstance(result, BaseException):
            raise result
        return result
