"""Agency Portal — Campaign Sync Pipeline.

Runs the full data flow for one client:
  resolve account → fetch (3 parallel reads) → classify → reconcile

Credentials are passed in by the caller; the pipeline never reads the
settings record itself.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from app.connectors.meta.client import MetaClient
from app.connectors.meta.endpoints import MetaEndpoints
from app.connectors.meta.transformer import transform_campaigns
from app.core.errors import ConfigurationMissing
from app.core.logging import get_logger
from app.models.account_models import AppSettings, SETTINGS_KEY
from app.models.campaign_models import DatePreset, SyncResult
from app.sync.reconciler import reconcile_campaigns
from app.sync.resolver import resolve_ad_account

logger = get_logger("sync.pipeline")


@dataclass(frozen=True)
class SyncCredentials:
    meta_access_token: str
    conversation_click_fallback: Optional[bool] = None


EndpointsFactory = Callable[[MetaClient], MetaEndpoints]


def load_credentials(session: Session) -> SyncCredentials:
    """Read the agency token from the settings record."""
    record = session.get(AppSettings, SETTINGS_KEY)
    token = (record.meta_ads_token if record else "").strip()
    if not token:
        raise ConfigurationMissing(
            "Agency Meta token is not configured. Set it in Settings."
        )
    return SyncCredentials(meta_access_token=token)


async def run_sync(
    session: Session,
    client_id: str,
    credentials: SyncCredentials,
    date_preset: DatePreset = DatePreset.MAXIMUM,
    client_factory: Callable[[str, str], MetaClient] = MetaClient,
    endpoints_factory: EndpointsFactory = MetaEndpoints,
) -> SyncResult:
    """Synchronize one client's Meta campaigns into the store."""
    if not credentials.meta_access_token:
        raise ConfigurationMissing(
            "Agency Meta token is not configured. Set it in Settings."
        )
    account_id = resolve_ad_account(session, client_id)
    log_extra = {
        "client_id": client_id,
        "account_id": account_id,
        "date_preset": date_preset.value,
    }
    logger.info("Starting campaign sync", extra=log_extra)
    started = time.monotonic()

    client = client_factory(credentials.meta_access_token, account_id)
    try:
        bundle = await endpoints_factory(client).fetch_sync_bundle(date_preset)
    finally:
        await client.close()

    snapshots = transform_campaigns(
        bundle.campaigns,
        bundle.age_gender_rows,
        bundle.platform_rows,
        click_fallback=credentials.conversation_click_fallback,
    )
    stats = reconcile_campaigns(session, client_id, snapshots, date_preset)

    if not snapshots and not date_preset.is_all_time:
        message = f"No data for period '{date_preset.value}'. Dashboard zeroed."
    else:
        message = f"Sync complete for period: {date_preset.value}."

    logger.info(
        message,
        extra={**log_extra, "duration_ms": int((time.monotonic() - started) * 1000)},
    )
    return SyncResult(
        client_id=client_id,
        account_id=account_id,
        date_preset=date_preset.value,
        fetched=len(snapshots),
        created=stats.created,
        updated=stats.updated,
        zeroed=stats.zeroed,
        paused=stats.paused,
        message=message,
    )
