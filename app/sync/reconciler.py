"""Agency Portal — Campaign Reconciler.

Applies a freshly classified campaign set to the stored campaigns of one
client. Fresh campaigns are upserted by external id. Stored campaigns that
Meta no longer returned ("ghosts") are handled by window:

  - all-time: absence means the campaign was removed upstream, so an
    Active ghost is demoted to Paused and its metrics are kept;
  - bounded window: absence means no activity in the window, so the
    ghost's metrics are reset to zero and its status is kept.

Each write is committed on its own. A failure midway leaves earlier
campaigns applied; re-running the sync converges.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from sqlmodel import Session, select

from app.core.logging import get_logger
from app.models.campaign_models import (
    ZEROED_METRICS,
    Campaign,
    CampaignSnapshot,
    CampaignStatus,
    DatePreset,
)

logger = get_logger("sync.reconciler")


@dataclass
class ReconcileStats:
    created: int = 0
    updated: int = 0
    zeroed: int = 0
    paused: int = 0


def load_synced_campaigns(session: Session, client_id: str) -> Dict[str, Campaign]:
    """Stored campaigns of a client that came from Meta, keyed by external id."""
    rows = session.exec(
        select(Campaign).where(
            Campaign.client_id == client_id,
            Campaign.external_id.is_not(None),  # type: ignore
        )
    ).all()
    return {row.external_id: row for row in rows if row.external_id}


def _apply_snapshot(campaign: Campaign, snapshot: CampaignSnapshot) -> bool:
    """Copy every stored field; returns True if any value changed."""
    changed = False
    for key, value in snapshot.stored_fields().items():
        if getattr(campaign, key) != value:
            setattr(campaign, key, value)
            changed = True
    if changed:
        campaign.updated_at = datetime.now(timezone.utc)
    return changed


def upsert_campaign(
    session: Session,
    client_id: str,
    snapshot: CampaignSnapshot,
    existing: Campaign | None,
) -> Tuple[Campaign, bool]:
    """Full replace of the stored row, or insert when there is none.

    Returns the row and whether anything was written. An unchanged row is
    not committed.
    """
    campaign = existing if existing is not None else Campaign(client_id=client_id, name="")
    campaign.client_id = client_id
    changed = _apply_snapshot(campaign, snapshot)
    if existing is None or changed:
        session.add(campaign)
        session.commit()
    return campaign, existing is None or changed


def zero_metrics(session: Session, campaign: Campaign) -> None:
    for metric in ZEROED_METRICS:
        setattr(campaign, metric, 0)
    campaign.updated_at = datetime.now(timezone.utc)
    session.add(campaign)
    session.commit()


def pause_campaign(session: Session, campaign: Campaign) -> None:
    campaign.status = CampaignStatus.PAUSED
    campaign.updated_at = datetime.now(timezone.utc)
    session.add(campaign)
    session.commit()


def reconcile_campaigns(
    session: Session,
    client_id: str,
    snapshots: List[CampaignSnapshot],
    date_preset: DatePreset,
) -> ReconcileStats:
    """Upsert fresh campaigns and apply the window's ghost policy."""
    stats = ReconcileStats()
    stored = load_synced_campaigns(session, client_id)
    fresh_ids = set()

    for snapshot in snapshots:
        fresh_ids.add(snapshot.external_id)
        existing = stored.get(snapshot.external_id)
        campaign, written = upsert_campaign(session, client_id, snapshot, existing)
        stored[snapshot.external_id] = campaign
        if existing is None:
            stats.created += 1
        elif written:
            stats.updated += 1

    ghosts = [c for ext_id, c in stored.items() if ext_id not in fresh_ids]
    for ghost in ghosts:
        if date_preset.is_all_time:
            if ghost.status == CampaignStatus.ACTIVE:
                pause_campaign(session, ghost)
                stats.paused += 1
        elif ghost.spend > 0 or ghost.status == CampaignStatus.ACTIVE:
            zero_metrics(session, ghost)
            stats.zeroed += 1

    logger.info(
        f"Reconciled {len(snapshots)} campaigns: {stats.created} new, "
        f"{stats.updated} updated, {stats.zeroed} zeroed, {stats.paused} paused",
        extra={"client_id": client_id, "date_preset": date_preset.value},
    )
    return stats
