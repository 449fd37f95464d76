"""Agency Portal — Meta Raw → Campaign Snapshot Transformer.

Converts raw Meta campaign rows into CampaignSnapshot objects, using the
event registry to bucket action events into conversations, leads and
purchase revenue.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.config import settings
from app.core.event_registry import (
    ACTIVE_STATUSES,
    PAUSED_STATUSES,
    EventBucket,
    buckets_for,
    is_purchase_value,
    objective_allows_click_fallback,
)
from app.core.logging import get_logger
from app.models.campaign_models import CampaignSnapshot, CampaignStatus, Platform

logger = get_logger("meta.transformer")

Breakdown = Dict[str, float]


def _safe_float(value: Any) -> float:
    """Safely convert a value to float."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _safe_int(value: Any) -> int:
    return int(_safe_float(value))


@dataclass
class EventCounts:
    conversations: int = 0
    leads: int = 0
    purchase_revenue: float = 0.0
    estimated_conversations: bool = False


def classify_events(
    actions: List[Dict[str, Any]],
    action_values: List[Dict[str, Any]],
    objective: str = "",
    link_clicks: float = 0,
    click_fallback: Optional[bool] = None,
) -> EventCounts:
    """Bucket one campaign's action events into normalized counters.

    Values are summed across every matching action type. When no
    conversation event was reported and the objective is traffic or
    message oriented, link clicks stand in for conversations unless the
    click fallback is switched off.
    """
    if click_fallback is None:
        click_fallback = settings.conversation_click_fallback

    totals: Dict[EventBucket, float] = defaultdict(float)
    for action in actions or []:
        value = _safe_float(action.get("value", 0))
        for bucket in buckets_for(action.get("action_type", "")):
            totals[bucket] += value

    counts = EventCounts(
        conversations=int(totals[EventBucket.CONVERSATIONS]),
        leads=int(totals[EventBucket.LEADS]),
    )

    if (
        counts.conversations == 0
        and click_fallback
        and link_clicks > 0
        and objective_allows_click_fallback(objective)
    ):
        counts.conversations = int(link_clicks)
        counts.estimated_conversations = True

    purchase = next(
        (av for av in action_values or [] if is_purchase_value(av.get("action_type", ""))),
        None,
    )
    if purchase is not None:
        counts.purchase_revenue = _safe_float(purchase.get("value", 0))

    return counts


def map_status(effective_status: str) -> CampaignStatus:
    """Map Meta's status vocabulary onto the three local states."""
    status = (effective_status or "").upper()
    if status in ACTIVE_STATUSES:
        return CampaignStatus.ACTIVE
    if status in PAUSED_STATUSES:
        return CampaignStatus.PAUSED
    return CampaignStatus.COMPLETED


def compute_roas(revenue: float, spend: float) -> float:
    if spend > 0 and revenue > 0:
        return revenue / spend
    return 0.0


def transform_campaign(
    item: Dict[str, Any], click_fallback: Optional[bool] = None
) -> CampaignSnapshot:
    """Classify one row of the campaigns response."""
    insights = item.get("insights") or {}
    insight = (insights.get("data") or [{}])[0]
    objective = item.get("objective", "") or ""

    spend = _safe_float(insight.get("spend", 0))
    clicks = _safe_int(insight.get("clicks", 0))
    link_clicks = _safe_float(insight.get("inline_link_clicks") or clicks)

    counts = classify_events(
        insight.get("actions") or [],
        insight.get("action_values") or [],
        objective=objective,
        link_clicks=link_clicks,
        click_fallback=click_fallback,
    )
    if counts.estimated_conversations:
        logger.info(
            f"{item.get('name', '')}: conversations estimated from {int(link_clicks)} link clicks"
        )

    return CampaignSnapshot(
        external_id=str(item.get("id", "")),
        name=item.get("name", ""),
        status=map_status(item.get("effective_status") or item.get("status", "")),
        objective=objective,
        spend=spend,
        impressions=_safe_int(insight.get("impressions", 0)),
        clicks=clicks,
        ctr=_safe_float(insight.get("ctr", 0)) * 100,
        cpc=_safe_float(insight.get("cpc", 0)),
        roas=compute_roas(counts.purchase_revenue, spend),
        conversations=counts.conversations,
        leads=counts.leads,
        purchase_revenue=counts.purchase_revenue,
        platform=Platform.META,
    )


def aggregate_breakdown(
    rows: List[Dict[str, Any]], dimension: str, metric: str
) -> Dict[str, Breakdown]:
    """Sum `metric` per campaign id and `dimension` value.

    Returns {campaign_id: {dimension_value: total}}.
    """
    result: Dict[str, Breakdown] = defaultdict(lambda: defaultdict(float))
    for row in rows:
        campaign_id = row.get("campaign_id")
        label = row.get(dimension)
        if not campaign_id or label is None:
            continue
        result[str(campaign_id)][str(label)] += _safe_float(row.get(metric, 0))
    return {cid: dict(values) for cid, values in result.items()}


def transform_campaigns(
    campaigns: List[Dict[str, Any]],
    age_gender_rows: List[Dict[str, Any]] | None = None,
    platform_rows: List[Dict[str, Any]] | None = None,
    click_fallback: Optional[bool] = None,
) -> List[CampaignSnapshot]:
    """Classify every campaign and attach its breakdown maps."""
    age_gender_rows = age_gender_rows or []
    ages = aggregate_breakdown(age_gender_rows, "age", "impressions")
    genders = aggregate_breakdown(age_gender_rows, "gender", "impressions")
    platforms = aggregate_breakdown(platform_rows or [], "publisher_platform", "spend")

    snapshots: List[CampaignSnapshot] = []
    for item in campaigns:
        if not item.get("id"):
            logger.warning(f"Skipping campaign row without id: {item.get('name', '')!r}")
            continue
        snap = transform_campaign(item, click_fallback=click_fallback)
        snap.age_breakdown = ages.get(snap.external_id, {})
        snap.gender_breakdown = genders.get(snap.external_id, {})
        snap.platform_breakdown = platforms.get(snap.external_id, {})
        snapshots.append(snap)

    logger.info(f"Classified {len(snapshots)} campaigns")
    return snapshots
