"""Agency Portal — Action Event Registry.

Maps Meta action types onto the normalized counters stored on a campaign.
When Meta introduces a new action type, register it here; the classifier
reads these tables and never matches on strings inline.
"""

from enum import Enum
from typing import List, Tuple


class EventBucket(str, Enum):
    """Normalized counter an action event contributes to."""

    CONVERSATIONS = "conversations"
    LEADS = "leads"
    PURCHASE = "purchase"


class MatchMode(str, Enum):
    """How an event rule's pattern is compared with an action type."""

    EXACT = "exact"
    CONTAINS = "contains"


class EventRule:
    """One row of the classification table."""

    def __init__(
        self,
        pattern: str,
        bucket: EventBucket,
        mode: MatchMode = MatchMode.EXACT,
        description: str = "",
    ):
        self.pattern = pattern
        self.bucket = bucket
        self.mode = mode
        self.description = description

    def matches(self, action_type: str) -> bool:
        if self.mode == MatchMode.CONTAINS:
            return self.pattern in action_type
        return action_type == self.pattern

    def __repr__(self) -> str:
        return f"<EventRule {self.mode.value}:{self.pattern} -> {self.bucket.value}>"


# ─────────────────────────────────────────────
# COUNTED EVENTS — summed from `actions`
# ─────────────────────────────────────────────

EVENT_RULES: List[EventRule] = [
    # Conversations
    EventRule(
        "messaging_conversation_started",
        EventBucket.CONVERSATIONS,
        MatchMode.CONTAINS,
        "Messaging conversation started (any attribution window)",
    ),
    EventRule(
        "contact_total",
        EventBucket.CONVERSATIONS,
        MatchMode.CONTAINS,
        "Generic contact total",
    ),
    EventRule(
        "total_messaging_connection",
        EventBucket.CONVERSATIONS,
        MatchMode.CONTAINS,
        "On-platform messaging conversion",
    ),
    # Leads — native and pixel
    EventRule("lead", EventBucket.LEADS, description="Generic lead"),
    EventRule(
        "offsite_conversion.fb_pixel_lead",
        EventBucket.LEADS,
        description="Pixel lead on the advertiser site",
    ),
    EventRule(
        "on_facebook_lead",
        EventBucket.LEADS,
        description="Native lead form completion",
    ),
    EventRule(
        "onsite_conversion.lead_grouped",
        EventBucket.LEADS,
        description="Grouped on-platform lead form completion",
    ),
    # Leads — other contact-style conversions
    EventRule("contact", EventBucket.LEADS, description="Contact"),
    EventRule("schedule", EventBucket.LEADS, description="Appointment scheduled"),
    EventRule(
        "submit_application", EventBucket.LEADS, description="Application submitted"
    ),
    EventRule(
        "complete_registration",
        EventBucket.LEADS,
        description="Registration completed",
    ),
]


# ─────────────────────────────────────────────
# VALUED EVENTS — read from `action_values`
# ─────────────────────────────────────────────

PURCHASE_VALUE_RULES: List[EventRule] = [
    EventRule("purchase", EventBucket.PURCHASE, description="Canonical purchase"),
    EventRule(
        "omni_purchase", EventBucket.PURCHASE, description="Cross-surface purchase"
    ),
    EventRule(
        "offsite_conversion.fb_pixel_purchase",
        EventBucket.PURCHASE,
        description="Pixel purchase",
    ),
]


# ─────────────────────────────────────────────
# OBJECTIVES & STATUSES
# ─────────────────────────────────────────────

# Objectives whose link clicks may stand in for conversations
CLICK_FALLBACK_OBJECTIVES: Tuple[str, ...] = ("TRAFFIC", "MESSAGES", "LINK_CLICKS")

ACTIVE_STATUSES = frozenset({"ACTIVE"})
PAUSED_STATUSES = frozenset(
    {"PAUSED", "CAMPAIGN_PAUSED", "ADSET_PAUSED", "ARCHIVED", "DELETED"}
)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def buckets_for(action_type: str) -> List[EventBucket]:
    """Return every bucket a counted action type contributes to."""
    return [rule.bucket for rule in EVENT_RULES if rule.matches(action_type)]


def is_purchase_value(action_type: str) -> bool:
    return any(rule.matches(action_type) for rule in PURCHASE_VALUE_RULES)


def rules_by_bucket(bucket: EventBucket) -> List[EventRule]:
    """Return all counted-event rules of a given bucket."""
    return [r for r in EVENT_RULES if r.bucket == bucket]


def objective_allows_click_fallback(objective: str) -> bool:
    objective = (objective or "").upper()
    return any(tag in objective for tag in CLICK_FALLBACK_OBJECTIVES)

