"""Agency Portal — Campaign Analysis Prompts."""

import json
from enum import Enum
from typing import Iterable, List

from app.models.campaign_models import Campaign, Platform


class AnalysisMode(str, Enum):
    PERFORMANCE = "PERFORMANCE"
    TRAFFIC = "TRAFFIC"
    BRANDING = "BRANDING"
    WHATSAPP = "WHATSAPP"


MODE_INSTRUCTIONS = {
    AnalysisMode.PERFORMANCE: (
        "Focus on ROAS and direct sales. Ignore vanity metrics."
    ),
    AnalysisMode.TRAFFIC: (
        "Focus on CTR, CPC and click volume. Judge how attractive the ads are."
    ),
    AnalysisMode.BRANDING: (
        "Focus on reach, impressions and CPM. The goal is brand visibility."
    ),
    AnalysisMode.WHATSAPP: (
        "The critical focus is LEAD GENERATION and WHATSAPP CONVERSATIONS. "
        "Ignore ROAS. Analyse cost per conversation and the click-to-conversation rate."
    ),
}

SYSTEM_PROMPT = """You are a senior performance director (media buyer) at a marketing agency.

Reply in BASIC HTML only (use just <b>, <br>, <ul>, <li>, <p>) with this exact structure:

1. <p><b>Diagnosis ({mode}):</b></p>
   Summarise performance ONLY against the selected objective. Say whether we are efficient.

2. <p><b>Opportunities &amp; Cuts:</b></p>
   Name which campaign to scale and which to pause, based on cost per result for the objective.

3. <p><b>Strategic Action:</b></p>
   One short tactical instruction.

Keep the tone professional and direct.
"""


def _cost_per_conversation(campaign: Campaign):
    if campaign.conversations and campaign.conversations > 0:
        return round(campaign.spend / campaign.conversations, 2)
    return "N/A"


def campaign_digest(campaigns: Iterable[Campaign]) -> List[dict]:
    """Serialize campaigns into the compact shape sent to the model."""
    return [
        {
            "name": c.name,
            "spend": c.spend,
            "roas": c.roas,
            "ctr": c.ctr,
            "cpc": c.cpc,
            "conversations": c.conversations or 0,
            "leads": c.leads or 0,
            "costPerConversation": _cost_per_conversation(c),
            "clicks": c.clicks,
            "platform": Platform(c.platform).value,
        }
        for c in campaigns
    ]


def build_prompts(digest: List[dict], mode: AnalysisMode) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) for one analysis request."""
    system_prompt = SYSTEM_PROMPT.format(mode=mode.value)
    user_prompt = (
        f"{MODE_INSTRUCTIONS[mode]}\n\n"
        f"CAMPAIGN DATA (JSON):\n{json.dumps(digest, ensure_ascii=False)}"
    )
    return system_prompt, user_prompt
