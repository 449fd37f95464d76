"""Agency Portal — Anthropic Claude Provider."""

from typing import List
from anthropic import AsyncAnthropic

from app.ai.base_provider import AIProvider
from app.ai.prompts import AnalysisMode, build_prompts
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("ai.claude")

CLAUDE_MODEL = "claude-sonnet-4-20250514"


class ClaudeProvider(AIProvider):
    """Anthropic Claude provider for campaign analysis."""

    def __init__(self):
        self.client = (
            AsyncAnthropic(api_key=settings.anthropic_api_key)
            if settings.anthropic_api_key
            else None
        )

    def is_available(self) -> bool:
        return self.client is not None and bool(settings.anthropic_api_key)

    async def generate_analysis(self, digest: List[dict], mode: AnalysisMode) -> str:
        if not self.is_available():
            raise RuntimeError("Claude provider not configured")

        system_prompt, user_prompt = build_prompts(digest, mode)
        try:
            response = await self.client.messages.create(
                model=CLAUDE_MODEL,
                max_tokens=1200,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
            return (
                response.content[0].text
                if response.content
                else "Could not generate insights right now."
            )
        except Exception as e:
            logger.error(f"Claude generation failed: {e}")
            raise
