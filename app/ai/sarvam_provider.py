"""Agency Portal — Sarvam AI Provider."""

from typing import List
from sarvamai import AsyncSarvamAI

from app.ai.base_provider import AIProvider
from app.ai.prompts import AnalysisMode, build_prompts
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("ai.sarvam")


class SarvamProvider(AIProvider):
    """Sarvam AI provider for campaign analysis (model: sarvam-m)."""

    def __init__(self):
        self.client = (
            AsyncSarvamAI(api_subscription_key=settings.sarvam_api_key)
            if settings.sarvam_api_key
            else None
        )

    def is_available(self) -> bool:
        return self.client is not None and bool(settings.sarvam_api_key)

    async def generate_analysis(self, digest: List[dict], mode: AnalysisMode) -> str:
        if not self.is_available():
            raise RuntimeError("Sarvam provider not configured")

        system_prompt, user_prompt = build_prompts(digest, mode)
        try:
            response = await self.client.chat.completions(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.3,
                max_tokens=1200,
            )
            return (
                response.choices[0].message.content
                or "Could not generate insights right now."
            )
        except Exception as e:
            logger.error(f"Sarvam generation failed: {e}")
            raise
