"""Agency Portal — AI Provider Selection."""

from typing import Dict, Tuple, Type

from app.ai.base_provider import AIProvider
from app.ai.claude_provider import ClaudeProvider
from app.ai.sarvam_provider import SarvamProvider
from app.config import settings

PROVIDERS: Dict[str, Type[AIProvider]] = {
    "claude": ClaudeProvider,
    "sarvam": SarvamProvider,
}


class ProviderUnavailable(Exception):
    """No usable AI provider for the request."""


def select_provider(provider_name: str = "auto") -> Tuple[str, AIProvider]:
    """Return (name, provider) for an available provider.

    'auto' tries DEFAULT_AI_PROVIDER first, then the remaining providers.
    """
    if provider_name == "auto":
        default = settings.default_ai_provider
        order = [default] + [name for name in PROVIDERS if name != default]
        for name in order:
            cls = PROVIDERS.get(name)
            if cls is None:
                continue
            provider = cls()
            if provider.is_available():
                return name, provider
        raise ProviderUnavailable(
            "No AI provider configured. Set ANTHROPIC_API_KEY or SARVAM_API_KEY."
        )

    if provider_name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider_name}.")
    provider = PROVIDERS[provider_name]()
    if not provider.is_available():
        raise ProviderUnavailable(f"{provider_name} provider not configured.")
    return provider_name, provider
