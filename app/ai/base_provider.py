"""Agency Portal — Abstract AI Provider."""

from abc import ABC, abstractmethod
from typing import List

from app.ai.prompts import AnalysisMode


class AIProvider(ABC):
    """Abstract base for campaign analysis generation.

    Providers receive the serialized campaign digest and an analysis mode,
    and return HTML prose that the dashboard displays as-is.
    """

    @abstractmethod
    async def generate_analysis(self, digest: List[dict], mode: AnalysisMode) -> str:
        """Generate an HTML analysis of the given campaigns.

        Args:
            digest: Campaign rows as produced by `campaign_digest`.
            mode: Which objective the analysis should focus on.

        Returns:
            HTML text using only basic tags.
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is configured and ready."""
        ...
