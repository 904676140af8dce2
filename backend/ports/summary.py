"""SummaryPort: abstract interface for generative-text providers."""

from abc import ABC, abstractmethod
from typing import Optional


class SummaryPort(ABC):
    @abstractmethod
    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Send one prompt, with optional system instructions, and return the provider's response text.

        Raises SummaryProviderError if the call fails or returns no content,
        ConfigurationError if no credential is configured.
        """
