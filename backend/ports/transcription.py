"""TranscriptionPort: abstract interface for speech-to-text providers."""

from abc import ABC, abstractmethod

from domain.models import AudioAsset, ProviderTranscription


class TranscriptionPort(ABC):
    @abstractmethod
    async def transcribe(self, audio: AudioAsset, filename: str) -> ProviderTranscription:
        """Send canonical audio to the provider. Returns its raw payload."""

    @abstractmethod
    def model_name(self) -> str:
        """Return the human-readable model name."""
