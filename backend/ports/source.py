"""SourceResolverPort: abstract interface for locating remote recordings."""

from abc import ABC, abstractmethod

from domain.models import SourceMetadata


class SourceResolverPort(ABC):
    @abstractmethod
    def recording_id(self, url: str) -> str:
        """Extract the recording identifier from a submitted URL."""

    @abstractmethod
    async def resolve_metadata(self, recording_id: str) -> SourceMetadata:
        """Look up title and other descriptive metadata."""

    @abstractmethod
    async def resolve_audio_url(self, recording_id: str) -> str:
        """Return a URL the audio bytes can be fetched from. May raise NotFoundError."""

    @abstractmethod
    async def fetch_bytes(self, url: str) -> bytes:
        """Download the audio stream. May raise NotFoundError."""
