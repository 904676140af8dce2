"""AudioProcessingPort: abstract interface for audio decoding."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import PcmBuffer


class AudioProcessingPort(ABC):
    @abstractmethod
    def decode(self, raw_audio: bytes, mime_type: Optional[str] = None) -> PcmBuffer:
        """Decode an audio container into float PCM, one array per channel.

        Raises DecodeError when the bytes are not a supported container.
        """
