"""SpeakerAssignmentPort: abstract interface for labelling segments with speakers.

The provider gives no diarization, so labels come from a heuristic today.
A real diarization model can replace it by implementing this port.
"""

from abc import ABC, abstractmethod

from domain.models import TranscriptSegment


class SpeakerAssignmentPort(ABC):
    @abstractmethod
    def assign(self, segments: list[TranscriptSegment]) -> list[str]:
        """Return one speaker label per segment, in segment order."""
