"""FixedRunSpeakerAssigner: index-based speaker runs (no real diarization)."""

from domain.models import TranscriptSegment
from ports.diarization import SpeakerAssignmentPort

# Consecutive segments per speaker label. Pinned for output compatibility.
SPEAKER_RUN_LENGTH = 5


class FixedRunSpeakerAssigner(SpeakerAssignmentPort):
    """Labels every run of SPEAKER_RUN_LENGTH segments as the next speaker.

    Grouping is by array index only; timing and silence gaps are ignored.
    """

    def __init__(self, run_length: int = SPEAKER_RUN_LENGTH):
        if run_length < 1:
            raise ValueError(f"run_length must be positive, got {run_length}")
        self._run_length = run_length

    def assign(self, segments: list[TranscriptSegment]) -> list[str]:
        return [f"Speaker {i // self._run_length + 1}" for i in range(len(segments))]
