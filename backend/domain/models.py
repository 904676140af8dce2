"""Framework-agnostic domain models for Echo Digest.

Processing logic works on these dataclasses only. Pydantic DTOs in
models.py describe the API response schema, with mappers at the boundary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

import numpy as np


@dataclass(frozen=True)
class PcmBuffer:
    """Decoded linear PCM audio: one float array per channel, samples in [-1, 1]."""
    channel_data: tuple[np.ndarray, ...]
    sample_rate: int

    @property
    def num_channels(self) -> int:
        return len(self.channel_data)

    @property
    def num_frames(self) -> int:
        return len(self.channel_data[0]) if self.channel_data else 0

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.num_frames / self.sample_rate


@dataclass(frozen=True)
class AudioAsset:
    """Canonical audio handed to the transcription provider."""
    content: bytes
    mime_type: str
    extension: str
    duration: float
    sample_rate: int
    channels: int


@dataclass(frozen=True)
class TranscriptSegment:
    """A single transcribed speech span with timing, speaker and heuristic score."""
    start: float
    end: float
    text: str
    speaker: str
    confidence: float = 0.0


@dataclass(frozen=True)
class Transcript:
    full_text: str
    segments: tuple[TranscriptSegment, ...] = ()
    speakers: tuple[str, ...] = ()
    language: str = "en"
    confidence: float = 0.0


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    key_points: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    sentiment: Sentiment = Sentiment.NEUTRAL
    action_items: tuple[str, ...] = ()
    participants: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProviderTranscription:
    """Raw transcription provider payload. Segments stay loosely typed."""
    text: str
    segments: list[Mapping[str, Any]] = field(default_factory=list)
    language: str = "en"


@dataclass(frozen=True)
class FileSubmission:
    filename: str
    content: bytes
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class RemoteSubmission:
    url: str


Submission = Union[FileSubmission, RemoteSubmission]


@dataclass(frozen=True)
class SourceMetadata:
    recording_id: str
    title: str


@dataclass(frozen=True)
class ProcessingResult:
    """Terminal record for one submission. Never mutated after assembly."""
    id: str
    filename: str
    duration: str
    participants: int
    transcript: str
    summary: str
    key_points: tuple[str, ...]
    topics: tuple[str, ...]
    sentiment: Sentiment
    action_items: tuple[str, ...]
    speaker_names: tuple[str, ...]
    language: str
    confidence: float
    timestamp: str
    source: str
    original_url: Optional[str] = None
    title: Optional[str] = None
