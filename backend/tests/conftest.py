"""Shared fixtures and fakes for pipeline tests."""

import io
from typing import Optional

import numpy as np
import pytest
import soundfile

from domain.models import (
    AudioAsset, ProcessingResult, ProviderTranscription, Sentiment, SourceMetadata,
)
from ports.progress import ProgressPort
from ports.source import SourceResolverPort
from ports.summary import SummaryPort
from ports.transcription import TranscriptionPort


def make_wav_bytes(duration: float = 1.0, sample_rate: int = 16000, channels: int = 1) -> bytes:
    """A short sine tone encoded as 16-bit WAV by libsndfile."""
    t = np.arange(int(duration * sample_rate)) / sample_rate
    tone = 0.25 * np.sin(2 * np.pi * 440 * t)
    data = np.stack([tone] * channels, axis=1).astype(np.float32)
    buf = io.BytesIO()
    soundfile.write(buf, data, sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()


class RecordingProgress(ProgressPort):
    def __init__(self):
        self.stages: list[str] = []
        self.elapsed: list[Optional[float]] = []

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
        elapsed: Optional[float] = None,
    ) -> None:
        self.stages.append(stage)
        self.elapsed.append(elapsed)


class FakeTranscription(TranscriptionPort):
    def __init__(self, result: Optional[ProviderTranscription] = None, error: Optional[Exception] = None):
        self.result = result or ProviderTranscription(text="", segments=[], language="en")
        self.error = error
        self.calls: list[tuple[AudioAsset, str]] = []

    async def transcribe(self, audio: AudioAsset, filename: str) -> ProviderTranscription:
        self.calls.append((audio, filename))
        if self.error:
            raise self.error
        return self.result

    def model_name(self) -> str:
        return "fake-whisper"


class FakeSummary(SummaryPort):
    def __init__(self, content: str = "", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.prompts: list[tuple[str, Optional[str]]] = []

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        self.prompts.append((prompt, system_prompt))
        if self.error:
            raise self.error
        return self.content


class FakeSourceResolver(SourceResolverPort):
    def __init__(self, audio: bytes = b"", title: str = "Weekly Panel", error: Optional[Exception] = None):
        self.audio = audio
        self.title = title
        self.error = error
        self.fetched: list[str] = []

    def recording_id(self, url: str) -> str:
        return url.rsplit("/", 1)[-1]

    async def resolve_metadata(self, recording_id: str) -> SourceMetadata:
        return SourceMetadata(recording_id=recording_id, title=self.title)

    async def resolve_audio_url(self, recording_id: str) -> str:
        return f"https://media.example.com/{recording_id}.wav"

    async def fetch_bytes(self, url: str) -> bytes:
        self.fetched.append(url)
        if self.error:
            raise self.error
        return self.audio


@pytest.fixture
def wav_factory():
    return make_wav_bytes


@pytest.fixture
def wav_bytes() -> bytes:
    return make_wav_bytes(duration=2.0)


@pytest.fixture
def audio_asset() -> AudioAsset:
    return AudioAsset(
        content=make_wav_bytes(duration=0.5),
        mime_type="audio/wav",
        extension=".wav",
        duration=0.5,
        sample_rate=16000,
        channels=1,
    )


@pytest.fixture
def processing_result() -> ProcessingResult:
    return ProcessingResult(
        id="abc123def456",
        filename="talk.mp3",
        duration="45:32",
        participants=2,
        transcript="[00:00] Speaker 1: Welcome everyone.\n\n[00:05] Speaker 2: Thanks for having me.",
        summary="A panel about AI and creativity.",
        key_points=("AI augments people", "Education matters"),
        topics=("AI",),
        sentiment=Sentiment.MIXED,
        action_items=("Publish notes",),
        speaker_names=("Speaker 1", "Speaker 2"),
        language="en",
        confidence=0.9,
        timestamp="2024-05-01T12:00:00+00:00",
        source="file",
    )
