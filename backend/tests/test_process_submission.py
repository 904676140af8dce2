"""Tests for the end-to-end submission pipeline with fake providers."""

from unittest.mock import MagicMock

import pytest

from adapters.ffmpeg.audio import FFmpegAudioAdapter
from adapters.local.fixed_run_speakers import FixedRunSpeakerAssigner
from adapters.local.log_progress import LogProgressAdapter
from audio_normalizer import AudioNormalizer
from domain.errors import (
    DecodeError, NotFoundError, SummaryProviderError, TranscriptionProviderError,
    UnavailableSourceError,
)
from domain.models import (
    FileSubmission, ProviderTranscription, RemoteSubmission, Sentiment,
)
from summary_interpreter import SummaryInterpreter
from transcript_segmenter import TranscriptSegmenter
from use_cases.process_submission import (
    STAGE_COMPLETE, STAGE_DOWNLOADING, STAGE_NORMALIZING, STAGE_RESOLVING,
    STAGE_SEGMENTING, STAGE_SUMMARIZING, STAGE_TRANSCRIBING, ProcessSubmissionUseCase,
)

from conftest import FakeSourceResolver, FakeSummary, FakeTranscription, RecordingProgress

SUMMARY_JSON = (
    '{"summary": "A short greeting.", "keyPoints": ["Greeting"], "topics": ["Small talk"], '
    '"sentiment": "positive", "actionItems": []}'
)

PROVIDER_RESULT = ProviderTranscription(
    text="Hello. How are you Fine?",
    segments=[
        {"start": 0, "end": 2, "text": "Hello."},
        {"start": 2, "end": 5, "text": "How are you"},
        {"start": 5, "end": 6, "text": "Fine?"},
    ],
    language="en",
)


def build_use_case(audio=None, transcription=None, summary=None, resolver=None, progress=None):
    return ProcessSubmissionUseCase(
        normalizer=AudioNormalizer(audio or FFmpegAudioAdapter()),
        transcription=transcription or FakeTranscription(PROVIDER_RESULT),
        segmenter=TranscriptSegmenter(FixedRunSpeakerAssigner()),
        interpreter=SummaryInterpreter(summary or FakeSummary(SUMMARY_JSON)),
        progress=progress or RecordingProgress(),
        source_resolver=resolver,
    )


class TestFileSubmission:
    """Tests for uploaded-file processing."""

    @pytest.mark.asyncio
    async def test_full_pipeline(self, wav_bytes):
        transcription = FakeTranscription(PROVIDER_RESULT)
        progress = RecordingProgress()
        use_case = build_use_case(transcription=transcription, progress=progress)

        result = await use_case.execute(
            FileSubmission(filename="talk.mp3", content=wav_bytes, mime_type="audio/mpeg")
        )

        assert result.filename == "talk.mp3"
        assert result.duration == "00:02"
        assert result.participants == 1
        assert result.speaker_names == ("Speaker 1",)
        assert result.transcript.startswith("[00:00] Speaker 1: Hello.\n\n[00:02] Speaker 1: How are you")
        assert result.summary == "A short greeting."
        assert result.key_points == ("Greeting",)
        assert result.topics == ("Small talk",)
        assert result.sentiment == Sentiment.POSITIVE
        assert result.action_items == ()
        assert result.confidence == pytest.approx((0.95 + 0.9 + 0.95) / 3)
        assert result.source == "file"
        assert result.original_url is None
        assert result.title is None
        assert result.id and result.timestamp

        audio, upload_name = transcription.calls[0]
        assert upload_name == "talk.wav"
        assert audio.mime_type == "audio/wav"
        assert audio.content[:4] == b"RIFF"
        assert progress.stages == [
            STAGE_NORMALIZING, STAGE_TRANSCRIBING, STAGE_SEGMENTING, STAGE_SUMMARIZING, STAGE_COMPLETE,
        ]

    @pytest.mark.asyncio
    async def test_elapsed_time_reported_per_stage(self, wav_bytes):
        progress = RecordingProgress()
        use_case = build_use_case(progress=progress)

        await use_case.execute(FileSubmission(filename="talk.wav", content=wav_bytes))

        assert all(e is not None and e >= 0 for e in progress.elapsed)
        assert progress.elapsed == sorted(progress.elapsed)

    @pytest.mark.asyncio
    async def test_failed_job_leaves_shared_reporter_unchanged(self, wav_bytes):
        """A job that fails after its first report must not leave state behind."""
        reporter = LogProgressAdapter()
        before = dict(vars(reporter))
        use_case = build_use_case(
            transcription=FakeTranscription(error=TranscriptionProviderError("timeout")),
            progress=reporter,
        )

        for _ in range(3):
            with pytest.raises(TranscriptionProviderError):
                await use_case.execute(FileSubmission(filename="talk.wav", content=wav_bytes))

        assert vars(reporter) == before

    @pytest.mark.asyncio
    async def test_empty_transcription(self, wav_bytes):
        use_case = build_use_case(transcription=FakeTranscription(ProviderTranscription(text="", segments=[])))

        result = await use_case.execute(FileSubmission(filename="quiet.wav", content=wav_bytes))

        assert result.participants == 0
        assert result.transcript == ""
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_decode_error_stops_pipeline(self):
        audio = MagicMock()
        audio.decode.side_effect = DecodeError("unreadable")
        transcription = FakeTranscription(PROVIDER_RESULT)
        use_case = build_use_case(audio=audio, transcription=transcription)

        with pytest.raises(DecodeError):
            await use_case.execute(FileSubmission(filename="bad.mp3", content=b"junk"))

        assert transcription.calls == []

    @pytest.mark.asyncio
    async def test_transcription_error_propagates_unchanged(self, wav_bytes):
        error = TranscriptionProviderError("quota exceeded", status_code=429)
        summary = FakeSummary(SUMMARY_JSON)
        use_case = build_use_case(transcription=FakeTranscription(error=error), summary=summary)

        with pytest.raises(TranscriptionProviderError) as exc_info:
            await use_case.execute(FileSubmission(filename="talk.wav", content=wav_bytes))

        assert exc_info.value is error
        assert summary.prompts == []

    @pytest.mark.asyncio
    async def test_empty_summary_is_provider_error(self, wav_bytes):
        use_case = build_use_case(summary=FakeSummary(""))

        with pytest.raises(SummaryProviderError):
            await use_case.execute(FileSubmission(filename="talk.wav", content=wav_bytes))

    @pytest.mark.asyncio
    async def test_unknown_submission_type(self):
        with pytest.raises(TypeError):
            await build_use_case().execute("talk.wav")


class TestRemoteSubmission:
    """Tests for URL submissions."""

    @pytest.mark.asyncio
    async def test_remote_recording(self, wav_bytes):
        resolver = FakeSourceResolver(audio=wav_bytes, title="Weekly Panel")
        transcription = FakeTranscription(PROVIDER_RESULT)
        progress = RecordingProgress()
        use_case = build_use_case(transcription=transcription, resolver=resolver, progress=progress)

        result = await use_case.execute(RemoteSubmission(url="https://example.com/panel"))

        assert result.source == "url"
        assert result.original_url == "https://example.com/panel"
        assert result.title == "Weekly Panel"
        assert result.filename == "Weekly Panel.wav"
        assert resolver.fetched == ["https://media.example.com/panel.wav"]
        assert transcription.calls[0][1] == "Weekly Panel.wav"
        assert progress.stages[:3] == [STAGE_RESOLVING, STAGE_DOWNLOADING, STAGE_NORMALIZING]

    @pytest.mark.asyncio
    async def test_unreachable_audio_skips_normalization(self):
        audio = MagicMock()
        transcription = FakeTranscription(PROVIDER_RESULT)
        resolver = FakeSourceResolver(error=NotFoundError("404 Not Found"))
        use_case = build_use_case(audio=audio, transcription=transcription, resolver=resolver)

        with pytest.raises(UnavailableSourceError) as exc_info:
            await use_case.execute(RemoteSubmission(url="https://example.com/private"))

        assert "may be private, expired" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, NotFoundError)
        audio.decode.assert_not_called()
        assert transcription.calls == []

    @pytest.mark.asyncio
    async def test_empty_download(self):
        use_case = build_use_case(resolver=FakeSourceResolver(audio=b""))

        with pytest.raises(UnavailableSourceError):
            await use_case.execute(RemoteSubmission(url="https://example.com/empty"))

    @pytest.mark.asyncio
    async def test_no_resolver_configured(self):
        with pytest.raises(UnavailableSourceError):
            await build_use_case().execute(RemoteSubmission(url="https://example.com/a.mp3"))
