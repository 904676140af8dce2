"""ProcessSubmissionUseCase: orchestrates the full processing pipeline.

Accepts all ports via dependency injection. One call handles one
submission, strictly in order: normalize -> transcribe -> segment ->
summarize -> assemble. Any stage failure propagates unchanged and no
partial result is produced.
"""

import asyncio
import logging
import mimetypes
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import httpx

from audio_normalizer import AudioNormalizer
from domain.errors import PipelineError, UnavailableSourceError
from domain.models import (
    AudioAsset, FileSubmission, ProcessingResult, RemoteSubmission,
    SourceMetadata, Submission, SummaryResult, Transcript,
)
from ports.progress import ProgressPort
from ports.source import SourceResolverPort
from ports.transcription import TranscriptionPort
from post_processing import format_duration, format_transcript
from summary_interpreter import SummaryInterpreter
from transcript_segmenter import TranscriptSegmenter

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_TITLE = "Remote Recording"

STAGE_RESOLVING = "Extracting recording metadata..."
STAGE_DOWNLOADING = "Downloading audio stream..."
STAGE_NORMALIZING = "Processing audio..."
STAGE_TRANSCRIBING = "Transcribing speech to text..."
STAGE_SEGMENTING = "Detecting speakers..."
STAGE_SUMMARIZING = "Generating AI summary..."
STAGE_COMPLETE = "Complete"


class ProcessSubmissionUseCase:
    def __init__(
        self,
        normalizer: AudioNormalizer,
        transcription: TranscriptionPort,
        segmenter: TranscriptSegmenter,
        interpreter: SummaryInterpreter,
        progress: ProgressPort,
        source_resolver: Optional[SourceResolverPort] = None,
    ):
        self._normalizer = normalizer
        self._transcription = transcription
        self._segmenter = segmenter
        self._interpreter = interpreter
        self._progress = progress
        self._source_resolver = source_resolver

    async def execute(self, submission: Submission) -> ProcessingResult:
        job_id = uuid.uuid4().hex[:12]
        started = time.monotonic()

        # 1. Obtain raw bytes
        if isinstance(submission, RemoteSubmission):
            metadata, raw_audio = await self._fetch_remote(job_id, started, submission.url)
            filename = f"{metadata.title}.wav"
            mime_type = mimetypes.guess_type(submission.url)[0]
            source, original_url, title = "url", submission.url, metadata.title
        elif isinstance(submission, FileSubmission):
            raw_audio = submission.content
            filename = submission.filename
            mime_type = submission.mime_type
            source, original_url, title = "file", None, None
        else:
            raise TypeError(f"Unsupported submission type: {type(submission).__name__}")

        # 2. Normalize (CPU-bound decode runs off the event loop)
        self._report(job_id, started, STAGE_NORMALIZING, detail=filename)
        audio: AudioAsset = await asyncio.to_thread(self._normalizer.normalize, raw_audio, mime_type)

        # 3. Transcribe
        self._report(job_id, started, STAGE_TRANSCRIBING, detail=self._transcription.model_name())
        upload_name = f"{_stem(filename)}{audio.extension}"
        raw_transcription = await self._transcription.transcribe(audio, upload_name)

        # 4. Segment + speakers
        self._report(job_id, started, STAGE_SEGMENTING)
        transcript: Transcript = self._segmenter.segment(
            raw_transcription.segments,
            full_text=raw_transcription.text,
            language=raw_transcription.language,
        )

        # 5. Summarize
        self._report(job_id, started, STAGE_SUMMARIZING)
        summary: SummaryResult = await self._interpreter.summarize(
            transcript.full_text, list(transcript.speakers)
        )

        # 6. Assemble
        result = ProcessingResult(
            id=job_id,
            filename=filename,
            duration=format_duration(audio.duration),
            participants=len(transcript.speakers),
            transcript=format_transcript(transcript.segments),
            summary=summary.summary,
            key_points=summary.key_points,
            topics=summary.topics,
            sentiment=summary.sentiment,
            action_items=summary.action_items,
            speaker_names=summary.participants,
            language=transcript.language,
            confidence=transcript.confidence,
            timestamp=datetime.now(timezone.utc).isoformat(),
            source=source,
            original_url=original_url,
            title=title,
        )
        self._report(job_id, started, STAGE_COMPLETE, progress=1.0)
        return result

    def _report(
        self,
        job_id: str,
        started: float,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        self._progress.report(
            job_id, stage, progress=progress, detail=detail, elapsed=time.monotonic() - started
        )

    async def _fetch_remote(self, job_id: str, started: float, url: str) -> tuple[SourceMetadata, bytes]:
        if self._source_resolver is None:
            raise UnavailableSourceError("Remote submissions are not configured")

        self._report(job_id, started, STAGE_RESOLVING, detail=url)
        try:
            recording_id = self._source_resolver.recording_id(url)
        except PipelineError as e:
            raise UnavailableSourceError(f"Unable to access recording audio: {e}") from e

        try:
            metadata = await self._source_resolver.resolve_metadata(recording_id)
        except (PipelineError, httpx.HTTPError) as e:
            logger.warning(f"Metadata lookup failed for {recording_id}, using basic metadata: {e}")
            metadata = SourceMetadata(recording_id=recording_id, title=DEFAULT_REMOTE_TITLE)

        self._report(job_id, started, STAGE_DOWNLOADING, detail=metadata.title)
        try:
            audio_url = await self._source_resolver.resolve_audio_url(recording_id)
            raw_audio = await self._source_resolver.fetch_bytes(audio_url)
        except (PipelineError, httpx.HTTPError) as e:
            logger.error(f"Failed to extract audio for {recording_id}: {e}")
            raise UnavailableSourceError(
                "Unable to access recording audio. The recording may be private, "
                "expired, or not available for download."
            ) from e

        if not raw_audio:
            raise UnavailableSourceError(f"No audio data available for {recording_id}")
        return metadata, raw_audio


def _stem(filename: str) -> str:
    name = filename.rsplit("/", 1)[-1]
    return name.rsplit(".", 1)[0] if "." in name[1:] else name
