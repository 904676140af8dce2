"""Turns a provider's raw time-aligned segments into a speaker-labelled Transcript."""

import logging
from dataclasses import replace
from typing import Any, Iterable

from domain.models import Transcript, TranscriptSegment
from ports.diarization import SpeakerAssignmentPort
from post_processing import (
    coerce_provider_segments, segment_confidence, average_confidence,
    collect_speakers,
)

logger = logging.getLogger(__name__)


class TranscriptSegmenter:
    def __init__(self, speakers: SpeakerAssignmentPort):
        self._speakers = speakers

    def segment(
        self,
        provider_segments: Iterable[Any],
        full_text: str = "",
        language: str = "en",
    ) -> Transcript:
        """Build a Transcript. Malformed segments are defaulted, never rejected."""
        segments = [
            TranscriptSegment(
                start=raw["start"],
                end=raw["end"],
                text=raw["text"],
                speaker="",
                confidence=segment_confidence(raw["raw_text"], raw["start"], raw["end"]),
            )
            for raw in coerce_provider_segments(provider_segments)
        ]

        labels = self._speakers.assign(segments)
        if len(labels) != len(segments):
            raise ValueError(
                f"Speaker assigner returned {len(labels)} labels for {len(segments)} segments"
            )
        segments = [replace(seg, speaker=label) for seg, label in zip(segments, labels)]

        speakers = collect_speakers(segments)
        confidence = average_confidence(segments)
        logger.info(
            f"Segmented transcript: {len(segments)} segments, "
            f"{len(speakers)} speakers, confidence {confidence:.2f}"
        )
        return Transcript(
            full_text=full_text or "",
            segments=tuple(segments),
            speakers=tuple(speakers),
            language=language or "en",
            confidence=confidence,
        )
