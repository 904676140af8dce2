"""Post-processing helpers for transcription segments.

Functions for coercing provider segments, heuristic confidence scoring,
speaker collection, and timestamp/duration formatting.
"""

import math
import logging
from typing import Any, Iterable, List, Mapping

from domain.models import TranscriptSegment

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.8
RATE_BONUS = 0.1
PUNCTUATION_BONUS = 0.05
MAX_CONFIDENCE = 0.95

# Characters per second of segment duration. Outside this open interval the
# segment is either mostly silence or implausibly dense.
MIN_SPEECH_RATE = 2
MAX_SPEECH_RATE = 8


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def coerce_provider_segments(raw_segments: Iterable[Any]) -> List[dict]:
    """Normalize loosely-typed provider segments into start/end/text dicts.

    Missing or malformed ``start``/``end`` become 0 and missing ``text``
    becomes "". ``start`` is clamped to >= 0 and ``end`` to >= ``start``.
    Results are stably ordered by start time.

    Args:
        raw_segments: Provider segment mappings (anything else is treated as empty).

    Returns:
        List of dicts with float ``start``/``end``, display ``text`` (stripped)
        and ``raw_text`` exactly as the provider sent it.
    """
    coerced = []
    skipped = 0
    for raw in raw_segments or []:
        if not isinstance(raw, Mapping):
            skipped += 1
            raw = {}
        start = max(_as_float(raw.get("start")), 0.0)
        end = max(_as_float(raw.get("end")), start)
        text = raw.get("text")
        raw_text = text if isinstance(text, str) else ""
        coerced.append({
            "start": start,
            "end": end,
            "text": raw_text.strip(),
            "raw_text": raw_text,
        })

    if skipped:
        logger.warning(f"Defaulted {skipped} malformed provider segments")

    coerced.sort(key=lambda s: s["start"])
    return coerced


def segment_confidence(text: str, start: float, end: float) -> float:
    """Heuristic confidence for one segment.

    The provider reports no confidence, so the score is estimated from the
    speech rate (characters per second) and terminal punctuation. ``text`` is
    the provider text as sent; leading whitespace counts toward the rate.
    """
    duration = end - start
    rate = len(text) / max(duration, 1)

    confidence = BASE_CONFIDENCE
    if MIN_SPEECH_RATE < rate < MAX_SPEECH_RATE:
        confidence += RATE_BONUS
    if text.rstrip().endswith((".", "?")):
        confidence += PUNCTUATION_BONUS
    return min(confidence, MAX_CONFIDENCE)


def average_confidence(segments: List[TranscriptSegment]) -> float:
    if not segments:
        return 0.0
    return sum(seg.confidence for seg in segments) / len(segments)


def collect_speakers(segments: Iterable[TranscriptSegment]) -> List[str]:
    """Distinct speaker labels in order of first appearance."""
    return list(dict.fromkeys(seg.speaker for seg in segments))


def format_timestamp(seconds: float) -> str:
    """Format as MM:SS. The minute field widens past 99 instead of wrapping."""
    total = int(max(seconds, 0.0))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_transcript(segments: Iterable[TranscriptSegment]) -> str:
    """Render segments as "[MM:SS] Speaker: text" lines separated by blank lines."""
    return "\n\n".join(
        f"[{format_timestamp(seg.start)}] {seg.speaker or 'Speaker'}: {seg.text}"
        for seg in segments
    )


def format_duration(seconds: float) -> str:
    """Human-readable recording length: MM:SS, or H:MM:SS from one hour up."""
    total = int(max(seconds, 0.0))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
