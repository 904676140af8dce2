"""Domain <-> DTO mappers and export renderers.

Converts the domain ProcessingResult into the ProcessingResultResponse DTO,
and renders the plain-text and JSON export artifacts.
"""

from datetime import datetime

from domain.models import ProcessingResult, Sentiment
from models import ProcessingResultResponse


def result_to_dto(result: ProcessingResult) -> ProcessingResultResponse:
    """Convert a domain ProcessingResult to its response DTO."""
    return ProcessingResultResponse(
        id=result.id,
        filename=result.filename,
        duration=result.duration,
        participants=result.participants,
        transcript=result.transcript,
        summary=result.summary,
        key_points=list(result.key_points),
        topics=list(result.topics),
        sentiment=result.sentiment.value,
        action_items=list(result.action_items),
        speaker_names=list(result.speaker_names),
        language=result.language,
        confidence=result.confidence,
        timestamp=result.timestamp,
        source=result.source,
        original_url=result.original_url,
        title=result.title,
    )


def dto_to_result(dto: ProcessingResultResponse) -> ProcessingResult:
    """Convert a response DTO back into a domain ProcessingResult."""
    try:
        sentiment = Sentiment(dto.sentiment)
    except ValueError:
        sentiment = Sentiment.NEUTRAL
    return ProcessingResult(
        id=dto.id,
        filename=dto.filename,
        duration=dto.duration,
        participants=dto.participants,
        transcript=dto.transcript,
        summary=dto.summary,
        key_points=tuple(dto.key_points),
        topics=tuple(dto.topics),
        sentiment=sentiment,
        action_items=tuple(dto.action_items),
        speaker_names=tuple(dto.speaker_names),
        language=dto.language,
        confidence=dto.confidence,
        timestamp=dto.timestamp,
        source=dto.source,
        original_url=dto.original_url,
        title=dto.title,
    )


def _export_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).date().isoformat()
    except ValueError:
        return timestamp


def export_filename(result: ProcessingResult, extension: str) -> str:
    """``talk.mp3`` -> ``talk_transcript.txt``."""
    name = result.filename
    stem = name.rsplit(".", 1)[0] if "." in name[1:] else name
    return f"{stem}_transcript.{extension}"


def to_text_export(result: ProcessingResult) -> str:
    """Plain-text export: header fields, summary, key points, full transcript."""
    key_points = "\n".join(f"• {point}" for point in result.key_points)
    return (
        "Transcription\n\n"
        f"File: {result.filename}\n"
        f"Duration: {result.duration}\n"
        f"Participants: {result.participants}\n"
        f"Date: {_export_date(result.timestamp)}\n\n"
        f"--- SUMMARY ---\n{result.summary}\n\n"
        f"--- KEY POINTS ---\n{key_points}\n\n"
        f"--- FULL TRANSCRIPT ---\n{result.transcript}"
    )


def to_json_export(result: ProcessingResult) -> str:
    """JSON export: the serialized ProcessingResult."""
    return result_to_dto(result).model_dump_json(by_alias=True, indent=2)
