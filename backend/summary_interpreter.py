"""Summary generation and tolerant parsing of the provider's response.

Parsing runs in two stages. ``parse_structured`` looks for a JSON object and
returns ``Parsed`` or ``Unparsed``; an ``Unparsed`` response goes through
``parse_sections``, a line-oriented scan for headed sections and bullets.
Once response text exists, parsing never fails: missing pieces fall back
to placeholder values.
"""

import re
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from domain.errors import SummaryProviderError
from domain.models import Sentiment, SummaryResult
from ports.summary import SummaryPort

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Summary could not be generated."
KEY_POINTS_FALLBACK = "Key points could not be extracted."
TOPICS_FALLBACK = "Topics could not be identified."

SYSTEM_PROMPT = (
    "You are an expert at analyzing conversations and creating comprehensive "
    "summaries. You specialize in recorded audio conversations such as panels, "
    "meetings and social audio rooms."
)

SUMMARY_PROMPT_TEMPLATE = """Please analyze this transcript and provide a comprehensive analysis in the following JSON format:

{{
  "summary": "A detailed 2-3 paragraph summary of the main discussion",
  "keyPoints": ["List of 5-8 key points or takeaways"],
  "topics": ["Main topics discussed"],
  "sentiment": "overall sentiment (positive/negative/neutral/mixed)",
  "actionItems": ["Any action items or next steps mentioned"],
  "participants": ["Key participants and their roles if identifiable"]
}}

Transcript:
{transcript}
{speakers}
Please ensure your response is valid JSON and captures the essence of this conversation."""

# Greedy: from the first "{" to the last "}".
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")
_SENTIMENT_WORD = re.compile(r"(positive|negative|neutral|mixed)")
_BULLET_PREFIX = re.compile(r"^[-•]\s*")
_BULLETS = ("-", "•")


@dataclass(frozen=True)
class Parsed:
    result: SummaryResult


@dataclass(frozen=True)
class Unparsed:
    raw_text: str


ParseOutcome = Union[Parsed, Unparsed]


def build_summary_prompt(transcript: str, speakers: Sequence[str]) -> str:
    speaker_line = f"\nIdentified Speakers: {', '.join(speakers)}\n" if speakers else ""
    return SUMMARY_PROMPT_TEMPLATE.format(transcript=transcript, speakers=speaker_line)


def validate_sentiment(value: Any) -> Sentiment:
    try:
        return Sentiment(value)
    except (TypeError, ValueError):
        return Sentiment.NEUTRAL


def _string_list(value: Any) -> Optional[tuple[str, ...]]:
    if not isinstance(value, list):
        return None
    return tuple(item if isinstance(item, str) else json.dumps(item) for item in value)


def parse_structured(content: str, speakers: Sequence[str]) -> ParseOutcome:
    """Parse the first-to-last brace block as a JSON summary object."""
    match = _JSON_BLOCK.search(content)
    if not match:
        return Unparsed(content)

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON summary response ({e}), falling back to text parsing")
        return Unparsed(content)

    if not isinstance(parsed, dict):
        return Unparsed(content)

    summary = parsed.get("summary")
    participants = _string_list(parsed.get("participants"))
    return Parsed(SummaryResult(
        summary=summary if isinstance(summary, str) and summary else SUMMARY_FALLBACK,
        key_points=_string_list(parsed.get("keyPoints")) or (),
        topics=_string_list(parsed.get("topics")) or (),
        sentiment=validate_sentiment(parsed.get("sentiment")),
        action_items=_string_list(parsed.get("actionItems")) or (),
        participants=participants if participants is not None else tuple(speakers),
    ))


def parse_sections(content: str, speakers: Sequence[str]) -> SummaryResult:
    """Scan free-form text for summary, key point, topic, sentiment and action sections."""
    summary_parts: List[str] = []
    bullets: dict[str, List[str]] = {"keypoints": [], "topics": [], "actions": []}
    sentiment = Sentiment.NEUTRAL
    section = ""

    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        # A header line only moves the cursor; its own text is not collected.
        lowered = trimmed.lower()
        if "summary" in lowered:
            section = "summary"
            continue
        elif "key points" in lowered or "takeaways" in lowered:
            section = "keypoints"
            continue
        elif "topics" in lowered:
            section = "topics"
            continue
        elif "sentiment" in lowered:
            section = "sentiment"
            continue
        elif "action" in lowered:
            section = "actions"
            continue

        is_bullet = trimmed.startswith(_BULLETS)
        if section == "summary" and not is_bullet:
            summary_parts.append(trimmed)
        elif section in bullets and is_bullet:
            bullets[section].append(_BULLET_PREFIX.sub("", trimmed, count=1))
        elif section == "sentiment":
            found = _SENTIMENT_WORD.search(lowered)
            if found:
                sentiment = Sentiment(found.group(1))

    return SummaryResult(
        summary=" ".join(summary_parts) or SUMMARY_FALLBACK,
        key_points=tuple(bullets["keypoints"]) or (KEY_POINTS_FALLBACK,),
        topics=tuple(bullets["topics"]) or (TOPICS_FALLBACK,),
        sentiment=sentiment,
        action_items=tuple(bullets["actions"]),
        participants=tuple(speakers),
    )


def interpret_response(content: str, speakers: Sequence[str]) -> SummaryResult:
    outcome = parse_structured(content, speakers)
    if isinstance(outcome, Parsed):
        return outcome.result
    logger.info("Summary response is not JSON, using section parser")
    return parse_sections(outcome.raw_text, speakers)


class SummaryInterpreter:
    def __init__(self, provider: SummaryPort):
        self._provider = provider

    async def summarize(self, transcript_text: str, speakers: Sequence[str]) -> SummaryResult:
        prompt = build_summary_prompt(transcript_text, speakers)
        content = await self._provider.complete(prompt, system_prompt=SYSTEM_PROMPT)
        if not content or not content.strip():
            raise SummaryProviderError("No summary content received from provider")
        return interpret_response(content, speakers)
