"""OpenAI-compatible provider adapters (Whisper transcription, chat completions)."""

from .transcription import WhisperTranscriptionAdapter
from .summary import ChatCompletionSummaryAdapter

__all__ = ["WhisperTranscriptionAdapter", "ChatCompletionSummaryAdapter"]
