"""WhisperTranscriptionAdapter: OpenAI audio transcription over multipart HTTP."""

import logging
from typing import Optional

import httpx

from adapters.openai.errors import error_message
from domain.errors import ConfigurationError, TranscriptionProviderError
from domain.models import AudioAsset, ProviderTranscription
from ports.http import HttpTransportPort
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "whisper-1"


class WhisperTranscriptionAdapter(TranscriptionPort):
    def __init__(
        self,
        http: HttpTransportPort,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        language: Optional[str] = "en",
    ):
        self._http = http
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/audio/transcriptions"
        self._model = model
        self._language = language

    def model_name(self) -> str:
        return self._model

    async def transcribe(self, audio: AudioAsset, filename: str) -> ProviderTranscription:
        if not self._api_key:
            raise ConfigurationError(
                "Transcription provider API key not configured. Set OPENAI_API_KEY."
            )

        data = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities[]": "segment",
        }
        if self._language:
            data["language"] = self._language

        logger.info(f"Sending {len(audio.content)} bytes ({audio.duration:.1f}s) to {self._model}")
        try:
            response = await self._http.request(
                "POST",
                self._url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                data=data,
                files={"file": (filename, audio.content, audio.mime_type)},
            )
        except httpx.HTTPError as e:
            raise TranscriptionProviderError(f"Transcription request failed: {e}") from e

        if response.status_code != 200:
            raise TranscriptionProviderError(
                f"Transcription failed: {error_message(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TranscriptionProviderError("Transcription response was not JSON") from e
        if not isinstance(payload, dict):
            raise TranscriptionProviderError("Transcription response was not a JSON object")

        segments = payload.get("segments")
        text = payload.get("text")
        result = ProviderTranscription(
            text=text if isinstance(text, str) else "",
            segments=segments if isinstance(segments, list) else [],
            language=payload.get("language") or "en",
        )
        logger.info(
            f"Transcription complete: {len(result.text)} characters, "
            f"{len(result.segments)} segments, language={result.language}"
        )
        return result
