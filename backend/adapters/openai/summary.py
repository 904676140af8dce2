"""ChatCompletionSummaryAdapter: OpenAI chat completions over JSON HTTP."""

import logging
from typing import Optional

import httpx

from adapters.openai.errors import error_message
from domain.errors import ConfigurationError, SummaryProviderError
from ports.http import HttpTransportPort
from ports.summary import SummaryPort

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4"


class ChatCompletionSummaryAdapter(SummaryPort):
    def __init__(
        self,
        http: HttpTransportPort,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ):
        self._http = http
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        if not self._api_key:
            raise ConfigurationError(
                "Summary provider API key not configured. Set OPENAI_API_KEY."
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        body = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        logger.info(f"Calling {self._model} for summary ({len(prompt)} prompt characters)")
        try:
            response = await self._http.request(
                "POST",
                self._url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
            )
        except httpx.HTTPError as e:
            raise SummaryProviderError(f"Summary request failed: {e}") from e

        if response.status_code != 200:
            raise SummaryProviderError(
                f"Summary generation failed: {error_message(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SummaryProviderError("Summary response was not JSON") from e

        content = None
        if isinstance(payload, dict):
            choices = payload.get("choices")
            first = choices[0] if isinstance(choices, list) and choices else None
            message = first.get("message") if isinstance(first, dict) else None
            if isinstance(message, dict):
                content = message.get("content")

        if not isinstance(content, str) or not content.strip():
            raise SummaryProviderError("No summary content received from API")
        return content
