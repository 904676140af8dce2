"""HttpSourceResolver: treats a submitted URL as a directly downloadable recording."""

import logging
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

import httpx

from domain.errors import NotFoundError
from domain.models import SourceMetadata
from ports.http import HttpTransportPort
from ports.source import SourceResolverPort

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Remote Recording"


class HttpSourceResolver(SourceResolverPort):
    def __init__(self, http: HttpTransportPort):
        self._http = http

    def recording_id(self, url: str) -> str:
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise NotFoundError(f"Not a retrievable recording URL: {url!r}")
        return url

    async def resolve_metadata(self, recording_id: str) -> SourceMetadata:
        name = PurePosixPath(unquote(urlparse(recording_id).path)).stem
        return SourceMetadata(recording_id=recording_id, title=name or DEFAULT_TITLE)

    async def resolve_audio_url(self, recording_id: str) -> str:
        return recording_id

    async def fetch_bytes(self, url: str) -> bytes:
        logger.info(f"Downloading audio from {url}")
        try:
            response = await self._http.request("GET", url)
        except httpx.HTTPError as e:
            raise NotFoundError(f"Failed to fetch audio: {e}") from e

        if response.status_code != 200:
            raise NotFoundError(
                f"Failed to fetch audio: {response.status_code} {response.reason_phrase}"
            )
        logger.info(f"Downloaded {len(response.content)} bytes")
        return response.content
