"""DirectHttpAdapter: calls endpoints directly with httpx."""

import logging
from typing import Any, Optional

import httpx

from ports.http import HttpTransportPort

logger = logging.getLogger(__name__)


class DirectHttpAdapter(HttpTransportPort):
    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        json: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {url}")
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport, follow_redirects=True
        ) as client:
            return await client.request(
                method, url, headers=headers, json=json, data=data, files=files
            )
