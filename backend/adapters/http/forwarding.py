"""ForwardingHttpAdapter: routes every call through a request-forwarding endpoint.

Each outbound request is encoded as it would go on the wire, then wrapped in
one POST to the forwarder:

    {"url": ..., "method": ..., "headers": {...}, "body": ...}

Text bodies (JSON) are sent as-is. Binary bodies such as multipart audio
uploads are base64 encoded and flagged with ``"bodyEncoding": "base64"``.
"""

import base64
import logging
from typing import Any, Optional

import httpx

from ports.http import HttpTransportPort

logger = logging.getLogger(__name__)

# Recomputed by the forwarder for the final hop.
_HOP_HEADERS = {"host", "content-length", "transfer-encoding", "connection"}


def build_envelope(request: httpx.Request) -> dict[str, Any]:
    """Describe an encoded httpx request as a forwarding payload."""
    body = request.read()
    envelope: dict[str, Any] = {
        "url": str(request.url),
        "method": request.method,
        "headers": {
            k: v for k, v in request.headers.items() if k.lower() not in _HOP_HEADERS
        },
        "body": None,
    }
    if body:
        try:
            envelope["body"] = body.decode("utf-8")
        except UnicodeDecodeError:
            envelope["body"] = base64.b64encode(body).decode("ascii")
            envelope["bodyEncoding"] = "base64"
    return envelope


class ForwardingHttpAdapter(HttpTransportPort):
    def __init__(
        self,
        forward_url: str,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._forward_url = forward_url
        self._access_token = access_token
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
        inner = httpx.Request(method, url, headers=headers, json=json, data=data, files=files)
        envelope = build_envelope(inner)

        proxy_headers = {"Content-Type": "application/json"}
        if self._access_token:
            proxy_headers["Authorization"] = f"Bearer {self._access_token}"

        logger.debug(f"Forwarding {method} {url} via {self._forward_url}")
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            return await client.post(self._forward_url, headers=proxy_headers, json=envelope)
