"""HttpTransportPort: abstract interface for outbound HTTP calls.

Selected once at configuration time: direct calls, or calls wrapped for a
forwarding endpoint.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx


class HttpTransportPort(ABC):
    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        json: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Perform one request and return the fully read response."""
