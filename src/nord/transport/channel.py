"""Byte channel abstraction and its HTTP implementation.

The action pipeline only needs one operation: send authenticated bytes and
receive the framed receipt bytes. Timeouts and cancellation belong to the
channel; the pipeline never retries.
"""

from abc import ABC, abstractmethod
from typing import Self

import aiohttp

from nord.logging import get_logger

logger = get_logger(__name__)


class ByteChannel(ABC):
    """Request/response byte transport for the action endpoint."""

    @abstractmethod
    async def send(self, payload: bytes) -> bytes:
        """Send ``payload`` and return the raw response bytes."""
        ...


class HttpByteChannel(ByteChannel):
    """POSTs framed action bytes to ``{base_url}/action`` via aiohttp.

    The body is binary but labelled ``application/json``, the header the Nord
    web server has always received from its clients.

    Non-2xx responses raise ``aiohttp.ClientResponseError`` unchanged.

    Args:
        base_url: Web server root, e.g. ``http://localhost:3000``.
        timeout_seconds: Total timeout for one round trip.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 10.0) -> None:
        self._url = f"{base_url.rstrip('/')}/action"
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    @property
    def url(self) -> str:
        return self._url

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def send(self, payload: bytes) -> bytes:
        session = self._get_session()
        async with session.post(
            self._url,
            data=payload,
            headers={"Content-Type": "application/json"},
        ) as response:
            if response.status >= 400:
                logger.warning(
                    "action_request_failed", url=self._url, status=response.status
                )
            response.raise_for_status()
            return await response.read()

    async def close(self) -> None:
        """Close the underlying HTTP session. Must be called to avoid leaks."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
