import asyncio
import logging
from typing import Optional, Protocol

import aiohttp
import httpx

from .errors import HttpStatusError, TransportTimeout, Unreachable

logger = logging.getLogger(__name__)

_TCP_LIMIT = 100


class Transport(Protocol):
    async def fetch(self, url: str, timeout_seconds: float) -> bytes:
        """GET ``url`` once and return the body of a 2xx response.

        Raises Unreachable, TransportTimeout or HttpStatusError; anything else
        propagates unchanged. Implementations must not retry.
        """


def _raise_for_status(status: int, url: str, text: str) -> None:
    if 200 <= status < 300:
        return
    logger.warning("Weather API returned %s for %s: %s", status, url, text[:200])
    raise HttpStatusError(status, f"Weather API returned {status}")


class HttpxTransport:
    """Transport over httpx. Without an injected client a short-lived one is opened per call."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client

    async def fetch(self, url: str, timeout_seconds: float) -> bytes:
        async def _fetch(c: httpx.AsyncClient) -> httpx.Response:
            return await c.get(url, timeout=timeout_seconds)

        try:
            if self._client is None:
                async with httpx.AsyncClient() as local_client:
                    resp = await _fetch(local_client)
            else:
                resp = await _fetch(self._client)
        except httpx.TimeoutException as e:
            raise TransportTimeout(f"Request to weather API timed out after {timeout_seconds}s") from e
        except httpx.NetworkError as e:
            raise Unreachable(f"Network error while fetching weather: {e}") from e

        _raise_for_status(resp.status_code, url, resp.text)
        return resp.content


class AiohttpTransport:
    """Transport over a shared aiohttp session, created lazily and closed with ``close()``."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._session = session
        self._owns_session = session is None
        self._lock = asyncio.Lock()

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            async with self._lock:
                if self._session is None or self._session.closed:
                    connector = aiohttp.TCPConnector(limit=_TCP_LIMIT, force_close=False)
                    self._session = aiohttp.ClientSession(connector=connector)
                    self._owns_session = True
                    logger.debug("AiohttpTransport: created new aiohttp ClientSession")
        return self._session

    async def fetch(self, url: str, timeout_seconds: float) -> bytes:
        sess = await self.get_session()
        try:
            async with sess.get(url, timeout=aiohttp.ClientTimeout(total=timeout_seconds)) as resp:
                if not 200 <= resp.status < 300:
                    _raise_for_status(resp.status, url, await resp.text())
                return await resp.read()
        except asyncio.TimeoutError as e:
            raise TransportTimeout(f"Request to weather API timed out after {timeout_seconds}s") from e
        except aiohttp.ClientConnectionError as e:
            raise Unreachable(f"Network error while fetching weather: {e}") from e

    async def close(self) -> None:
        if not self._owns_session:
            return
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("AiohttpTransport: ClientSession closed")
        self._session = None
