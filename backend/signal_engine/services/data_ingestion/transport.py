"""
HTTP Transport

The fetcher only needs "GET this URL and give me JSON". Anything that
implements HttpTransport can be plugged in; AiohttpTransport is the
default used by the running service.
"""

import logging
from typing import Any, Optional, Protocol

import aiohttp

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Request failed at the HTTP level (status, connection, decoding)."""


class HttpTransport(Protocol):
    async def get_json(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        timeout: float = 10.0,
    ) -> Any:
        ...


class AiohttpTransport:
    """
    aiohttp-backed transport with a lazily created, reusable session.
    """

    def __init__(self, default_headers: Optional[dict] = None):
        self._default_headers = default_headers or {}
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self._default_headers)
        return self._session

    async def get_json(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        timeout: float = 10.0,
    ) -> Any:
        session = await self._ensure_session()
        try:
            async with session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise TransportError(f"HTTP {resp.status}: {body[:200]}")
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise TransportError(f"Invalid JSON: {e}") from e

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
