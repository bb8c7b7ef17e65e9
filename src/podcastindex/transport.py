"""
PodcastIndex Transport - the one place an HTTP request is issued.
The query client only hands over a relative path and receives raw bytes.
"""

from typing import Any, Protocol

import aiohttp
from yarl import URL

from podcastindex.auth import PodcastIndexAuth
from podcastindex.utils.get_logger import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    """Performs one authenticated GET for a relative path+query and returns the body."""

    async def get(self, path: str, timeout: float | None = None) -> bytes: ...


class AiohttpTransport:
    """
    Default transport backed by an aiohttp session.

    Signs each request with :class:`PodcastIndexAuth`, issues exactly one GET,
    and raises ``aiohttp.ClientResponseError`` for any non-2xx reply. There is
    no retry, rate limiting or caching at this layer.
    """

    def __init__(
        self,
        auth: PodcastIndexAuth | None = None,
        session: aiohttp.ClientSession | None = None,
        timeout_seconds: float = 10,
    ):
        self.auth = auth or PodcastIndexAuth()
        self._external_session = session is not None
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._external_session:
            await self._session.close()
            self._session = None

    def url_for(self, path: str) -> URL:
        """
        Absolute request URL for a relative path and query.

        The query is already percent-encoded by the client, so it is marked as
        encoded to keep escapes such as %2C intact. Term quotes are the only
        raw characters left and go out as %22.
        """
        raw = f"{self.auth.base_url}/{path.lstrip('/')}"
        return URL(raw.replace('"', "%22"), encoded=True)

    async def get(self, path: str, timeout: float | None = None) -> bytes:
        """
        Make a single signed GET request to the PodcastIndex API.

        Args:
            path: Relative path and query string (e.g. 'search/byterm?q="x"&fulltext')
            timeout: Optional per-call timeout in seconds, overriding the session default

        Returns:
            Raw response body

        Raises:
            aiohttp.ClientResponseError: On a non-2xx status
            aiohttp.ClientError, TimeoutError: On network failure
        """
        session = await self._ensure_session()
        url = self.url_for(path)
        kwargs: dict[str, Any] = {"headers": self.auth.headers()}
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        async with session.get(url, **kwargs) as response:
            if response.status >= 400:
                logger.warning(f"API returned status {response.status} for {path}")
            response.raise_for_status()
            return await response.read()
