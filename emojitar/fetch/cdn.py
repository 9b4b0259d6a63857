"""Emoji CDN fetcher.

Files live at ``{cdn_prefix}/{id}.png`` or ``{cdn_prefix}/{id}.gif``. Only a
200 response counts; any other status abandons the emoji. A transport error
while connecting or while the body streams cancels that one fetch and tears
down its connection.
"""

from __future__ import annotations

import logging

import httpx

from emojitar.fetch.base import PayloadFetcher
from emojitar.fetch.cache import PayloadCache
from emojitar.models.archive import FetchResult
from emojitar.models.config import ArchiverConfig
from emojitar.models.emoji import EmojiRef
from emojitar.paths import cdn_filename

logger = logging.getLogger(__name__)

OK_STATUS = 200


class CdnFetcher(PayloadFetcher):
    """Streams emoji payloads from the CDN with httpx."""

    def __init__(
        self,
        config: ArchiverConfig | None = None,
        cache: PayloadCache | None = None,
    ) -> None:
        self.config = config or ArchiverConfig()
        self.cache = cache
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def url_for(self, ref: EmojiRef) -> str:
        return f"{self.config.cdn_prefix.rstrip('/')}/{cdn_filename(ref)}"

    async def fetch(self, ref: EmojiRef) -> FetchResult:
        url = self.url_for(ref)

        if self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug("Cache hit for %s", url)
                return FetchResult.ok(cached)

        buffers: list[bytes] = []
        try:
            async with self.client.stream("GET", url) as response:
                if response.status_code != OK_STATUS:
                    logger.warning("Abandoning %s: HTTP %d", url, response.status_code)
                    return FetchResult.failed(
                        f"HTTP {response.status_code}", status_code=response.status_code
                    )
                async for chunk in response.aiter_bytes():
                    buffers.append(chunk)
        except httpx.TransportError as e:
            logger.warning("Cancelled %s: %s", url, e)
            return FetchResult.failed(f"{type(e).__name__}: {e}", cancelled=True)

        payload = b"".join(buffers)
        logger.debug("Fetched %s (%d bytes)", url, len(payload))
        if self.cache is not None:
            self.cache.set(url, payload)
            logger.debug("Cached %s (%d entries)", url, len(self.cache))
        return FetchResult.ok(payload)
