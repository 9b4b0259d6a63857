"""Payload fetcher interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from emojitar.models.archive import FetchResult
from emojitar.models.emoji import EmojiRef


class PayloadFetcher(ABC):
    """Retrieves the image bytes of one emoji.

    Implementations report failures through ``FetchResult`` and never raise
    for HTTP status or transport problems.
    """

    @abstractmethod
    async def fetch(self, ref: EmojiRef) -> FetchResult:
        """Fetch the payload for ``ref``."""
        ...

    async def close(self) -> None:
        """Release any held connections."""

    async def __aenter__(self) -> "PayloadFetcher":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


class CallableFetcher(PayloadFetcher):
    """Adapts an ``async (id, animated) -> bytes | None`` callable.

    ``None`` counts as a non-OK response.
    """

    def __init__(self, func: Callable[[str, bool], Awaitable[bytes | None]]) -> None:
        self.func = func

    async def fetch(self, ref: EmojiRef) -> FetchResult:
        payload = await self.func(ref.id, ref.animated)
        if payload is None:
            return FetchResult.failed(f"No payload for {ref.id}")
        return FetchResult.ok(payload)
