"""Main EmojiArchiver class - text in, tar.gz out."""

from __future__ import annotations

import logging
import secrets
from typing import Callable, Sequence

from emojitar.compress import compress_chunks
from emojitar.fetch.base import PayloadFetcher
from emojitar.fetch.cache import PayloadCache
from emojitar.fetch.cdn import CdnFetcher
from emojitar.fetch.coordinator import FetchCoordinator
from emojitar.models.archive import ArchiveResult, BuildState, FetchStatus
from emojitar.models.config import ArchiverConfig
from emojitar.models.emoji import EmojiRef
from emojitar.paths import directory_paths, emoji_file_path
from emojitar.scanner import scan_references, unique_references
from emojitar.tar.encoder import TarEncoder

logger = logging.getLogger(__name__)

ARCHIVE_EXT = "tar.gz"
ARCHIVE_NAME_BYTES = 16


def archive_filename() -> str:
    """Random, collision-avoiding name like ``3f9c...e1.tar.gz``."""
    return f"{secrets.token_hex(ARCHIVE_NAME_BYTES)}.{ARCHIVE_EXT}"


class EmojiArchiver:
    """Builds a gzipped tar of every custom emoji referenced in a text."""

    def __init__(
        self,
        config: ArchiverConfig | None = None,
        fetcher: PayloadFetcher | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or ArchiverConfig()
        self._fetcher = fetcher
        self.encoder = TarEncoder(clock) if clock else TarEncoder()

    @property
    def fetcher(self) -> PayloadFetcher:
        if self._fetcher is None:
            cache = PayloadCache(self.config.cache_max_size, self.config.cache_ttl)
            self._fetcher = CdnFetcher(self.config, cache=cache)
        return self._fetcher

    async def close(self) -> None:
        if self._fetcher is not None:
            await self._fetcher.close()

    async def __aenter__(self) -> "EmojiArchiver":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def scan(self, text: str) -> list[EmojiRef]:
        return scan_references(text)

    def file_paths(self, refs: Sequence[EmojiRef]) -> list[str]:
        return [emoji_file_path(ref, self.config.layout) for ref in refs]

    async def build(self, text: str) -> ArchiveResult | None:
        """Archive every emoji in ``text``.

        Returns None, without fetching anything, when ``text`` holds no
        emoji. Otherwise waits for the build to finalize; under the default
        ``abandon`` policy with no deadline a single failed fetch means it
        never does.
        """
        refs = self.scan(text)
        if not refs:
            logger.debug("No emoji references found")
            return None
        return await self.build_from_references(refs)

    async def build_from_references(self, refs: Sequence[EmojiRef]) -> ArchiveResult | None:
        """Archive a reference list; repeated ids are archived once."""
        refs = unique_references(refs)
        if not refs:
            return None

        file_paths = self.file_paths(refs)
        dirs = directory_paths(file_paths)

        state = BuildState(total=len(refs))
        state.chunks.extend(self.encoder.emit_directory_headers(dirs))
        logger.info("Building archive of %d emoji in %d directories", len(refs), len(dirs))

        coordinator = FetchCoordinator(
            self.fetcher,
            self.encoder,
            order=self.config.order,
            on_failure=self.config.on_failure,
            deadline=self.config.deadline,
        )
        await coordinator.collect(refs, file_paths, state)

        if self.config.end_of_archive_marker:
            state.chunks.append(self.encoder.end_of_archive())

        data = await compress_chunks(
            state.chunks,
            level=self.config.compression_level,
            read_size=self.config.read_size,
        )
        missing = [ref for ref in refs if state.outcomes.get(ref.id) != FetchStatus.DONE]

        return ArchiveResult(
            filename=archive_filename(),
            data=data,
            file_count=state.completed,
            directory_count=len(dirs),
            missing=missing,
        )
