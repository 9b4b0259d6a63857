"""Tar entry encoder."""

from __future__ import annotations

import time
from typing import Callable, Iterable

from emojitar.paths import format_directory, sanitize_path
from emojitar.tar.header import (
    BLOCK_SIZE,
    DIRECTORY_MODE,
    FILE_MODE,
    build_header,
    padding_for,
)


class TarEncoder:
    """Builds tar entries as lists of byte chunks.

    Chunks are never joined here: a file record is its header, the payload
    object as given, and the padding.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock

    def emit_directory_headers(self, directory_paths: Iterable[str]) -> list[bytes]:
        """One header per directory, in the given order."""
        return [
            build_header(format_directory(sanitize_path(path)), 0, DIRECTORY_MODE, self.clock())
            for path in directory_paths
        ]

    def emit_file_record(self, file_path: str, payload: bytes) -> list[bytes]:
        """Header, payload and zero padding for one regular file.

        Payloads above 2**33 - 1 bytes get a truncated size field.
        """
        header = build_header(sanitize_path(file_path), len(payload), FILE_MODE, self.clock())
        return [header, payload, padding_for(len(payload))]

    @staticmethod
    def end_of_archive() -> bytes:
        """The two zero blocks strict readers expect after the last entry."""
        return bytes(2 * BLOCK_SIZE)
