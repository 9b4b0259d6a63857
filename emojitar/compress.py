"""Streaming gzip compression of tar chunks."""

from __future__ import annotations

import asyncio
import logging
import zlib
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

GZIP_WBITS = 16 + zlib.MAX_WBITS
DEFAULT_LEVEL = 9
DEFAULT_READ_SIZE = 16384


def iter_slices(chunks: Iterable[bytes], read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    """Read a chunk sequence as one stream, at most ``read_size`` bytes at a time."""
    if read_size <= 0:
        raise ValueError(f"read_size must be positive, got {read_size}")
    for chunk in chunks:
        view = memoryview(chunk)
        for offset in range(0, len(view), read_size):
            yield view[offset:offset + read_size]


def iter_gzip(
    chunks: Iterable[bytes],
    level: int = DEFAULT_LEVEL,
    read_size: int = DEFAULT_READ_SIZE,
) -> Iterator[bytes]:
    """Yield gzip output as it becomes available, one step per pushed slice.

    Steps where the compressor buffers everything yield ``b""``.
    """
    compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
    for piece in iter_slices(chunks, read_size):
        yield compressor.compress(piece)
    yield compressor.flush(zlib.Z_FINISH)


async def compress_chunks(
    chunks: Iterable[bytes],
    level: int = DEFAULT_LEVEL,
    read_size: int = DEFAULT_READ_SIZE,
) -> bytes:
    """Gzip a chunk sequence, yielding to the event loop between pushes."""
    chunks = list(chunks)
    output: list[bytes] = []
    for out in iter_gzip(chunks, level, read_size):
        output.append(out)
        await asyncio.sleep(0)

    data = b"".join(output)
    logger.info(
        "Compressed %d tar bytes into %d gzip bytes", sum(len(c) for c in chunks), len(data)
    )
    return data
