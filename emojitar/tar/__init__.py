"""In-memory tar encoding."""

from emojitar.tar.encoder import TarEncoder
from emojitar.tar.header import (
    BLOCK_SIZE,
    DIRECTORY_MODE,
    FILE_MODE,
    SIZE_LIMIT,
    build_header,
    header_checksum,
)

__all__ = [
    "TarEncoder",
    "BLOCK_SIZE",
    "DIRECTORY_MODE",
    "FILE_MODE",
    "SIZE_LIMIT",
    "build_header",
    "header_checksum",
]
