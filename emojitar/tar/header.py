"""Tar header record layout.

Only the classic v7 fields are written: name, mode, uid, gid, size, mtime and
checksum. The type flag and link name stay zero, so directories are told apart
by the trailing separator on their name.
"""

from __future__ import annotations

BLOCK_SIZE = 512

NAME_LENGTH = 100
MODE_LENGTH = 8
UID_LENGTH = 8
GID_LENGTH = 8
SIZE_LENGTH = 12
MTIME_LENGTH = 12
CHECKSUM_LENGTH = 8
CHECKSUM_OFFSET = 148
LINK_FIELDS_LENGTH = 101  # typeflag + linkname

FILE_MODE = 0o644
DIRECTORY_MODE = 0o755
USER_ID = 0
GROUP_ID = 0
SIZE_LIMIT = 0o77777777777  # 2**33 - 1, the most 11 octal digits hold

CHECKSUM_PLACEHOLDER = b" " * CHECKSUM_LENGTH


def string_field(value: str, length: int) -> bytes:
    """NUL-terminated UTF-8 field, truncated to ``length - 1`` bytes."""
    data = value.encode("utf-8")[: max(length - 1, 0)]
    return data.ljust(length, b"\0")


def octal_field(number: int, length: int) -> bytes:
    """Zero-padded octal digits followed by a space."""
    digits = max(length - 1, 0)
    return format(number, "o").zfill(digits)[:digits].encode("ascii") + b" "


def checksum_field(checksum: int) -> bytes:
    """Six octal digits, NUL, space."""
    return format(checksum, "06o")[:6].encode("ascii") + b"\0 "


def header_checksum(header: bytes) -> int:
    """Unsigned byte sum with the checksum field counted as eight spaces."""
    end = CHECKSUM_OFFSET + CHECKSUM_LENGTH
    return sum(header[:CHECKSUM_OFFSET]) + sum(CHECKSUM_PLACEHOLDER) + sum(header[end:])


def build_header(name: str, size: int, mode: int, mtime: float) -> bytes:
    """Lay out one 512-byte header record and patch in its checksum."""
    header = bytearray(
        string_field(name, NAME_LENGTH)
        + octal_field(mode, MODE_LENGTH)
        + octal_field(USER_ID, UID_LENGTH)
        + octal_field(GROUP_ID, GID_LENGTH)
        + octal_field(min(size, SIZE_LIMIT), SIZE_LENGTH)
        + octal_field(int(mtime), MTIME_LENGTH)
        + CHECKSUM_PLACEHOLDER
        + bytes(LINK_FIELDS_LENGTH)
    )
    header.extend(bytes(BLOCK_SIZE - len(header)))

    checksum = sum(header)
    header[CHECKSUM_OFFSET:CHECKSUM_OFFSET + CHECKSUM_LENGTH] = checksum_field(checksum)
    return bytes(header)


def padding_for(size: int) -> bytes:
    """Zero bytes that bring ``size`` up to the next block boundary."""
    return bytes(-size % BLOCK_SIZE)
