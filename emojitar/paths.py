"""Archive path construction."""

from __future__ import annotations

from typing import Iterable

from emojitar.models.config import ArchiveLayout
from emojitar.models.emoji import EmojiRef

SEPARATOR = "/"
SKIPPED_SEGMENTS = {"", ".", ".."}


def sanitize_path(path: str) -> str:
    """Drop empty, ``.`` and ``..`` segments. Nothing else is escaped."""
    return SEPARATOR.join(s for s in path.split(SEPARATOR) if s not in SKIPPED_SEGMENTS)


def format_directory(path: str) -> str:
    """Render a directory path the way tar expects it (trailing separator)."""
    return f"{path}{SEPARATOR}"


def emoji_file_path(ref: EmojiRef, layout: ArchiveLayout | None = None) -> str:
    """Archive path of an emoji, e.g. ``emojis/animated/party-123.gif``."""
    layout = layout or ArchiveLayout()
    subdir = layout.animated_dir if ref.animated else layout.images_dir
    return sanitize_path(f"{layout.root_dir}/{subdir}/{ref.name}-{ref.id}.{ref.ext}")


def cdn_filename(ref: EmojiRef) -> str:
    """Filename of an emoji on the CDN, e.g. ``123.gif``."""
    return f"{ref.id}.{ref.ext}"


def directory_paths(file_paths: Iterable[str]) -> list[str]:
    """Distinct ancestor directories of ``file_paths`` in order of first use.

    ``emojis/images/foo-1.png`` introduces ``emojis`` then ``emojis/images``.
    """
    seen: dict[str, None] = {}
    for file_path in file_paths:
        segments = sanitize_path(file_path).split(SEPARATOR)
        for depth in range(1, len(segments)):
            seen.setdefault(SEPARATOR.join(segments[:depth]), None)
    return list(seen)
