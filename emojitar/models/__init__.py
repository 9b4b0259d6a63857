"""Data models for emojitar."""

from emojitar.models.archive import ArchiveResult, BuildState, FetchResult, FetchStatus
from emojitar.models.config import ArchiveLayout, ArchiverConfig
from emojitar.models.emoji import EmojiRef

__all__ = [
    # Emoji models
    "EmojiRef",
    # Build models
    "ArchiveResult",
    "BuildState",
    "FetchResult",
    "FetchStatus",
    # Config
    "ArchiveLayout",
    "ArchiverConfig",
]
