"""emojitar - Pack the custom emoji referenced in a message into a tar.gz."""

from emojitar.archiver import EmojiArchiver, archive_filename
from emojitar.errors import BuildTimedOut, EmojitarError, FetchFailed
from emojitar.models import ArchiverConfig, ArchiveResult, EmojiRef
from emojitar.scanner import scan_references

__version__ = "0.1.0"
__all__ = [
    "EmojiArchiver",
    "ArchiverConfig",
    "ArchiveResult",
    "EmojiRef",
    "EmojitarError",
    "FetchFailed",
    "BuildTimedOut",
    "archive_filename",
    "scan_references",
]
