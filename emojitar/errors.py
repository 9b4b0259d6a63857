"""Exceptions raised by archive builds."""

from __future__ import annotations

from emojitar.models.emoji import EmojiRef


class EmojitarError(Exception):
    """Base class for emojitar errors."""


class FetchFailed(EmojitarError):
    """One or more emoji payloads could not be fetched."""

    def __init__(self, failures: dict[EmojiRef, str]) -> None:
        self.failures = failures
        ids = ", ".join(ref.id for ref in failures)
        super().__init__(f"Failed to fetch {len(failures)} emoji: {ids}")


class BuildTimedOut(EmojitarError):
    """The build did not finalize before its deadline."""

    def __init__(self, deadline: float, outstanding: list[EmojiRef]) -> None:
        self.deadline = deadline
        self.outstanding = outstanding
        super().__init__(
            f"Archive build timed out after {deadline}s with {len(outstanding)} emoji unfinished"
        )
