"""Fetch and archive result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from emojitar.models.emoji import EmojiRef


class FetchStatus(str, Enum):
    """Outcome of a single payload fetch."""
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FetchResult:
    """Result of fetching one emoji payload.

    Exactly one of ``payload`` and ``reason`` is set.
    """
    payload: bytes | None = None
    reason: str | None = None
    status_code: int | None = None
    cancelled: bool = False

    @property
    def is_ok(self) -> bool:
        return self.payload is not None

    @classmethod
    def ok(cls, payload: bytes) -> "FetchResult":
        return cls(payload=payload, status_code=200)

    @classmethod
    def failed(
        cls,
        reason: str,
        *,
        status_code: int | None = None,
        cancelled: bool = False,
    ) -> "FetchResult":
        return cls(reason=reason, status_code=status_code, cancelled=cancelled)


@dataclass
class BuildState:
    """Mutable accumulator for one archive build.

    ``chunks`` holds emitted byte chunks in output order. ``outcomes`` maps
    each reference id to its fetch status.
    """
    total: int
    chunks: list[bytes] = field(default_factory=list)
    completed: int = 0
    outcomes: dict[str, FetchStatus] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    finalized: bool = False

    @property
    def pending(self) -> list[str]:
        return [k for k, v in self.outcomes.items() if v == FetchStatus.PENDING]

    @property
    def failed(self) -> list[str]:
        return [k for k, v in self.outcomes.items() if v == FetchStatus.FAILED]

    @property
    def all_completed(self) -> bool:
        return self.completed >= self.total

    @property
    def size(self) -> int:
        """Total number of tar bytes emitted so far."""
        return sum(len(c) for c in self.chunks)


class ArchiveResult(BaseModel):
    """A finished, compressed archive ready for delivery."""

    filename: str = Field(..., description="Generated name ({32 hex}.tar.gz)")
    data: bytes = Field(..., repr=False)
    file_count: int = 0
    directory_count: int = 0
    missing: list[EmojiRef] = Field(
        default_factory=list, description="References without a file record"
    )

    @property
    def size(self) -> int:
        return len(self.data)
