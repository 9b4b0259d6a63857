"""Extract custom emoji references from message text.

Tokens look like ``<:name:id>`` or ``<a:name:id>``. The scan is a single
forward pass: each step looks for ``<``, two ``:`` and a closing ``>`` after
the cursor, and the scan stops as soon as one of them is missing. A token
left unclosed at the end of the text is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from emojitar.models.emoji import EmojiRef

OPEN = "<"
SEP = ":"
CLOSE = ">"
ANIMATED_FLAG = "a"


@dataclass(frozen=True)
class Token:
    """A closed emoji token located in the text."""
    flag: str
    name: str
    id: str
    start: int
    end: int  # index of the closing bracket

    def to_ref(self) -> EmojiRef:
        return EmojiRef(
            id=self.id.strip(),
            name=self.name.strip(),
            animated=self.flag.strip() == ANIMATED_FLAG,
        )


def next_token(text: str, cursor: int) -> Token | None:
    """Return the first closed token at or after ``cursor``, or None."""
    start = text.find(OPEN, cursor)
    if start == -1:
        return None
    first = text.find(SEP, start + 1)
    if first == -1:
        return None
    second = text.find(SEP, first + 1)
    if second == -1:
        return None
    end = text.find(CLOSE, second + 1)
    if end == -1:
        return None

    return Token(
        flag=text[start + 1:first],
        name=text[first + 1:second],
        id=text[second + 1:end],
        start=start,
        end=end,
    )


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield every closed token in order of appearance, duplicates included."""
    cursor = 0
    while cursor < len(text):
        token = next_token(text, cursor)
        if token is None:
            return
        yield token
        cursor = token.end + 1


def unique_references(refs: Iterable[EmojiRef]) -> list[EmojiRef]:
    """Drop repeated ids, keeping the first occurrence of each."""
    seen: dict[str, EmojiRef] = {}
    for ref in refs:
        seen.setdefault(ref.id, ref)
    return list(seen.values())


def scan_references(text: str) -> list[EmojiRef]:
    """Return the distinct emoji referenced by ``text``, in first-seen order."""
    return unique_references(token.to_ref() for token in iter_tokens(text))
