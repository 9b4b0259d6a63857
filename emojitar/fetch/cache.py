"""In-memory payload cache for fetched emoji.

Emoji files on the CDN are immutable per id and extension, so repeated
builds can reuse payloads until their TTL runs out.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass


@dataclass
class CacheEntry:
    """A cached payload and its expiry time."""
    value: bytes
    expires_at: float

    @property
    def is_expired(self) -> bool:
        return time.time() > self.expires_at


class PayloadCache:
    """LRU cache of emoji payloads with TTL support."""

    def __init__(self, max_size: int = 512, ttl: int = 86400) -> None:
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._ttl = ttl
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, key: str) -> bytes | None:
        """Get a payload, returns None if not found or expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return entry.value

    def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store a payload for ``ttl`` seconds (cache default if None)."""
        if self._max_size <= 0:
            return
        with self._lock:
            expires_at = time.time() + (self._ttl if ttl is None else ttl)
            self._cache.pop(key, None)
            while len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
            self._cache[key] = CacheEntry(value=value, expires_at=expires_at)
