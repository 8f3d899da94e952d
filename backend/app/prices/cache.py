"""Short-TTL in-memory cache of resolved responses."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_RESULT_TTL = 60.0  # seconds


@dataclass(frozen=True, slots=True)
class CachedResponse(Generic[T]):
    payload: T
    stored_at: float


class ResultCache(Generic[T]):
    """Keyed cache whose entries are fresh while ``now - stored_at < ttl``.

    Stale entries are never evicted actively; they are ignored by reads and
    replaced by the next write. Callers only store responses that carry a
    price, so keys stay bounded by pairs some provider can actually quote.

    Only touched from the event loop, so no lock is taken. Concurrent
    refreshes of one key are last-write-wins.
    """

    def __init__(self, ttl: float = DEFAULT_RESULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedResponse[T]] = {}

    def get(self, key: str) -> T | None:
        """Payload stored under key, or None if absent or stale."""
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.stored_at >= self._ttl:
            return None
        return entry.payload

    def set(self, key: str, payload: T) -> None:
        self._entries[key] = CachedResponse(payload=payload, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
