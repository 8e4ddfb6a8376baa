"""Small TTL cache with an injectable clock.

Entries older than the TTL are not returned by ``get`` but remain available
through ``get_stale`` until evicted for capacity, so a caller can fall back to
old data when a refresh fails.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, Hashable, TypeVar

from prop_tracker.common.types import Clock

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    def __init__(
        self,
        ttl_seconds: float,
        capacity: int = 8,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._ttl = ttl_seconds
        self._capacity = capacity
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry[V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def set(self, key: Hashable, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)

    def get(self, key: Hashable) -> V | None:
        """Value for ``key`` if it is younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None or self.age(key) >= self._ttl:
            return None
        return entry.value

    def get_stale(self, key: Hashable) -> V | None:
        """Value for ``key`` regardless of age."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def age(self, key: Hashable) -> float | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def clear(self) -> None:
        self._entries.clear()
