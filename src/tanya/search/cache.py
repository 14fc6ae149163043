"""Bounded memoization for similarity and feature computations.

A :class:`BoundedCache` holds at most ``capacity`` results. Once full it
rejects new inserts (the value is still computed and returned, just not
stored); there is no eviction. Reads are lock-free dict lookups, inserts
take a lock so the size bound holds under concurrent scoring threads.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

_MISSING = object()


@dataclass(frozen=True)
class CacheStats:
    name: str
    size: int
    capacity: int
    hits: int
    misses: int
    rejected: int


class BoundedCache(Generic[V]):
    """Fixed-capacity, reject-when-full cache.

    Example:
        >>> cache = BoundedCache("similarity", capacity=2)
        >>> cache.get_or_compute(("a", "b"), lambda: 0.5)
        0.5
        >>> len(cache)
        1
    """

    def __init__(self, name: str, capacity: int, enabled: bool = True):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.name = name
        self.capacity = capacity
        self.enabled = enabled and capacity > 0
        self._data: dict[Hashable, V] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._rejected = 0
        self._warned_full = False

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def get(self, key: Hashable, default=None):
        return self._data.get(key, default)

    def put(self, key: Hashable, value: V) -> bool:
        """Store ``value`` unless the cache is full. Returns True if stored."""
        if not self.enabled:
            return False
        with self._lock:
            if key in self._data:
                return True
            if len(self._data) >= self.capacity:
                self._rejected += 1
                if not self._warned_full:
                    self._warned_full = True
                    logger.info(f"[BoundedCache] '{self.name}' reached capacity {self.capacity}")
                return False
            self._data[key] = value
            return True

    def get_or_compute(self, key: Hashable, compute: Callable[[], V]) -> V:
        if self.enabled:
            value = self._data.get(key, _MISSING)
            if value is not _MISSING:
                self._hits += 1
                return value
            self._misses += 1
        value = compute()
        self.put(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._warned_full = False

    def stats(self) -> CacheStats:
        return CacheStats(
            name=self.name,
            size=len(self._data),
            capacity=self.capacity,
            hits=self._hits,
            misses=self._misses,
            rejected=self._rejected,
        )
