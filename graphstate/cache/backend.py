"""
=============================================================================
Cache Backend Interface
=============================================================================

NodeResultCache talks to storage only through CacheBackend:

    get(key)                      -> CacheEntry | None
    set(key, value, expires_at)   -> CacheEntry
    delete(key)                   -> bool

InMemoryCacheBackend (a dict of key -> CacheEntry behind a lock) is the
reference implementation. Backends store entries as given; expiry is
decided by the cache, not the backend.
=============================================================================
"""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from graphstate.cache.policy import CacheEntry


class CacheBackend(ABC):
    """Storage for cache entries."""

    @abstractmethod
    def get(self, key: str) -> CacheEntry | None: ...

    @abstractmethod
    def set(self, key: str, value: Any, expires_at: float | None) -> CacheEntry: ...

    @abstractmethod
    def delete(self, key: str) -> bool: ...

    @abstractmethod
    def keys(self) -> list[str]: ...

    @abstractmethod
    def clear(self) -> int: ...

    def __len__(self) -> int:
        return len(self.keys())


class InMemoryCacheBackend(CacheBackend):
    """Process-local backend. Safe to share between threads."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: Any, expires_at: float | None) -> CacheEntry:
        entry = CacheEntry(key=key, value=value, created_at=self._clock(), expires_at=expires_at)
        with self._lock:
            self._entries[key] = entry
        return entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
