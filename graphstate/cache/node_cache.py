"""
=============================================================================
Node Result Cache
=============================================================================

Memoizes a node's result against a fingerprint of its input, with TTL.

LOOKUP FLOW:
------------
1. key = policy.key_func(inputs) or canonical_serialize(inputs),
   prefixed with "{namespace}:" when a namespace (node name) is given
2. Entry present and not expired -> return it. compute is NOT called.
3. Miss or expired -> compute(inputs), store, return.

FAILURES:
---------
If compute raises (or is cancelled) nothing is stored and the exception
propagates unchanged. The next call with the same key computes again.

CONCURRENCY:
------------
- compute_or_fetch(): lookup and insert are each done under a lock, but
  compute runs outside it. Two threads missing the same key at the same
  time may both compute; the later write wins and both get a correct value.
- acompute_or_fetch(): at most one computation per key is in flight.
  Concurrent callers for the same key await the leader's result. If the
  leader is cancelled, the waiters retry and one of them takes over.
=============================================================================
"""

import asyncio
import inspect
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from graphstate.cache.backend import CacheBackend, InMemoryCacheBackend
from graphstate.cache.keys import canonical_serialize
from graphstate.cache.metrics import CacheStats
from graphstate.cache.policy import CachePolicy

logger = logging.getLogger(__name__)

_MISS = object()


def _retrieve_exception(future: asyncio.Future) -> None:
    # Avoid "exception was never retrieved" when no caller was waiting
    if not future.cancelled():
        future.exception()


class NodeResultCache:
    """In-process memoization of node results."""

    def __init__(
        self,
        backend: CacheBackend | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._clock = clock
        self.backend = backend if backend is not None else InMemoryCacheBackend(clock=clock)
        self.stats = CacheStats()
        self._lock = threading.RLock()
        self._inflight: dict[str, asyncio.Future] = {}

    # -------------------------------------------------------------------------
    # Keys
    # -------------------------------------------------------------------------

    @staticmethod
    def key_for(policy: CachePolicy, inputs: Any, namespace: str | None = None) -> str:
        fingerprint = policy.key_func(inputs) if policy.key_func else canonical_serialize(inputs)
        if not isinstance(fingerprint, str):
            raise TypeError(
                f"key_func must return str, got {type(fingerprint).__name__}"
            )
        return f"{namespace}:{fingerprint}" if namespace else fingerprint

    # -------------------------------------------------------------------------
    # Store access (critical sections)
    # -------------------------------------------------------------------------

    def _lookup(self, key: str, namespace: str | None) -> Any:
        with self._lock:
            entry = self.backend.get(key)
            if entry is None:
                self.stats.record_miss(namespace)
                return _MISS
            if entry.is_expired(self._clock()):
                self.backend.delete(key)
                self.stats.record_miss(namespace, expired=True)
                logger.debug(f"[CACHE] Expired entry evicted: {key[:32]}")
                return _MISS
            self.stats.record_hit(namespace)
        logger.debug(f"[CACHE] HIT {key[:32]}")
        return entry.value

    def _store(
        self, key: str, value: Any, policy: CachePolicy, seconds: float, namespace: str | None
    ) -> None:
        with self._lock:
            self.stats.record_compute(seconds, namespace)
            self.backend.set(key, value, policy.expires_at(self._clock()))
            self.stats.record_size(len(self.backend))

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def compute_or_fetch(
        self,
        policy: CachePolicy,
        inputs: Any,
        compute: Callable[[Any], Any],
        *,
        namespace: str | None = None,
    ) -> Any:
        """Return the cached result for `inputs`, computing it on a miss."""
        key = self.key_for(policy, inputs, namespace)
        value = self._lookup(key, namespace)
        if value is not _MISS:
            return value

        started = time.perf_counter()
        try:
            value = compute(inputs)
        except Exception as e:
            with self._lock:
                self.stats.record_failure(namespace)
            logger.warning(f"[CACHE] Compute failed for {key[:32]}, nothing cached: {e!r}")
            raise

        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            raise TypeError("compute returned an awaitable; use acompute_or_fetch()")

        self._store(key, value, policy, time.perf_counter() - started, namespace)
        return value

    async def acompute_or_fetch(
        self,
        policy: CachePolicy,
        inputs: Any,
        compute: Callable[[Any], Any],
        *,
        namespace: str | None = None,
    ) -> Any:
        """Async variant with at most one in-flight computation per key."""
        key = self.key_for(policy, inputs, namespace)

        while True:
            pending = self._inflight.get(key)
            if pending is None:
                value = self._lookup(key, namespace)
                if value is not _MISS:
                    return value
                break

            logger.debug(f"[CACHE] Joining in-flight computation for {key[:32]}")
            try:
                value = await asyncio.shield(pending)
            except asyncio.CancelledError:
                if pending.cancelled():
                    # Leader was cancelled; try again, possibly as the new leader
                    continue
                raise
            with self._lock:
                self.stats.record_hit(namespace)
            return value

        future = asyncio.get_running_loop().create_future()
        future.add_done_callback(_retrieve_exception)
        self._inflight[key] = future

        started = time.perf_counter()
        try:
            value = compute(inputs)
            if inspect.isawaitable(value):
                value = await value
        except asyncio.CancelledError:
            logger.info(f"[CACHE] Compute cancelled for {key[:32]}, nothing cached")
            future.cancel()
            raise
        except Exception as e:
            with self._lock:
                self.stats.record_failure(namespace)
            logger.warning(f"[CACHE] Compute failed for {key[:32]}, nothing cached: {e!r}")
            future.set_exception(e)
            raise
        else:
            self._store(key, value, policy, time.perf_counter() - started, namespace)
            future.set_result(value)
            return value
        finally:
            if not future.done():
                future.cancel()
            if self._inflight.get(key) is future:
                del self._inflight[key]

    def invalidate(self, key: str) -> bool:
        """Remove an entry unconditionally. Returns True if one existed."""
        with self._lock:
            removed = self.backend.delete(key)
            self.stats.record_size(len(self.backend))
        if removed:
            self.stats.record_invalidation()
            logger.info(f"[CACHE] Invalidated {key[:32]}")
        return removed

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        removed = 0
        with self._lock:
            for key in self.backend.keys():
                entry = self.backend.get(key)
                if entry is not None and entry.is_expired(now):
                    self.backend.delete(key)
                    removed += 1
            self.stats.record_size(len(self.backend))
        if removed:
            logger.info(f"[CACHE] Purged {removed} expired entries")
        return removed

    def clear(self) -> int:
        with self._lock:
            removed = self.backend.clear()
            self.stats.record_size(0)
        logger.info(f"[CACHE] Cleared {removed} entries")
        return removed

    def get_cache_report(self) -> dict:
        return self.stats.get_cache_report(entries=len(self))

    def __len__(self) -> int:
        return len(self.backend)
