"""
=============================================================================
NODE CACHE METRICS
=============================================================================

Two views of cache efficiency:

- CacheStats: per-cache counters kept on the NodeResultCache instance,
  rendered by get_cache_report() for /cache/stats.
- Prometheus counters: process-wide, labelled by namespace (node name),
  exposed on /metrics.

A healthy cache shows a hit rate that climbs after the first run. A hit
rate stuck at 0 usually means the key is not stable: a volatile field
(timestamp, request id) is part of the input and needs a key_func.
=============================================================================
"""

import logging
from dataclasses import dataclass

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

# =============================================================================
# Prometheus Metrics Definitions
# =============================================================================

CACHE_HIT_COUNTER = Counter(
    "graphstate_cache_hits_total",
    "Total node cache hits",
    ["namespace"],
)

CACHE_MISS_COUNTER = Counter(
    "graphstate_cache_misses_total",
    "Total node cache misses (including expired entries)",
    ["namespace"],
)

CACHE_EXPIRED_COUNTER = Counter(
    "graphstate_cache_expired_total",
    "Total entries found expired on lookup",
    ["namespace"],
)

COMPUTE_FAILURE_COUNTER = Counter(
    "graphstate_compute_failures_total",
    "Total compute calls that raised; nothing was cached",
    ["namespace"],
)

INVALIDATION_COUNTER = Counter(
    "graphstate_cache_invalidations_total",
    "Total explicit invalidations",
)

COMPUTE_SECONDS = Histogram(
    "graphstate_compute_seconds",
    "Duration of compute calls made on a cache miss",
    ["namespace"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

CACHE_ENTRIES = Gauge(
    "graphstate_cache_entries",
    "Entries currently held by the most recently updated cache",
)


def _label(namespace: str | None) -> str:
    return namespace or "default"


@dataclass
class CacheStats:
    """Counters for one NodeResultCache."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    failures: int = 0
    invalidations: int = 0
    computations: int = 0
    compute_seconds_total: float = 0.0

    def record_hit(self, namespace: str | None = None) -> None:
        self.hits += 1
        CACHE_HIT_COUNTER.labels(namespace=_label(namespace)).inc()

    def record_miss(self, namespace: str | None = None, expired: bool = False) -> None:
        self.misses += 1
        CACHE_MISS_COUNTER.labels(namespace=_label(namespace)).inc()
        if expired:
            self.expired += 1
            CACHE_EXPIRED_COUNTER.labels(namespace=_label(namespace)).inc()

    def record_compute(self, seconds: float, namespace: str | None = None) -> None:
        self.computations += 1
        self.compute_seconds_total += seconds
        COMPUTE_SECONDS.labels(namespace=_label(namespace)).observe(seconds)

    def record_failure(self, namespace: str | None = None) -> None:
        self.failures += 1
        COMPUTE_FAILURE_COUNTER.labels(namespace=_label(namespace)).inc()

    def record_invalidation(self) -> None:
        self.invalidations += 1
        INVALIDATION_COUNTER.inc()

    @staticmethod
    def record_size(entries: int) -> None:
        CACHE_ENTRIES.set(entries)

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def get_cache_report(self, entries: int) -> dict:
        """Summary for the stats endpoint."""
        lookups = self.hits + self.misses
        return {
            "entries": entries,
            "lookups": lookups,
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
            "failures": self.failures,
            "invalidations": self.invalidations,
            "hit_rate": self.hit_rate,
            "computations": self.computations,
            "avg_compute_seconds": (
                self.compute_seconds_total / self.computations if self.computations else 0.0
            ),
        }
