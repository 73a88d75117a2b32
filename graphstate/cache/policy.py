"""Cache policy and entry models."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from graphstate.config.settings import get_settings

KeyFunc = Callable[[Any], str]


@dataclass(frozen=True)
class CachePolicy:
    """
    Per-node cache configuration.

    ttl_seconds: lifetime of an entry; None means it never expires and 0
        means every lookup recomputes.
    key_func: maps the node input to a fingerprint string. Defaults to
        canonical_serialize(). Use it to leave volatile fields out of the key.
    """

    ttl_seconds: float | None = None
    key_func: KeyFunc | None = None

    def __post_init__(self):
        if self.ttl_seconds is not None and self.ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {self.ttl_seconds}")

    @classmethod
    def from_settings(cls, key_func: KeyFunc | None = None) -> "CachePolicy":
        return cls(ttl_seconds=get_settings().cache_default_ttl_seconds, key_func=key_func)

    def expires_at(self, now: float) -> float | None:
        if self.ttl_seconds is None:
            return None
        return now + self.ttl_seconds


@dataclass
class CacheEntry:
    """A memoized result. expires_at is absolute epoch seconds, None = never."""

    key: str
    value: Any
    created_at: float
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at
