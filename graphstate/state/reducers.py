"""Stock reducers for common channel shapes.

Reducers must be pure: they return a new value and never mutate either
argument, so a StateInstance handed to one producer is never changed by
another producer's update.
"""

from operator import add
from typing import Any


def append(current: list, update: Any) -> list:
    """Concatenate lists. A non-list update is appended as a single item."""
    if isinstance(update, (list, tuple)):
        return [*current, *update]
    return [*current, update]


def merge_dicts(current: dict, update: dict) -> dict:
    """Shallow dict merge, keys from `update` win."""
    return {**current, **update}


def union(current: set, update: Any) -> set:
    return set(current) | set(update)


def replace(current: Any, update: Any) -> Any:
    """Explicit last-write-wins; same as declaring no reducer."""
    return update


__all__ = ["add", "append", "merge_dicts", "replace", "union"]
