"""
=============================================================================
State Merger
=============================================================================

Folds a node's partial output into the running state.

MERGE RULES:
------------
- Channel with a reducer:   new = reducer(current, update)
- Channel without reducer:  new = update (last write wins)
- Channel not in update:    unchanged
- Reducer channel that has no value yet (no default, never written):
  the update seeds the channel; the reducer is not called.

merge() is a pure, synchronous transformation: it returns a new
StateInstance and never mutates the one passed in. When several producers
write the same channel in one step, the executor decides the order and
calls merge()/merge_all() in that order.
=============================================================================
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Literal

from graphstate.config.settings import get_settings
from graphstate.errors import MissingValueError, SchemaConflictError, UnknownChannelError
from graphstate.state.channels import StateSchema

logger = logging.getLogger(__name__)

UnknownChannelPolicy = Literal["raise", "ignore"]


class _Unset:
    """Marker for a channel with no recorded value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class StateInstance(Mapping[str, Any]):
    """
    Concrete values of one execution run.

    Only channels that hold a value are visible through iteration, `in`
    and to_dict(). Reading an unset channel with state[name] raises
    MissingValueError; state.get(name) returns UNSET instead.
    Both raise UnknownChannelError for a name the schema does not declare.
    """

    __slots__ = ("_schema", "_values")

    def __init__(self, schema: StateSchema, values: dict[str, Any] | None = None):
        self._schema = schema
        self._values = dict(values or {})

    @property
    def schema(self) -> StateSchema:
        return self._schema

    def __getitem__(self, name: str) -> Any:
        if name not in self._schema:
            raise UnknownChannelError([name])
        try:
            return self._values[name]
        except KeyError:
            raise MissingValueError(name) from None

    def get(self, name: str, default: Any = UNSET) -> Any:
        if name not in self._schema:
            raise UnknownChannelError([name])
        return self._values.get(name, default)

    def is_set(self, name: str) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"StateInstance({self._values!r})"


class StateMerger:
    """Initializes and merges StateInstances for a StateSchema."""

    def __init__(self, unknown_channel_policy: UnknownChannelPolicy | None = None):
        if unknown_channel_policy is None:
            unknown_channel_policy = get_settings().unknown_channel_policy
        if unknown_channel_policy not in ("raise", "ignore"):
            raise ValueError(
                f"unknown_channel_policy must be 'raise' or 'ignore', "
                f"got {unknown_channel_policy!r}"
            )
        self.unknown_channel_policy = unknown_channel_policy

    def initialize(self, schema: StateSchema) -> StateInstance:
        """
        Create fresh state for one run.

        Every default factory is invoked anew, so mutable defaults are never
        shared between two instances.
        """
        values = {
            name: channel.default()
            for name, channel in schema.items()
            if channel.default is not None
        }
        return StateInstance(schema, values)

    def merge(
        self,
        schema: StateSchema,
        current: StateInstance,
        partial_update: Mapping[str, Any],
    ) -> StateInstance:
        """Apply one producer's partial update and return the next state."""
        unknown = [name for name in partial_update if name not in schema]
        if unknown:
            if self.unknown_channel_policy == "raise":
                raise UnknownChannelError(unknown)
            logger.warning(f"[STATE] Ignoring update for unknown channel(s): {unknown}")

        values = current.to_dict()
        stale = [name for name in values if name not in schema]
        if stale:
            # current was built from a different schema
            if self.unknown_channel_policy == "raise":
                raise UnknownChannelError(stale)
            logger.warning(f"[STATE] Dropping channel(s) missing from target schema: {stale}")
            for name in stale:
                del values[name]
        for name, update in partial_update.items():
            channel = schema.get(name)
            if channel is None:
                continue
            if channel.reducer is None or name not in values:
                values[name] = update
            else:
                values[name] = channel.reducer(values[name], update)

        logger.debug(f"[STATE] Merged channels: {[n for n in partial_update if n in schema]}")
        return StateInstance(schema, values)

    def merge_all(
        self,
        schema: StateSchema,
        current: StateInstance,
        updates: Iterable[Mapping[str, Any]],
    ) -> StateInstance:
        """Fold several partial updates in the given order."""
        state = current
        for update in updates:
            state = self.merge(schema, state, update)
        return state

    @staticmethod
    def merge_schemas(a: StateSchema, b: StateSchema, *, strict: bool = False) -> StateSchema:
        """
        Union of two schemas.

        On a shared name the whole Channel from `b` replaces the one from `a`.
        With strict=True a shared name whose definitions differ raises
        SchemaConflictError instead.
        """
        if strict:
            conflicts = [name for name in b if name in a and a[name] != b[name]]
            if conflicts:
                raise SchemaConflictError(
                    f"Conflicting definitions for channel(s): {', '.join(conflicts)}"
                )
        return a.with_channels(*b.values())
