"""
=============================================================================
State Channel Definitions
=============================================================================

A state is made of named channels. Each channel carries:

- reducer: binary function (current, update) -> merged. None means replace
  (last write wins).
- default: zero-argument factory for the initial value. None means the
  channel has no value until its first write.

Schemas can be declared directly from Channel objects or from a TypedDict
whose fields use Annotated reducers, the same shape graph state classes use:

    class AgentState(TypedDict):
        query: str                                  # replace
        history: Annotated[list[Message], add]      # append, default []

Channels and schemas are immutable once constructed.
=============================================================================
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from graphstate.errors import SchemaConflictError

logger = logging.getLogger(__name__)

Reducer = Callable[[Any, Any], Any]
DefaultFactory = Callable[[], Any]

# Base types whose zero value is used as the default of a reducer channel
# declared through a TypedDict annotation.
_ZERO_VALUE_TYPES = (list, dict, set, int, float)


@dataclass(frozen=True)
class Channel:
    """A named slot of the overall state."""

    name: str
    reducer: Reducer | None = None
    default: DefaultFactory | None = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Channel name must be a non-empty string")
        if self.reducer is not None and not callable(self.reducer):
            raise TypeError(f"Reducer for channel '{self.name}' is not callable")
        if self.default is not None and not callable(self.default):
            raise TypeError(f"Default for channel '{self.name}' must be a factory, not a value")

    @property
    def is_replace(self) -> bool:
        return self.reducer is None

    @property
    def has_default(self) -> bool:
        return self.default is not None


class StateSchema(Mapping[str, Channel]):
    """Ordered, immutable mapping from channel name to Channel."""

    __slots__ = ("_channels",)

    def __init__(self, channels: Iterable[Channel] = ()):
        ordered: dict[str, Channel] = {}
        for channel in channels:
            if channel.name in ordered:
                raise SchemaConflictError(
                    f"Channel '{channel.name}' declared more than once in one schema"
                )
            ordered[channel.name] = channel
        self._channels = ordered

    @classmethod
    def _from_ordered(cls, ordered: dict[str, Channel]) -> "StateSchema":
        schema = cls.__new__(cls)
        schema._channels = ordered
        return schema

    @classmethod
    def from_typed_dict(cls, state_cls: type) -> "StateSchema":
        """
        Build a schema from a TypedDict class.

        Fields annotated as Annotated[T, reducer] become reducer channels.
        When T is a list/dict/set/int/float, its zero value is the default.
        Plain fields become replacement channels without a default.
        """
        hints = get_type_hints(state_cls, include_extras=True)
        channels = []
        for name, hint in hints.items():
            reducer = None
            default = None
            if get_origin(hint) is Annotated:
                base, *metadata = get_args(hint)
                reducer = next((m for m in metadata if callable(m)), None)
                if reducer is not None:
                    default = _zero_factory(base)
            channels.append(Channel(name=name, reducer=reducer, default=default))

        logger.debug(
            f"[STATE] Schema from {state_cls.__name__}: "
            f"{len(channels)} channels, "
            f"{sum(1 for c in channels if c.reducer)} with reducers"
        )
        return cls(channels)

    def with_channels(self, *channels: Channel) -> "StateSchema":
        """Return a new schema with `channels` added; later definitions win."""
        ordered = dict(self._channels)
        for channel in channels:
            ordered[channel.name] = channel
        return StateSchema._from_ordered(ordered)

    def __getitem__(self, name: str) -> Channel:
        return self._channels[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def __repr__(self) -> str:
        return f"StateSchema({list(self._channels)})"


def _zero_factory(base: Any) -> DefaultFactory | None:
    origin = get_origin(base) or base
    if origin in _ZERO_VALUE_TYPES:
        return origin
    return None
