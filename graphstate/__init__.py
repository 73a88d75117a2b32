# graphstate: channel state merging and node result caching
from graphstate.cache import CachePolicy, NodeRegistry, NodeResultCache
from graphstate.errors import (
    GraphStateError,
    MissingValueError,
    SchemaConflictError,
    UnknownChannelError,
)
from graphstate.state import UNSET, Channel, StateInstance, StateMerger, StateSchema

__all__ = [
    "CachePolicy",
    "Channel",
    "GraphStateError",
    "MissingValueError",
    "NodeRegistry",
    "NodeResultCache",
    "SchemaConflictError",
    "StateInstance",
    "StateMerger",
    "StateSchema",
    "UNSET",
    "UnknownChannelError",
]
