# Cache package
from graphstate.cache.backend import CacheBackend, InMemoryCacheBackend
from graphstate.cache.keys import canonical_serialize
from graphstate.cache.node_cache import NodeResultCache
from graphstate.cache.nodes import CachedNode, NodeRegistry
from graphstate.cache.policy import CacheEntry, CachePolicy

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "CachePolicy",
    "CachedNode",
    "InMemoryCacheBackend",
    "NodeRegistry",
    "NodeResultCache",
    "canonical_serialize",
]
