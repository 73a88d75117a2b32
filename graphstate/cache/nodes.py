"""
=============================================================================
Node Registration
=============================================================================

Attaches an optional CachePolicy to a node's computation. The executor
calls the returned CachedNode exactly like the original function:

    registry = NodeRegistry(cache)

    @registry.node(cache_policy=CachePolicy(ttl_seconds=120))
    async def expensive_node(state: dict) -> dict:
        ...

    update = await registry["expensive_node"](state)

Cache keys are namespaced by node name, so two nodes receiving the same
input never share an entry. Nodes registered without a policy are called
directly on every invocation.
=============================================================================
"""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from graphstate.cache.node_cache import NodeResultCache
from graphstate.cache.policy import CachePolicy

logger = logging.getLogger(__name__)


class CachedNode:
    """A node function bound to a cache and an optional policy."""

    def __init__(
        self,
        name: str,
        func: Callable[[Any], Any],
        cache: NodeResultCache,
        cache_policy: CachePolicy | None = None,
    ):
        self.name = name
        self.func = func
        self.cache = cache
        self.cache_policy = cache_policy
        self.is_async = inspect.iscoroutinefunction(func)
        functools.update_wrapper(self, func, updated=())

    def __call__(self, inputs: Any) -> Any:
        if self.is_async:
            return self._acall(inputs)
        if self.cache_policy is None:
            return self.func(inputs)
        return self.cache.compute_or_fetch(
            self.cache_policy, inputs, self.func, namespace=self.name
        )

    async def _acall(self, inputs: Any) -> Any:
        if self.cache_policy is None:
            return await self.func(inputs)
        return await self.cache.acompute_or_fetch(
            self.cache_policy, inputs, self.func, namespace=self.name
        )

    def cache_key(self, inputs: Any) -> str | None:
        """Key this node would use for `inputs`, or None when uncached."""
        if self.cache_policy is None:
            return None
        return self.cache.key_for(self.cache_policy, inputs, namespace=self.name)

    def __repr__(self) -> str:
        return f"CachedNode({self.name!r}, policy={self.cache_policy!r})"


class NodeRegistry:
    """Named nodes sharing one NodeResultCache."""

    def __init__(self, cache: NodeResultCache | None = None):
        self.cache = cache if cache is not None else NodeResultCache()
        self._nodes: dict[str, CachedNode] = {}

    def register(
        self,
        name: str,
        func: Callable[[Any], Any],
        cache_policy: CachePolicy | bool | None = None,
    ) -> CachedNode:
        """
        Register `func` under `name`.

        cache_policy=True uses CachePolicy.from_settings(); None or False
        leaves the node uncached.
        """
        if name in self._nodes:
            raise ValueError(f"Node '{name}' is already registered")
        if cache_policy is True:
            cache_policy = CachePolicy.from_settings()
        elif cache_policy is False:
            cache_policy = None

        node = CachedNode(name, func, self.cache, cache_policy)
        self._nodes[name] = node
        logger.info(
            f"[REGISTRY] Registered node={name} "
            f"(cache={'ttl=' + str(cache_policy.ttl_seconds) if cache_policy else 'disabled'})"
        )
        return node

    def node(
        self,
        name: str | None = None,
        cache_policy: CachePolicy | bool | None = None,
    ) -> Callable[[Callable[[Any], Any]], CachedNode]:
        """Decorator form of register(); the name defaults to the function name."""

        def decorator(func: Callable[[Any], Any]) -> CachedNode:
            return self.register(name or func.__name__, func, cache_policy)

        return decorator

    def __getitem__(self, name: str) -> CachedNode:
        return self._nodes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def names(self) -> list[str]:
        return list(self._nodes)
