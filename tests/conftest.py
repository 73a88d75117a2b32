"""
Test configuration and fixtures.
"""

from operator import add
from typing import Annotated, TypedDict

import pytest

from graphstate.cache.node_cache import NodeResultCache
from graphstate.config.settings import get_settings
from graphstate.state.channels import Channel, StateSchema
from graphstate.state.merger import StateMerger


class FakeClock:
    """Manually advanced clock for deterministic TTL tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CounterCompute:
    """Compute function instrumented with a call counter."""

    def __init__(self, result=None):
        self.calls = 0
        self.result = result

    def __call__(self, inputs):
        self.calls += 1
        return self.result if self.result is not None else {"answer": f"computed-{inputs!r}"}


class ResearchState(TypedDict):
    question: str
    items: Annotated[list[str], add]
    scores: Annotated[dict[str, float], lambda a, b: {**a, **b}]
    step_count: Annotated[int, add]


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Isolate tests from any .env / environment overrides."""
    monkeypatch.delenv("UNKNOWN_CHANNEL_POLICY", raising=False)
    monkeypatch.delenv("CACHE_DEFAULT_TTL_SECONDS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> NodeResultCache:
    return NodeResultCache(clock=clock)


@pytest.fixture
def counter() -> CounterCompute:
    return CounterCompute()


@pytest.fixture
def merger() -> StateMerger:
    return StateMerger(unknown_channel_policy="raise")


@pytest.fixture
def items_schema() -> StateSchema:
    """Append channel with a list default plus a plain replacement channel."""
    return StateSchema(
        [
            Channel("items", reducer=lambda a, b: a + b, default=list),
            Channel("question"),
        ]
    )


@pytest.fixture
def research_state_cls() -> type:
    return ResearchState
