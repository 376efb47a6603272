"""Global test fixtures for the registry trust test suite."""

from __future__ import annotations

import logging
import os
from typing import Any

import pytest

from registry_trust.core.config import clear_config_cache
from registry_trust.trust.graph import RegistryNode, TrustGraph

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all REGISTRY_TRUST_ environment variables and reset config."""
    for key in list(os.environ.keys()):
        if key.startswith("REGISTRY_TRUST_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))  # no stray .env from the repo root
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Graph Factories
# ============================================================================

HOME = "https://home.example"
APPS = "https://apps.example"
GAMES = "https://games.example"
TOOLS = "https://tools.example"
LONELY = "https://lonely.example"


@pytest.fixture
def node_factory():
    """Factory for RegistryNode metadata with overridable fields."""

    def factory(**overrides: Any) -> RegistryNode:
        defaults: dict[str, Any] = {
            "app_count": 10,
            "install_count": 500,
            "report_count": 0,
            "age": 400,
            "follower_count": 20,
            "following_count": 15,
            "avg_app_rating": 4.0,
            "update_frequency": 2,
        }
        defaults.update(overrides)
        return RegistryNode(**defaults)

    return factory


@pytest.fixture
def chain_graph() -> TrustGraph:
    """HOME (trusted) -> APPS -> GAMES, plus an unreachable LONELY."""
    graph = TrustGraph.from_edges([(HOME, APPS), (APPS, GAMES)], user_trusted=[HOME])
    graph.add_node(LONELY)
    return graph


@pytest.fixture
def federation_graph(node_factory) -> TrustGraph:
    """A small federation with metadata, a cycle and a blocked registry."""
    graph = TrustGraph()
    for url in (HOME, APPS, GAMES, TOOLS, LONELY):
        graph.add_node(url, node_factory(url=url))
    graph.add_edge(HOME, APPS)
    graph.add_edge(HOME, TOOLS)
    graph.add_edge(APPS, GAMES)
    graph.add_edge(GAMES, APPS)
    graph.add_edge(TOOLS, GAMES)
    graph.add_user_trusted(HOME)
    graph.add_blocked(TOOLS)
    return graph
