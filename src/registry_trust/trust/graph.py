# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Trust graph data model.

The graph holds "follow" edges between registries (A follows B means A
places explicit trust in B), per-registry reputation metadata, the set of
registries the local user vouches for directly, and the user's blocklist.

Registries are identified by their canonical URL, compared exactly. A URL
may appear in ``edges`` without metadata in ``nodes``; every algorithm
treats missing metadata as a zero signal.

Mutations notify registered listeners with a ``GraphChange`` so that
derived state (cached scores) can be invalidated before the next read.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any

from ..core.exceptions import ValidationException

logger = logging.getLogger(__name__)

MAX_RATING = 5.0

# Keys accepted by RegistryNode.from_dict in the federation document format
_CAMEL_CASE_FIELDS = {
    "appCount": "app_count",
    "installCount": "install_count",
    "reportCount": "report_count",
    "followerCount": "follower_count",
    "followingCount": "following_count",
    "avgAppRating": "avg_app_rating",
    "updateFrequency": "update_frequency",
}


@dataclass(frozen=True)
class RegistryNode:
    """Reputation inputs for one registry.

    Each metric is optional: ``None`` records that the registry never
    reported the value, which is distinct from a reported zero. Scoring
    reads metrics through ``value()`` and treats both as 0.
    """

    url: str | None = None
    pubkey: str | None = None

    app_count: int | None = None
    install_count: int | None = None
    report_count: int | None = None  # unresolved abuse reports
    age: float | None = None  # days since first seen

    follower_count: int | None = None
    following_count: int | None = None

    avg_app_rating: float | None = None  # 0-5 scale
    update_frequency: float | None = None  # updates per month

    def __post_init__(self) -> None:
        for name in METRIC_FIELDS:
            raw = getattr(self, name)
            if raw is None:
                continue
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValidationException(f"{name} must be a number", field=name, value=raw)
            if not math.isfinite(raw) or raw < 0:
                raise ValidationException(
                    f"{name} must be a finite non-negative number, got {raw}",
                    field=name,
                    value=raw,
                )
        if self.avg_app_rating is not None and self.avg_app_rating > MAX_RATING:
            raise ValidationException(
                f"avg_app_rating must be between 0 and {MAX_RATING}, got {self.avg_app_rating}",
                field="avg_app_rating",
                value=self.avg_app_rating,
            )

    def value(self, name: str) -> float:
        """Return a metric, or 0 when it was never reported."""
        raw = getattr(self, name)
        return 0 if raw is None else raw

    def has(self, name: str) -> bool:
        """Whether a metric was reported at all."""
        return getattr(self, name) is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegistryNode:
        """Build metadata from a registry document.

        Accepts both snake_case and the camelCase keys used in federation
        documents. Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, raw in data.items():
            name = _CAMEL_CASE_FIELDS.get(key, key)
            if name in known:
                kwargs[name] = raw
        return cls(**kwargs)


METRIC_FIELDS: tuple[str, ...] = (
    "app_count",
    "install_count",
    "report_count",
    "age",
    "follower_count",
    "following_count",
    "avg_app_rating",
    "update_frequency",
)


class ChangeKind(StrEnum):
    """Kinds of graph mutation reported to listeners."""

    NODE_ADDED = "node_added"
    NODE_UPDATED = "node_updated"
    NODE_REMOVED = "node_removed"
    EDGE_ADDED = "edge_added"
    EDGE_REMOVED = "edge_removed"
    TRUSTED_ADDED = "trusted_added"
    TRUSTED_REMOVED = "trusted_removed"
    BLOCKED_ADDED = "blocked_added"
    BLOCKED_REMOVED = "blocked_removed"


# Metadata changes only move the changed node's own reputation
_METADATA_CHANGES = frozenset({ChangeKind.NODE_ADDED, ChangeKind.NODE_UPDATED})


@dataclass(frozen=True)
class GraphChange:
    """A single mutation of a TrustGraph."""

    kind: ChangeKind
    url: str
    target: str | None = None  # edge target for edge changes

    @property
    def structural(self) -> bool:
        """Whether the change can move scores of nodes other than ``url``.

        TrustRank is a whole-graph computation, so any edge, trusted-set,
        blocklist or node-removal change invalidates every derived score.
        """
        return self.kind not in _METADATA_CHANGES


GraphListener = Callable[[GraphChange], None]


@dataclass
class TrustGraph:
    """In-memory trust graph shared by all scoring components.

    Example:
        >>> graph = TrustGraph()
        >>> graph.add_user_trusted("https://a.example")
        True
        >>> graph.add_edge("https://a.example", "https://b.example")
        True
        >>> graph.successors("https://a.example")
        {'https://b.example'}
    """

    edges: dict[str, set[str]] = field(default_factory=dict)
    nodes: dict[str, RegistryNode] = field(default_factory=dict)
    user_trusted: set[str] = field(default_factory=set)
    blocked: set[str] = field(default_factory=set)
    _listeners: list[GraphListener] = field(default_factory=list, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: GraphListener) -> None:
        """Register a callback invoked after every effective mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: GraphListener) -> None:
        """Unregister a previously added callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: ChangeKind, url: str, target: str | None = None) -> None:
        change = GraphChange(kind=kind, url=url, target=target)
        logger.debug(f"Graph change: {kind} {url}" + (f" -> {target}" if target else ""))
        for listener in list(self._listeners):
            listener(change)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def add_node(self, url: str, metadata: RegistryNode | None = None) -> bool:
        """Add a registry or replace its metadata.

        Returns:
            True if the graph changed
        """
        metadata = metadata if metadata is not None else RegistryNode(url=url)
        existing = self.nodes.get(url)
        if existing == metadata:
            return False
        self.nodes[url] = metadata
        self._notify(ChangeKind.NODE_ADDED if existing is None else ChangeKind.NODE_UPDATED, url)
        return True

    def update_node(self, url: str, metadata: RegistryNode) -> bool:
        """Replace a registry's metadata (reputation-only change)."""
        return self.add_node(url, metadata)

    def remove_node(self, url: str) -> bool:
        """Remove a registry with its edges, trusted and blocked membership."""
        if url not in self:
            return False
        self.nodes.pop(url, None)
        self.edges.pop(url, None)
        for source in [s for s, targets in self.edges.items() if url in targets]:
            self.edges[source].discard(url)
            if not self.edges[source]:
                del self.edges[source]
        self.user_trusted.discard(url)
        self.blocked.discard(url)
        self._notify(ChangeKind.NODE_REMOVED, url)
        return True

    def metadata(self, url: str) -> RegistryNode | None:
        """Return a registry's metadata, or None if it has none."""
        return self.nodes.get(url)

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    def add_edge(self, source: str, target: str) -> bool:
        """Record that ``source`` follows ``target``. Self-loops are allowed."""
        targets = self.edges.setdefault(source, set())
        if target in targets:
            return False
        targets.add(target)
        self._notify(ChangeKind.EDGE_ADDED, source, target)
        return True

    def remove_edge(self, source: str, target: str) -> bool:
        """Drop a follow edge if present."""
        targets = self.edges.get(source)
        if not targets or target not in targets:
            return False
        targets.discard(target)
        if not targets:
            del self.edges[source]
        self._notify(ChangeKind.EDGE_REMOVED, source, target)
        return True

    def successors(self, url: str) -> set[str]:
        """Registries that ``url`` follows."""
        return self.edges.get(url, set())

    def predecessors(self, url: str) -> set[str]:
        """Registries following ``url``. Scans all edges."""
        return {source for source, targets in self.edges.items() if url in targets}

    def out_degree(self, url: str) -> int:
        return len(self.edges.get(url, ()))

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())

    # -------------------------------------------------------------------------
    # Trusted set and blocklist
    # -------------------------------------------------------------------------

    def add_user_trusted(self, url: str) -> bool:
        """Mark a registry as directly vouched for by the user."""
        if url in self.user_trusted:
            return False
        self.user_trusted.add(url)
        self._notify(ChangeKind.TRUSTED_ADDED, url)
        return True

    def remove_user_trusted(self, url: str) -> bool:
        if url not in self.user_trusted:
            return False
        self.user_trusted.discard(url)
        self._notify(ChangeKind.TRUSTED_REMOVED, url)
        return True

    def add_blocked(self, url: str) -> bool:
        """Mark a registry as explicitly distrusted by the user."""
        if url in self.blocked:
            return False
        self.blocked.add(url)
        self._notify(ChangeKind.BLOCKED_ADDED, url)
        return True

    def remove_blocked(self, url: str) -> bool:
        if url not in self.blocked:
            return False
        self.blocked.discard(url)
        self._notify(ChangeKind.BLOCKED_REMOVED, url)
        return True

    def is_trusted(self, url: str) -> bool:
        return url in self.user_trusted

    def is_blocked(self, url: str) -> bool:
        return url in self.blocked

    # -------------------------------------------------------------------------
    # Whole-graph views
    # -------------------------------------------------------------------------

    def all_nodes(self) -> set[str]:
        """Every registry the graph knows about in any role."""
        known = set(self.nodes)
        known.update(self.user_trusted)
        known.update(self.blocked)
        for source, targets in self.edges.items():
            known.add(source)
            known.update(targets)
        return known

    def snapshot(self) -> TrustGraph:
        """Return an independent copy without listeners.

        Metadata records are immutable and therefore shared.
        """
        return TrustGraph(
            edges={source: set(targets) for source, targets in self.edges.items()},
            nodes=dict(self.nodes),
            user_trusted=set(self.user_trusted),
            blocked=set(self.blocked),
        )

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        if url in self.nodes or url in self.edges or url in self.user_trusted or url in self.blocked:
            return True
        return any(url in targets for targets in self.edges.values())

    def __len__(self) -> int:
        return len(self.all_nodes())

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.all_nodes()))

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[str, str]],
        user_trusted: Iterable[str] = (),
        blocked: Iterable[str] = (),
    ) -> TrustGraph:
        """Build a graph from (source, target) pairs."""
        graph = cls()
        for source, target in edges:
            graph.add_edge(source, target)
        for url in user_trusted:
            graph.add_user_trusted(url)
        for url in blocked:
            graph.add_blocked(url)
        return graph
