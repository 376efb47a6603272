"""Tests for Sybil-pattern detection.

Tests cover:
- Asymmetric follower pattern
- Rapid adoption pattern
- Circular following within the depth bound
- Score capping, missing metadata, and alert logging
"""

from __future__ import annotations

import logging

import pytest

from registry_trust.trust.graph import RegistryNode, TrustGraph
from registry_trust.trust.sybil import (
    REASON_ASYMMETRIC,
    REASON_CIRCULAR,
    REASON_RAPID_ADOPTION,
    SybilDetector,
    detect_sybil,
)

A = "https://a.example"
B = "https://b.example"
C = "https://c.example"
D = "https://d.example"
E = "https://e.example"
F = "https://f.example"


def ring(*urls: str) -> list[tuple[str, str]]:
    """Edges of a directed cycle through ``urls``."""
    return [(urls[i], urls[(i + 1) % len(urls)]) for i in range(len(urls))]


# =============================================================================
# METADATA HEURISTICS
# =============================================================================


class TestMetadataHeuristics:
    """Tests for the metadata-based heuristics."""

    def test_asymmetric_follow_only(self):
        """Popular, old, small install base: only the asymmetric flag fires."""
        graph = TrustGraph()
        graph.add_node(A, RegistryNode(follower_count=200, following_count=2, age=500, install_count=50))

        report = SybilDetector().analyze(graph, A)

        assert report.score == pytest.approx(0.3)
        assert report.reasons == [REASON_ASYMMETRIC]
        assert not report.circular

    def test_rapid_adoption(self):
        graph = TrustGraph()
        graph.add_node(A, RegistryNode(age=10, install_count=20_000, follower_count=5, following_count=5))

        report = SybilDetector().analyze(graph, A)

        assert report.score == pytest.approx(0.4)
        assert report.reasons == [REASON_RAPID_ADOPTION]

    def test_thresholds_are_strict(self):
        graph = TrustGraph()
        graph.add_node(
            A,
            RegistryNode(follower_count=100, following_count=10, age=30, install_count=10_000),
        )

        assert detect_sybil(graph, A) == 0.0

    def test_missing_metadata_is_zero_signal(self):
        graph = TrustGraph.from_edges([(A, B)])

        assert detect_sybil(graph, A) == 0.0
        assert detect_sybil(graph, "https://unknown.example") == 0.0


# =============================================================================
# CIRCULARITY
# =============================================================================


class TestCircularity:
    """Tests for cycle detection."""

    def test_three_node_cycle(self):
        graph = TrustGraph.from_edges(ring(A, B, C), user_trusted=[A])

        report = SybilDetector().analyze(graph, A)

        assert report.circular
        assert report.score == pytest.approx(0.3)
        assert report.reasons == [REASON_CIRCULAR]

    def test_self_loop_is_a_cycle(self):
        graph = TrustGraph.from_edges([(A, A)])

        assert SybilDetector().has_cycle(graph, A)

    def test_cycle_of_max_depth_found(self):
        graph = TrustGraph.from_edges(ring(A, B, C, D, E))

        assert SybilDetector().has_cycle(graph, A)

    def test_cycle_beyond_max_depth_ignored(self):
        graph = TrustGraph.from_edges(ring(A, B, C, D, E, F))

        assert not SybilDetector().has_cycle(graph, A)
        assert SybilDetector(max_depth=6).has_cycle(graph, A)

    def test_cycle_not_through_start_is_ignored(self):
        graph = TrustGraph.from_edges([(A, B)] + ring(B, C, D))

        assert not SybilDetector().has_cycle(graph, A)
        assert SybilDetector().has_cycle(graph, B)

    def test_branches_explored_independently(self):
        """A node reached too deep on one branch is still explored on another.

        Via B, C sits at depth 2 and its path back to A is too long; via the
        direct edge A -> C the cycle A -> C -> D -> A fits in three edges.
        """
        graph = TrustGraph.from_edges(
            [(A, B), (B, C), (A, C), (C, D), (D, A)],
        )

        assert SybilDetector(max_depth=3).has_cycle(graph, A)
        assert not SybilDetector(max_depth=2).has_cycle(graph, A)

    def test_dense_graph_terminates(self):
        nodes = [f"https://n{i}.example" for i in range(12)]
        edges = [(s, t) for s in nodes[1:] for t in nodes[1:] if s != t]
        edges.append((nodes[0], nodes[1]))
        graph = TrustGraph.from_edges(edges)

        assert not SybilDetector().has_cycle(graph, nodes[0])


# =============================================================================
# COMBINED SCORE
# =============================================================================


class TestCombinedScore:
    """Tests for the capped combination and alerting."""

    def test_all_heuristics_capped_at_one(self):
        graph = TrustGraph.from_edges(ring(A, B))
        graph.add_node(
            A,
            RegistryNode(follower_count=500, following_count=1, age=3, install_count=50_000),
        )

        report = SybilDetector().analyze(graph, A)

        assert report.score == pytest.approx(1.0)
        assert report.score <= 1.0
        assert set(report.reasons) == {REASON_ASYMMETRIC, REASON_RAPID_ADOPTION, REASON_CIRCULAR}

    def test_alert_logged_at_threshold(self, caplog):
        graph = TrustGraph.from_edges(ring(A, B))
        graph.add_node(
            A,
            RegistryNode(follower_count=500, following_count=1, age=3, install_count=50_000),
        )

        with caplog.at_level(logging.WARNING, logger="registry_trust.trust.sybil"):
            SybilDetector(alert_threshold=0.7).analyze(graph, A)

        assert any("Sybil suspicion" in r.getMessage() for r in caplog.records)

    def test_no_alert_below_threshold(self, caplog):
        graph = TrustGraph.from_edges(ring(A, B))

        with caplog.at_level(logging.WARNING, logger="registry_trust.trust.sybil"):
            SybilDetector(alert_threshold=0.7).analyze(graph, A)

        assert not caplog.records

    def test_report_to_dict(self):
        graph = TrustGraph.from_edges(ring(A, B))

        data = SybilDetector().analyze(graph, A).to_dict()

        assert data == {
            "url": A,
            "score": 0.3,
            "circular": True,
            "reasons": [REASON_CIRCULAR],
        }
