"""Tests for hop distance from the user's trusted set."""

from __future__ import annotations

from registry_trust.trust.graph import TrustGraph
from registry_trust.trust.hops import HopDistance, compute_hops

X = "https://x.example"
Y = "https://y.example"
Z = "https://z.example"
W = "https://w.example"


class TestHopDistance:
    """Tests for HopDistance.distance()."""

    def test_trusted_node_is_zero_hops(self):
        graph = TrustGraph.from_edges([(X, Y)], user_trusted=[X])

        assert HopDistance().distance(graph, X) == 0

    def test_scenario_direct_follow_and_unreachable(self):
        """userTrusted={X}, X->Y, Z has no path."""
        graph = TrustGraph.from_edges([(X, Y)], user_trusted=[X])
        graph.add_node(Z)

        assert compute_hops(graph, Y) == 1
        assert compute_hops(graph, Z) is None

    def test_edges_are_followed_forward_only(self):
        graph = TrustGraph.from_edges([(Y, X)], user_trusted=[X])

        assert compute_hops(graph, Y) is None

    def test_shortest_of_several_paths(self):
        graph = TrustGraph.from_edges(
            [(X, Y), (Y, Z), (Z, W), (X, W)],
            user_trusted=[X],
        )

        assert compute_hops(graph, W) == 1
        assert compute_hops(graph, Z) == 2

    def test_nearest_trusted_source_wins(self):
        graph = TrustGraph.from_edges([(X, Y), (Y, Z), (W, Z)], user_trusted=[X, W])

        assert compute_hops(graph, Z) == 1

    def test_cycles_terminate(self):
        graph = TrustGraph.from_edges([(X, Y), (Y, X), (Y, Y)], user_trusted=[X])

        assert compute_hops(graph, Y) == 1
        assert compute_hops(graph, Z) is None

    def test_no_trusted_nodes(self):
        graph = TrustGraph.from_edges([(X, Y)])

        assert compute_hops(graph, X) is None
        assert compute_hops(graph, Y) is None

    def test_unknown_target(self):
        graph = TrustGraph.from_edges([(X, Y)], user_trusted=[X])

        assert compute_hops(graph, "https://nowhere.example") is None


class TestHopDistances:
    """Tests for the batch HopDistance.distances()."""

    def test_matches_single_queries(self):
        graph = TrustGraph.from_edges(
            [(X, Y), (Y, Z), (Z, X), (W, X)],
            user_trusted=[Y],
        )
        hop = HopDistance()

        distances = hop.distances(graph)

        for url in graph.all_nodes():
            assert distances.get(url) == hop.distance(graph, url)
        assert distances == {Y: 0, Z: 1, X: 2}
