# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Hop distance from the user's trusted set.

Multi-source breadth-first search seeded with every directly trusted
registry at distance 0, following follow edges forward. A registry with
no directed path from the trusted set is unreachable, reported as None.
"""

from __future__ import annotations

from collections import deque

from .graph import TrustGraph


class HopDistance:
    """Shortest follow-edge distance from any user-trusted registry.

    Both entry points visit each node and edge at most once, so work is
    O(V + E) and cycles or self-loops terminate.
    """

    def distance(self, graph: TrustGraph, target: str) -> int | None:
        """Return the hop distance to ``target``, or None if unreachable."""
        queue: deque[tuple[str, int]] = deque()
        visited: set[str] = set()
        for trusted in graph.user_trusted:
            queue.append((trusted, 0))
            visited.add(trusted)

        while queue:
            current, depth = queue.popleft()
            if current == target:
                return depth
            for neighbor in graph.successors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append((neighbor, depth + 1))

        return None

    def distances(self, graph: TrustGraph) -> dict[str, int]:
        """Return the hop distance of every reachable registry.

        Registries missing from the result are unreachable.
        """
        result: dict[str, int] = {url: 0 for url in graph.user_trusted}
        queue: deque[str] = deque(graph.user_trusted)

        while queue:
            current = queue.popleft()
            depth = result[current]
            for neighbor in graph.successors(current):
                if neighbor not in result:
                    result[neighbor] = depth + 1
                    queue.append(neighbor)

        return result


def compute_hops(graph: TrustGraph, target: str) -> int | None:
    """Compute the hop distance to one registry (convenience function)."""
    return HopDistance().distance(graph, target)
