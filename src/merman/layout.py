"""Layout module: level assignment by reverse topological sort.

Every node gets a depth: 0 for sinks (nodes without outgoing connections),
increasing towards the sources. The renderer places depth 0 in the rightmost
column, so data flows left to right.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

import networkx as nx

from merman.errors import CycleError, EmptyGraphError, UnreachableNodeError
from merman.graph import Graph

logger = logging.getLogger(__name__)

# ─── Sort Order ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SortOrder:
    """Result of level assignment.

    All per-position sequences are indexed by position in ``order_indices``,
    not by node index.

    Attributes:
        order_indices: Node indices in render order, depth 0 first.
        depths: Depth of the node at each position (non-decreasing).
        index_at_depth: Position of the node within its depth level.
        nodes_in_level: Number of nodes at each depth.
    """

    order_indices: tuple[int, ...]
    depths: tuple[int, ...]
    index_at_depth: tuple[int, ...]
    nodes_in_level: tuple[int, ...]

    @property
    def level_count(self) -> int:
        return len(self.nodes_in_level)

    @property
    def max_nodes_in_level(self) -> int:
        return max(self.nodes_in_level)

    def position_of(self, node_index: int) -> int:
        """Position of ``node_index`` in the render order.

        Raises KeyError if the node is not part of this order.
        """
        try:
            return self.order_indices.index(node_index)
        except ValueError:
            raise KeyError(node_index) from None


# ─── Depth Assignment ─────────────────────────────────────────────────────────


def assign_depths(graph: Graph) -> list[int]:
    """Compute the depth of every node, indexed by node index.

    Breadth-first walk against the connection direction, seeded with all sinks
    at distance 0. The queue is FIFO so distances are popped in non-decreasing
    order; a node popped again at a larger distance takes the larger value,
    which leaves each node at its longest distance from a sink. A distance
    reaching the node count can only come from a cycle.

    Raises:
        EmptyGraphError: No node without outgoing connections.
        CycleError: The distance bound was exceeded.
        UnreachableNodeError: Some nodes have no path to a sink.
    """
    node_count = graph.node_count

    nodes_to_visit: deque[tuple[int, int]] = deque(
        (index, 0) for index, outgoing in enumerate(graph.from_connections) if not outgoing
    )
    if not nodes_to_visit:
        raise EmptyGraphError()

    distances: list[int | None] = [None] * node_count

    while nodes_to_visit:
        node_index, distance = nodes_to_visit.popleft()

        if distance >= node_count:
            raise CycleError(node_index, graph.node(node_index).name, find_cycle(graph))

        # Already expanded at this distance.
        if distances[node_index] == distance:
            continue
        distances[node_index] = distance

        for connection in graph.to_connections[node_index]:
            nodes_to_visit.append((connection.from_index, distance + 1))

    unvisited = tuple(index for index, distance in enumerate(distances) if distance is None)
    if unvisited:
        raise UnreachableNodeError(unvisited, tuple(graph.node(i).name for i in unvisited))

    return [d for d in distances if d is not None]


def find_cycle(graph: Graph) -> tuple[str, ...]:
    """Return the node names along one cycle of the graph, or () if acyclic."""
    try:
        edges = nx.find_cycle(graph.to_digraph())
    except nx.NetworkXNoCycle:
        return ()
    return tuple(graph.node(edge[0]).name for edge in edges)


# ─── Reverse Topological Sort ─────────────────────────────────────────────────


def reverse_topological_sort(graph: Graph) -> SortOrder:
    """Assign depths and derive the render order.

    Nodes are ordered by depth with a stable sort, so within a level they keep
    their description order. ``index_at_depth`` restarts at 0 for every level.
    """
    node_depths = assign_depths(graph)

    order_indices = sorted(range(graph.node_count), key=node_depths.__getitem__)
    depths = [node_depths[i] for i in order_indices]

    nodes_in_level = [0] * (depths[-1] + 1)
    index_at_depth: list[int] = []

    last_depth = 0
    index_within_depth = 0
    for depth in depths:
        if depth != last_depth:
            last_depth = depth
            index_within_depth = 0
        index_at_depth.append(index_within_depth)
        nodes_in_level[depth] = index_within_depth + 1
        index_within_depth += 1

    logger.debug(f"Assigned {len(nodes_in_level)} depth levels, order: {order_indices}")

    return SortOrder(
        order_indices=tuple(order_indices),
        depths=tuple(depths),
        index_at_depth=tuple(index_at_depth),
        nodes_in_level=tuple(nodes_in_level),
    )
