"""Exception taxonomy for graph construction and level assignment."""

from __future__ import annotations


class MermanError(Exception):
    """Base class for every error raised by merman."""


# ─── Construction ─────────────────────────────────────────────────────────────


class GraphError(MermanError, ValueError):
    """The graph description or the in-memory graph is invalid."""


class ParseError(GraphError):
    """The description text is not valid JSON or does not match the schema."""


class NodeReferenceError(GraphError):
    """A connection names a node key that is not declared."""

    def __init__(self, key: str, side: str) -> None:
        super().__init__(f"Invalid {side} reference {key}")
        self.key = key
        self.side = side


# ─── Level Assignment ─────────────────────────────────────────────────────────


class LayoutError(MermanError):
    """Level assignment could not be completed."""


class EmptyGraphError(LayoutError):
    """No node without outgoing connections exists to anchor depth 0."""

    def __init__(self) -> None:
        super().__init__("EmptyGraph: no node without outgoing connections")


class CycleError(LayoutError):
    """A path longer than the node count was found during level assignment.

    ``node_index``/``node_name`` identify the node being processed when the
    distance bound was exceeded. ``cycle`` holds the node names of one concrete
    cycle in the graph, when one could be located.
    """

    def __init__(self, node_index: int, node_name: str, cycle: tuple[str, ...] = ()) -> None:
        message = f"Cycle detected at node {node_name}"
        if cycle:
            message += f" ({' -> '.join(cycle + cycle[:1])})"
        super().__init__(message)
        self.node_index = node_index
        self.node_name = node_name
        self.cycle = cycle


class UnreachableNodeError(LayoutError):
    """Some nodes have no path to any sink, so they never received a depth."""

    def __init__(self, node_indices: tuple[int, ...], node_names: tuple[str, ...]) -> None:
        super().__init__(f"Unreachable nodes (no path to an output): {', '.join(node_names)}")
        self.node_indices = node_indices
        self.node_names = node_names
