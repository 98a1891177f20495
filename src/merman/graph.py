"""Graph model: nodes, directed connections and the JSON description parser.

A description looks like::

    {
        "layoutDirection": "LeftRight",
        "nodes": {
            "input0": {"name": "Input 0"},
            "add": {"name": "Add", "op": "Add"}
        },
        "connections": [{"from": "input0", "to": "add"}]
    }

Nodes are identified by their position in ``nodes`` (insertion order). The
string keys are only used to resolve connection endpoints while building.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from merman.errors import GraphError, NodeReferenceError, ParseError

logger = logging.getLogger(__name__)

# ─── Description Schema ───────────────────────────────────────────────────────


class NodeFormat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    op: str | None = None


class ConnectionFormat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class GraphFormat(BaseModel):
    """Top-level description object."""

    model_config = ConfigDict(populate_by_name=True)

    layout_direction: str = Field(alias="layoutDirection")
    nodes: dict[str, NodeFormat]
    connections: list[ConnectionFormat] = Field(default_factory=list)


# ─── Graph Model ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Node:
    """A node of the graph."""

    id: str
    name: str
    op: str | None = None


@dataclass(frozen=True)
class Connection:
    """Directed connection: ``from_index`` produces a value consumed by ``to_index``."""

    from_index: int
    to_index: int


class Graph:
    """Immutable node list plus per-node outgoing and incoming connection tables.

    Attributes:
        nodes: Nodes in description order; a node's index is its identity.
        connections: All connections in description order.
        from_connections: ``from_connections[i]`` holds connections whose source is ``i``.
        to_connections: ``to_connections[i]`` holds connections whose destination is ``i``.
        direction: Layout direction string from the description. Kept for
            round-tripping only, rendering is always right-to-left by depth.
    """

    def __init__(
        self,
        nodes: list[Node],
        connections: list[Connection],
        direction: str = "LeftRight",
    ) -> None:
        node_count = len(nodes)
        from_connections: list[list[Connection]] = [[] for _ in range(node_count)]
        to_connections: list[list[Connection]] = [[] for _ in range(node_count)]

        for connection in connections:
            for index in (connection.from_index, connection.to_index):
                if not 0 <= index < node_count:
                    raise GraphError(f"Connection {connection} references missing node index {index}")
            from_connections[connection.from_index].append(connection)
            to_connections[connection.to_index].append(connection)

        self.nodes: tuple[Node, ...] = tuple(nodes)
        self.connections: tuple[Connection, ...] = tuple(connections)
        self.from_connections: tuple[tuple[Connection, ...], ...] = tuple(tuple(c) for c in from_connections)
        self.to_connections: tuple[tuple[Connection, ...], ...] = tuple(tuple(c) for c in to_connections)
        self.direction = direction

    @classmethod
    def from_str(cls, content: str) -> Graph:
        """Parse a JSON description into a Graph.

        Raises:
            ParseError: The text is not JSON or does not match ``GraphFormat``.
            NodeReferenceError: A connection endpoint names an undeclared node.
        """
        try:
            parsed = GraphFormat.model_validate_json(content)
        except ValidationError as exc:
            raise ParseError(str(exc)) from exc
        return cls.from_format(parsed)

    @classmethod
    def from_format(cls, parsed: GraphFormat) -> Graph:
        """Build a Graph from an already validated description."""
        nodes: list[Node] = []
        index_map: dict[str, int] = {}
        for index, (key, node_format) in enumerate(parsed.nodes.items()):
            nodes.append(Node(id=key, name=node_format.name, op=node_format.op))
            index_map[key] = index

        connections: list[Connection] = []
        for connection_format in parsed.connections:
            from_index = index_map.get(connection_format.from_)
            if from_index is None:
                raise NodeReferenceError(connection_format.from_, "from")
            to_index = index_map.get(connection_format.to)
            if to_index is None:
                raise NodeReferenceError(connection_format.to, "to")
            connections.append(Connection(from_index=from_index, to_index=to_index))

        logger.debug(f"Built graph with {len(nodes)} nodes and {len(connections)} connections")
        return cls(nodes, connections, direction=parsed.layout_direction)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_index: int) -> Node:
        return self.nodes[node_index]

    def to_digraph(self) -> nx.MultiDiGraph:
        """Return a networkx view keyed by node index, one edge per connection."""
        g: nx.MultiDiGraph = nx.MultiDiGraph()
        for index, node in enumerate(self.nodes):
            g.add_node(index, id=node.id, name=node.name, op=node.op)
        for connection in self.connections:
            g.add_edge(connection.from_index, connection.to_index)
        return g


def build(content: str) -> Graph:
    """Parse a JSON graph description. See ``Graph.from_str``."""
    return Graph.from_str(content)
