"""Public API for merman."""

from merman.api import render_svg
from merman.errors import (
    CycleError,
    EmptyGraphError,
    GraphError,
    LayoutError,
    MermanError,
    NodeReferenceError,
    ParseError,
    UnreachableNodeError,
)
from merman.graph import Connection, Graph, Node, build
from merman.layout import SortOrder, reverse_topological_sort
from merman.markdown import transform_markdown
from merman.renderers.svg import SvgRenderer, to_svg
from merman.style import DEFAULT_STYLE, Style

__all__ = [
    "DEFAULT_STYLE",
    "Connection",
    "CycleError",
    "EmptyGraphError",
    "Graph",
    "GraphError",
    "LayoutError",
    "MermanError",
    "Node",
    "NodeReferenceError",
    "ParseError",
    "SortOrder",
    "Style",
    "SvgRenderer",
    "UnreachableNodeError",
    "build",
    "render_svg",
    "reverse_topological_sort",
    "to_svg",
    "transform_markdown",
]
