"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from merman.graph import Graph
from merman.layout import SortOrder


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, graph: Graph, sort_order: SortOrder) -> str:
        """Render a level-assigned graph to an output string."""
        ...
