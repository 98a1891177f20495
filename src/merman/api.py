"""One-shot conversion from a JSON graph description to SVG."""

from __future__ import annotations

from merman.graph import build
from merman.layout import reverse_topological_sort
from merman.renderers.base import Renderer
from merman.renderers.svg import SvgRenderer
from merman.style import DEFAULT_STYLE, Style


def render_svg(content: str, style: Style = DEFAULT_STYLE) -> str:
    """Parse, level-assign and render ``content``. Errors propagate unchanged."""
    graph = build(content)
    sort_order = reverse_topological_sort(graph)
    renderer: Renderer = SvgRenderer(style)
    return renderer.render(graph, sort_order)
