"""SVG renderer: maps depth levels to columns and draws boxes with curved arrows."""

from __future__ import annotations

from merman.graph import Graph, Node
from merman.layout import SortOrder
from merman.style import DEFAULT_STYLE, Style

# ─── Constants ──────────────────────────────────────────────────────────────

# Written without blank lines: markdown ends an inline HTML block at the first
# empty line, which would cut the SVG apart.
_DEFS = """<defs>
    <marker
        id="arrowhead"
        markerWidth="6"
        markerHeight="6"
        refX="0"
        refY="3"
        orient="auto"
    >
        <polygon points="0 0, 6 3, 0 6" />
    </marker>
</defs>"""

_BOX_STROKE = 'fill="none" stroke="black" rx="2" stroke-width="2"'
_FRAME_STROKE = 'fill="white" stroke="black" rx="2" stroke-width="2"'
_EDGE_STROKE = 'stroke="black" stroke-width="2" marker-end="url(#arrowhead)" fill="none"'


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _text(style: Style, size: int, x: int, y: int, content: str) -> str:
    return (
        f'<text font-size="{size}" font-family="{style.font_family}" x="{x}" y="{y}" '
        f'dominant-baseline="middle" text-anchor="middle">{_escape(content)}</text>'
    )


# ─── Coordinate Helpers ─────────────────────────────────────────────────────


def _center(sort_order: SortOrder, position: int, style: Style) -> tuple[int, int]:
    """Return the (x, y) pixel centre of the node at ``position`` in the render order."""
    level = sort_order.depths[position]
    w = style.width_per_level
    h = style.height_per_level

    x = (sort_order.level_count - level - 1) * w + style.margin_width + w // 2
    y = (
        sort_order.index_at_depth[position] * h
        + style.margin_height
        + h // 2
        + h // 2 * (sort_order.max_nodes_in_level - sort_order.nodes_in_level[level])
    )
    return x, y


# ─── Shape Rendering ────────────────────────────────────────────────────────


def _render_node(node: Node, style: Style, cx: int, cy: int) -> list[str]:
    text_offset = style.box_height // 4
    parts = [
        f'<rect x="{cx - style.box_width // 2}" y="{cy - style.box_height // 2}" '
        f'height="{style.box_height}" width="{style.box_width}" {_BOX_STROKE}/>'
    ]
    if node.op is not None:
        parts.append(_text(style, style.text_font_size_larger, cx, cy - text_offset, node.op))
    parts.append(_text(style, style.text_font_size_normal, cx, cy + text_offset, node.name))
    return parts


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_incoming_edges(
    graph: Graph,
    sort_order: SortOrder,
    style: Style,
    node_index: int,
    position: int,
) -> list[str]:
    """Curves from every producer of ``node_index`` into its left edge.

    Inputs fan out evenly over the consumer's height, first input on top. The
    control points reach further for edges skipping levels so the curve clears
    the boxes in between.
    """
    x, y = _center(sort_order, position, style)
    level = sort_order.depths[position]
    incoming = graph.to_connections[node_index]
    num_inputs = len(incoming)

    parts: list[str] = []
    for k, connection in enumerate(incoming):
        from_position = sort_order.position_of(connection.from_index)
        from_level = sort_order.depths[from_position]
        from_x, y_from = _center(sort_order, from_position, style)

        x_from = from_x + style.box_width // 2
        x_to = x - style.box_width // 2 - style.arrowhead_gap
        y_to = y + style.box_height // 2 - (style.box_height // (num_inputs + 1)) * (num_inputs - k)

        ext = style.width_between_boxes // 4 + (from_level - level - 1) * style.width_between_boxes

        parts.append(
            f'<path d="M {x_from} {y_from} C {x_from + ext} {y_from}, {x_to - ext} {y_to}, {x_to} {y_to}" '
            f"{_EDGE_STROKE}/>"
        )
    return parts


# ─── Public Renderer ────────────────────────────────────────────────────────


def to_svg(graph: Graph, sort_order: SortOrder, style: Style = DEFAULT_STYLE) -> str:
    """Render a level-assigned graph to an SVG document.

    Depth 0 is the rightmost column. Each level stacks its nodes top to bottom
    and is centred vertically against the busiest level.
    """
    width = style.width_per_level * sort_order.level_count + 2 * style.margin_width
    height = style.height_per_level * sort_order.max_nodes_in_level + 2 * style.margin_height
    margin = style.top_level_margin

    parts = [
        f'<svg height="{height}" width="{width}" xmlns="http://www.w3.org/2000/svg">',
        _DEFS,
        f'<rect x="{margin}" y="{margin}" height="{height - margin}" width="{width - margin}" {_FRAME_STROKE}/>',
    ]

    for position, node_index in enumerate(sort_order.order_indices):
        cx, cy = _center(sort_order, position, style)
        parts.extend(_render_node(graph.node(node_index), style, cx, cy))
        parts.extend(_render_incoming_edges(graph, sort_order, style, node_index, position))

    parts.append("</svg>")
    return "\n".join(parts) + "\n"


class SvgRenderer:
    """SVG renderer: consumes a Graph and its SortOrder, produces an SVG string."""

    def __init__(self, style: Style = DEFAULT_STYLE) -> None:
        self.style = style

    def render(self, graph: Graph, sort_order: SortOrder) -> str:
        return to_svg(graph, sort_order, self.style)
