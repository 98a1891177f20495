"""Tests for renderers/svg.py and style.py: canvas size, node and edge geometry."""

from __future__ import annotations

import dataclasses
import re

from merman.graph import Connection, Graph, Node
from merman.layout import reverse_topological_sort
from merman.renderers.svg import SvgRenderer, to_svg
from merman.style import DEFAULT_STYLE, Style

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(names: list[str], *edges: tuple[str, str], ops: dict[str, str] | None = None) -> Graph:
    ops = ops or {}
    index = {name: i for i, name in enumerate(names)}
    nodes = [Node(id=name, name=name, op=ops.get(name)) for name in names]
    connections = [Connection(index[src], index[tgt]) for src, tgt in edges]
    return Graph(nodes, connections)


def chain(length: int) -> Graph:
    names = [f"n{i}" for i in range(length)]
    return make_graph(names, *zip(names, names[1:]))


def fan_in(inputs: int) -> Graph:
    names = [f"in{i}" for i in range(inputs)] + ["Out"]
    return make_graph(names, *[(name, "Out") for name in names[:-1]])


def render(graph: Graph, style: Style = DEFAULT_STYLE) -> str:
    return to_svg(graph, reverse_topological_sort(graph), style)


def canvas_size(svg: str) -> tuple[int, int]:
    m = re.match(r'<svg height="(\d+)" width="(\d+)"', svg)
    assert m is not None
    return int(m.group(2)), int(m.group(1))


def paths(svg: str) -> list[str]:
    return re.findall(r'<path d="([^"]+)"', svg)


SIMPLE_ADD = make_graph(
    ["Input 0", "Bias", "Add", "Output"],
    ("Input 0", "Add"),
    ("Bias", "Add"),
    ("Add", "Output"),
    ops={"Bias": "Const", "Add": "Add"},
)


# ─── Style ────────────────────────────────────────────────────────────────────


class TestStyle:
    def test_default_values(self):
        assert DEFAULT_STYLE.box_width == 160
        assert DEFAULT_STYLE.box_height == 40
        assert DEFAULT_STYLE.width_per_level == 210
        assert DEFAULT_STYLE.height_per_level == 80

    def test_replace(self):
        style = dataclasses.replace(DEFAULT_STYLE, box_width=100)
        assert style.width_per_level == 150
        assert DEFAULT_STYLE.box_width == 160


# ─── Canvas ───────────────────────────────────────────────────────────────────


class TestCanvas:
    def test_simple_add_size(self):
        assert canvas_size(render(SIMPLE_ADD)) == (650, 180)

    def test_width_linear_in_levels(self):
        for length in range(1, 6):
            width, height = canvas_size(render(chain(length)))
            assert width == length * 210 + 20
            assert height == 100

    def test_height_linear_in_occupancy(self):
        for inputs in range(1, 6):
            width, height = canvas_size(render(fan_in(inputs)))
            assert width == 2 * 210 + 20
            assert height == inputs * 80 + 20

    def test_custom_style(self):
        style = Style(box_width=100, width_between_boxes=20, box_height=30, height_between_boxes=10)
        assert canvas_size(render(chain(3), style)) == (3 * 120 + 20, 40 + 20)

    def test_background_frame(self):
        svg = render(SIMPLE_ADD)
        assert '<rect x="5" y="5" height="175" width="645" fill="white"' in svg


# ─── Document Structure ───────────────────────────────────────────────────────


class TestDocument:
    def test_deterministic(self):
        so = reverse_topological_sort(SIMPLE_ADD)
        assert to_svg(SIMPLE_ADD, so, DEFAULT_STYLE) == to_svg(SIMPLE_ADD, so, DEFAULT_STYLE)

    def test_one_box_per_node_one_path_per_connection(self):
        svg = render(SIMPLE_ADD)
        assert svg.count("<rect") == 1 + 4
        assert len(paths(svg)) == 3

    def test_no_blank_lines(self):
        assert "\n\n" not in render(SIMPLE_ADD)

    def test_ends_with_newline(self):
        svg = render(SIMPLE_ADD)
        assert svg.startswith("<svg ")
        assert svg.endswith("</svg>\n")

    def test_arrowhead_marker(self):
        svg = render(SIMPLE_ADD)
        assert 'id="arrowhead"' in svg
        assert svg.count('marker-end="url(#arrowhead)"') == 3

    def test_labels(self):
        svg = render(SIMPLE_ADD)
        assert 'x="325" y="80" dominant-baseline="middle" text-anchor="middle">Add</text>' in svg
        assert 'x="115" y="120" dominant-baseline="middle" text-anchor="middle">Const</text>' in svg
        assert 'x="115" y="140" dominant-baseline="middle" text-anchor="middle">Bias</text>' in svg

    def test_op_uses_larger_font(self):
        svg = render(SIMPLE_ADD)
        assert '<text font-size="12" font-family="monospace" x="325" y="80"' in svg
        assert '<text font-size="10" font-family="monospace" x="325" y="100"' in svg

    def test_text_escaped(self):
        g = make_graph(["a<b & c>"])
        assert ">a&lt;b &amp; c&gt;</text>" in render(g)

    def test_renderer_matches_to_svg(self):
        so = reverse_topological_sort(SIMPLE_ADD)
        assert SvgRenderer().render(SIMPLE_ADD, so) == to_svg(SIMPLE_ADD, so)


# ─── Geometry ─────────────────────────────────────────────────────────────────


class TestGeometry:
    def test_sink_in_rightmost_column(self):
        svg = render(SIMPLE_ADD)
        assert '<rect x="455" y="70" height="40" width="160"' in svg

    def test_smaller_level_centered(self):
        """Output and Add share the middle of a two-row canvas."""
        svg = render(SIMPLE_ADD)
        assert '<rect x="245" y="70"' in svg
        assert '<rect x="35" y="30"' in svg
        assert '<rect x="35" y="110"' in svg

    def test_adjacent_level_edge(self):
        assert paths(render(SIMPLE_ADD))[0] == "M 405 90 C 417 90, 433 90, 445 90"

    def test_inputs_fan_out(self):
        """Two inputs into Add land at one third and two thirds of its height."""
        assert paths(render(SIMPLE_ADD))[1:] == [
            "M 195 50 C 207 50, 223 84, 235 84",
            "M 195 130 C 207 130, 223 97, 235 97",
        ]

    def test_skip_level_edge_curves_wider(self):
        """A → B → Out plus A → Out: the A → Out curve spans two levels."""
        g = make_graph(["A", "B", "Out"], ("A", "B"), ("B", "Out"), ("A", "Out"))
        out_edges = paths(render(g))[:2]
        # Out is the first node rendered; its inputs are B→Out then A→Out in description order.
        assert out_edges == [
            "M 405 50 C 417 50, 433 44, 445 44",
            "M 195 50 C 257 50, 383 57, 445 57",
        ]
