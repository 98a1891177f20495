"""Markdown pass: replaces fenced ```merman blocks with rendered SVG."""

from __future__ import annotations

import logging

from merman.api import render_svg
from merman.style import DEFAULT_STYLE, Style

logger = logging.getLogger(__name__)

FENCE_START = "```merman\n"
FENCE_END = "```\n"


def find_blocks(content: str) -> list[tuple[int, int]]:
    """Return (start, end) spans of complete merman blocks, fences included.

    Scanning stops at the first opening fence without a closing fence.
    """
    spans: list[tuple[int, int]] = []
    current = 0
    while True:
        start = content.find(FENCE_START, current)
        if start == -1:
            break
        end = content.find(FENCE_END, start + len(FENCE_START))
        if end == -1:
            break
        current = end + len(FENCE_END)
        spans.append((start, current))
    return spans


def transform_markdown(content: str, style: Style = DEFAULT_STYLE) -> str:
    """Render every merman block in ``content`` and splice the SVG in its place.

    All blocks are rendered before anything is assembled, so an error in any
    block propagates without producing partial output.
    """
    spans = find_blocks(content)
    rendered = [render_svg(content[start + len(FENCE_START) : end - len(FENCE_END)], style) for start, end in spans]

    parts: list[str] = []
    current = 0
    for (start, end), svg in zip(spans, rendered):
        parts.append(content[current:start])
        parts.append(svg)
        current = end
    parts.append(content[current:])

    logger.debug(f"Replaced {len(spans)} merman blocks")
    return "".join(parts)
