"""Rendering style: box geometry, spacing and typography in pixels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Style:
    top_level_margin: int = 5

    box_width: int = 160
    width_between_boxes: int = 50

    box_height: int = 40
    height_between_boxes: int = 40

    margin_width: int = 10
    margin_height: int = 10

    text_font_size_normal: int = 10
    text_font_size_larger: int = 12
    font_family: str = "monospace"

    # Horizontal space left between a curve's end and the consumer box for the arrowhead.
    arrowhead_gap: int = 10

    @property
    def width_per_level(self) -> int:
        return self.box_width + self.width_between_boxes

    @property
    def height_per_level(self) -> int:
        return self.box_height + self.height_between_boxes


DEFAULT_STYLE = Style()
