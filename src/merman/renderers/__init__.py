"""Output renderers."""

from merman.renderers.base import Renderer
from merman.renderers.svg import SvgRenderer, to_svg

__all__ = ["Renderer", "SvgRenderer", "to_svg"]
