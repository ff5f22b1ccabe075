"""Halftone pipeline from pixel buffers to dot renderings.

AIDEV-NOTE: Data flows one way: pixels -> generator -> immutable DotField,
which the three renderers consume independently:
- generator: DotField sampling and recoloring
- color: hex parsing and gradient interpolation
- svg_export: static SVG (optionally with CSS pulse animation)
- lottie_export: size-bounded Lottie animation document
- live: QPainter preview on a QImage
- processor: HalftoneProcessor state holder with regenerate()
"""

from .color import lerp_color
from .generator import generate_dots, recolor_dots
from .live import render_live
from .lottie_export import render_lottie
from .processor import HalftoneProcessor
from .svg_export import render_svg

__all__ = [
    "HalftoneProcessor",
    "generate_dots",
    "lerp_color",
    "recolor_dots",
    "render_live",
    "render_lottie",
    "render_svg",
]
