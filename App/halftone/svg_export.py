"""Static SVG export of a halftone dot field.

AIDEV-NOTE: Built with svg.py elements and serialized once at the end. When
animation settings are given, every dot is wrapped in a `ht-dot` group that
carries its position (data-x/data-y) for hover/click scripts and, with the
organic pulse enabled, its own CSS animation timing.
"""

from html import escape
from typing import TYPE_CHECKING

import svg

from models import DotShape, FillPattern

from .utils import clamped_pulse, pulse_timing

if TYPE_CHECKING:
    from models import AnimationSettings, Dot, DotField, HalftoneSettings

PATTERN_ID = "fillPattern"
DOT_CLASS = "ht-dot"
PULSE_KEYFRAMES = "htPulse"


def _fmt(value: float) -> str:
    """Coordinates are written with two fixed decimals."""
    return f"{value:.2f}"


def escape_glyph(char: str) -> str:
    """Escape &, < and > in glyph text.

    svg.py writes text content as-is, so glyphs are escaped here.
    """
    return escape(char, quote=False)


def pattern_defs(settings: "HalftoneSettings") -> "list[svg.Element]":
    """Reusable fill tile for stripes/checkerboard, empty for solid fills."""
    color1, color2 = settings.color1, settings.color2

    if settings.fill_pattern == FillPattern.STRIPES:
        return [
            svg.Pattern(
                id=PATTERN_ID,
                patternUnits="userSpaceOnUse",
                width=8,
                height=8,
                elements=[
                    svg.Rect(width=8, height=8, fill=color2),
                    svg.Path(
                        d=[
                            svg.M(-2, 2),
                            svg.l(4, -4),
                            svg.M(0, 8),
                            svg.l(8, -8),
                            svg.M(6, 10),
                            svg.l(4, -4),
                        ],
                        stroke=color1,
                        stroke_width=2,
                    ),
                ],
            )
        ]
    if settings.fill_pattern == FillPattern.CHECKERBOARD:
        return [
            svg.Pattern(
                id=PATTERN_ID,
                patternUnits="userSpaceOnUse",
                width=10,
                height=10,
                elements=[
                    svg.Rect(width=10, height=10, fill=color2),
                    svg.Rect(width=5, height=5, x=0, y=0, fill=color1),
                    svg.Rect(width=5, height=5, x=5, y=5, fill=color1),
                ],
            )
        ]
    return []


def pulse_css(animation: "AnimationSettings") -> str:
    """Stylesheet for the dot groups, with the breathing keyframes if enabled."""
    pulse, _ = clamped_pulse(animation)
    rules = []

    if animation.organic_pulse:
        max_scale = 1 + pulse
        min_opacity = 0.85 - pulse * 0.25
        rules.append(
            f"@keyframes {PULSE_KEYFRAMES} {{\n"
            f"  0%, 100% {{ transform: scale(1); opacity: {min_opacity:.2f}; }}\n"
            f"  50% {{ transform: scale({max_scale:.3f}); opacity: 1; }}\n"
            "}"
        )

    animation_props = (
        f"  animation-name: {PULSE_KEYFRAMES};\n"
        "  animation-timing-function: ease-in-out;\n"
        "  animation-iteration-count: infinite;\n"
        if animation.organic_pulse
        else ""
    )
    rules.append(
        f".{DOT_CLASS} {{\n"
        "  transform-origin: center;\n"
        f"{animation_props}"
        "  transition:\n"
        "    transform 260ms cubic-bezier(0.16, 1, 0.3, 1),\n"
        "    filter 260ms ease-out,\n"
        "    opacity 260ms ease-out;\n"
        "}"
    )
    return "\n".join(rules)


def _fill(dot: "Dot", settings: "HalftoneSettings") -> str:
    if settings.fill_pattern == FillPattern.SOLID:
        return dot.color
    return f"url(#{PATTERN_ID})"


def _rotation(dot: "Dot", settings: "HalftoneSettings"):
    """Rotate transform about the dot for non-round shapes, or None."""
    if settings.angle == 0:
        return None
    return [svg.Rotate(settings.angle, _fmt(dot.x), _fmt(dot.y))]


def _circle(dot: "Dot", settings: "HalftoneSettings") -> svg.Element:
    return svg.Circle(
        cx=_fmt(dot.x),
        cy=_fmt(dot.y),
        r=_fmt(dot.size),
        fill=_fill(dot, settings),
    )


def _square(dot: "Dot", settings: "HalftoneSettings") -> svg.Element:
    side = _fmt(dot.size * 2)
    return svg.Rect(
        x=_fmt(dot.x - dot.size),
        y=_fmt(dot.y - dot.size),
        width=side,
        height=side,
        fill=_fill(dot, settings),
        transform=_rotation(dot, settings),
    )


def _glyph(dot: "Dot", settings: "HalftoneSettings") -> svg.Element:
    if settings.dot_shape == DotShape.PLUS:
        char = "+"
    else:
        char = settings.custom_character or "*"

    return svg.Text(
        x=_fmt(dot.x),
        y=_fmt(dot.y),
        text=escape_glyph(char),
        font_size=_fmt(dot.size * 3),
        fill=_fill(dot, settings),
        font_family="sans-serif",
        font_weight="bold",
        text_anchor="middle",
        dominant_baseline="middle",
        transform=_rotation(dot, settings),
    )


SHAPE_BUILDERS = {
    DotShape.ROUND: _circle,
    DotShape.SQUARE: _square,
    DotShape.PLUS: _glyph,
    DotShape.CUSTOM: _glyph,
}


def _animated_group(
    dot: "Dot",
    shape: svg.Element,
    width: float,
    height: float,
    animation: "AnimationSettings",
) -> svg.Element:
    """Wrap a shape in its hover/pulse group."""
    style = None
    if animation.organic_pulse:
        _, tempo = clamped_pulse(animation)
        delay, duration = pulse_timing(dot, width, height, tempo)
        style = f"animation-duration:{duration:.2f}s;animation-delay:{delay:.2f}s"

    return svg.G(
        class_=[DOT_CLASS],
        style=style,
        extra={"data-x": f"{dot.x:.2f}", "data-y": f"{dot.y:.2f}"},
        elements=[shape],
    )


def render_svg(
    field: "DotField",
    width: float,
    height: float,
    settings: "HalftoneSettings",
    animation: "AnimationSettings | None" = None,
) -> str:
    """Convert a dot field to an SVG document string.

    Args:
        field: Dots to render (any iterable of Dot works)
        width: Canvas width; also the viewBox width
        height: Canvas height; also the viewBox height
        settings: Shape, fill pattern, colors and rotation
        animation: When given, wrap dots in animated groups

    Returns:
        SVG markup, or an empty string for an empty field
    """
    dots = list(field)
    if not dots:
        return ""

    build_shape = SHAPE_BUILDERS[settings.dot_shape]

    defs: list[svg.Element] = []
    if animation is not None:
        defs.append(svg.Style(text=pulse_css(animation)))
    defs.extend(pattern_defs(settings))

    elements: list[svg.Element] = []
    if defs:
        elements.append(svg.Defs(elements=defs))

    for dot in dots:
        # Skip tiny invisible dots
        if not dot.visible:
            continue

        shape = build_shape(dot, settings)
        if animation is not None:
            shape = _animated_group(dot, shape, width, height, animation)
        elements.append(shape)

    document = svg.SVG(
        width=width,
        height=height,
        viewBox=svg.ViewBoxSpec(0, 0, width, height),
        elements=elements,
    )
    return document.as_str()
