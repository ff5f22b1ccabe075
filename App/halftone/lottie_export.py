"""Lottie animation export of a halftone dot field.

AIDEV-NOTE: Approximates the SVG breathing pulse in a Lottie document that
motion tools (Framer, After Effects importers) can load. File size is the
main constraint:
- the timeline is at most 8 seconds (divided by tempo) at 60 fps,
- at most 200 dots become layers (index-stride sampling, deterministic),
- each layer has 3 scale keyframes and a flat opacity curve.
Every fill is forced to black regardless of dot or gradient color. This is a
known export limitation, kept on purpose (see DESIGN.md).
"""

import json
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from models import AnimationSettings, DotShape

from .utils import clamped_pulse, pulse_timing, round_half_up, visible_dots

if TYPE_CHECKING:
    from models import Dot, DotField, HalftoneSettings

LOTTIE_VERSION = "5.7.4"
FRAME_RATE = 60
MAX_DURATION_SECONDS = 8.0
MAX_LAYERS = 200

# Dots are scaled up so they stay visible at typical playback sizes
SIZE_SCALE = 10
MIN_DIAMETER = 5

# Black, in Lottie's 0-1 channel range
FILL_COLOR = [0, 0, 0]

Value = Union[float, "list[float]"]


def _as_list(value: Value) -> "list[float]":
    return list(value) if isinstance(value, (list, tuple)) else [value]


@dataclass(frozen=True)
class Keyframe:
    """One keyframe with the standard ease in/out bezier handles."""

    frame: int
    start: Value
    end: "Value | None" = None

    def to_dict(self) -> dict:
        data = {
            "i": {"x": 0.833, "y": 0.833},  # Incoming bezier handle
            "o": {"x": 0.167, "y": 0.167},  # Outgoing bezier handle
            "t": self.frame,
            "s": _as_list(self.start),
        }
        if self.end is not None:
            data["e"] = _as_list(self.end)
        return data


@dataclass(frozen=True)
class StaticProperty:
    """Property with a fixed value ("a": 0)."""

    value: Value

    def to_dict(self) -> dict:
        return {"a": 0, "k": self.value}


@dataclass(frozen=True)
class AnimatedProperty:
    """Property driven by keyframes ("a": 1)."""

    keyframes: "tuple[Keyframe, ...]"

    def to_dict(self) -> dict:
        return {"a": 1, "k": [keyframe.to_dict() for keyframe in self.keyframes]}


Property = Union[StaticProperty, AnimatedProperty]


def timeline_out_point(tempo: float) -> int:
    """Last frame of the shared timeline for a clamped tempo."""
    return math.ceil((MAX_DURATION_SECONDS / tempo) * FRAME_RATE)


def sample_dots(dots: "list[Dot]", max_dots: int = MAX_LAYERS) -> "list[Dot]":
    """Drop invisible dots and keep every ceil(n / max_dots)-th of the rest."""
    filtered = visible_dots(dots)
    if len(filtered) <= max_dots:
        return filtered
    stride = math.ceil(len(filtered) / max_dots)
    return filtered[::stride]


def dot_diameter(dot: "Dot") -> float:
    return max(dot.size * 2 * SIZE_SCALE, MIN_DIAMETER)


def _ellipse(diameter: float) -> dict:
    return {
        "ty": "el",
        "p": StaticProperty([0, 0]).to_dict(),  # Center at layer position
        "s": StaticProperty([diameter, diameter]).to_dict(),
    }


def _rectangle(diameter: float) -> dict:
    return {
        "ty": "rc",
        "p": StaticProperty([0, 0]).to_dict(),
        "s": StaticProperty([diameter, diameter]).to_dict(),
        "r": 0,
    }


# Glyph shapes have no Lottie primitive and degrade to circles
SHAPE_BUILDERS = {
    DotShape.ROUND: _ellipse,
    DotShape.SQUARE: _rectangle,
    DotShape.PLUS: _ellipse,
    DotShape.CUSTOM: _ellipse,
}


def pulse_keyframes(
    delay: float,
    duration: float,
    out_point: int,
    pulse: float,
    organic_pulse: bool,
) -> "tuple[Property, Property]":
    """Scale and opacity properties for one layer.

    Args:
        delay: Pulse delay in seconds
        duration: Pulse duration in seconds
        out_point: Shared timeline end frame
        pulse: Clamped pulse strength
        organic_pulse: Whether the pulse is enabled

    Returns:
        Tuple of (scale, opacity) properties
    """
    if not organic_pulse:
        return (
            AnimatedProperty((Keyframe(0, [100, 100], [100, 100]),)),
            AnimatedProperty((Keyframe(0, 100, 100),)),
        )

    delay_frames = round_half_up(delay * FRAME_RATE)
    duration_frames = round_half_up(duration * FRAME_RATE)

    # Keep the whole pulse inside the shared timeline
    clamped_delay = min(delay_frames, out_point - 10)
    clamped_duration = min(duration_frames, out_point - clamped_delay)
    mid_frame = min(
        clamped_delay + round_half_up(clamped_duration * 0.5), out_point - 1
    )

    peak = (1 + pulse) * 100
    scale = AnimatedProperty(
        (
            Keyframe(0, [100, 100], [100, 100]),
            Keyframe(mid_frame, [peak, peak], [peak, peak]),
            Keyframe(out_point, [100, 100], [100, 100]),
        )
    )
    # Opacity stays flat at 100; the curve exists only for structure
    opacity = AnimatedProperty(
        (
            Keyframe(0, 100, 100),
            Keyframe(mid_frame, 100, 100),
            Keyframe(out_point, 100, 100),
        )
    )
    return scale, opacity


def build_layer(
    dot: "Dot",
    index: int,
    width: float,
    height: float,
    out_point: int,
    settings: "HalftoneSettings",
    animation: AnimationSettings,
) -> dict:
    """Shape layer for a single dot."""
    pulse, tempo = clamped_pulse(animation)
    delay, duration = pulse_timing(dot, width, height, tempo)
    scale, opacity = pulse_keyframes(
        delay, duration, out_point, pulse, animation.organic_pulse
    )

    shape = SHAPE_BUILDERS[settings.dot_shape](dot_diameter(dot))
    fill = {
        "ty": "fl",
        "o": StaticProperty(100).to_dict(),
        "c": StaticProperty(FILL_COLOR).to_dict(),
        "r": 1,
        "bm": 0,
    }

    return {
        "ddd": 0,
        "ind": index + 1,
        "ty": 4,  # Shape layer
        "nm": f"Dot {index + 1}",
        "sr": 1,
        "ks": {
            "o": opacity.to_dict(),
            "r": StaticProperty(settings.angle or 0).to_dict(),
            "p": StaticProperty([dot.x, dot.y, 0]).to_dict(),
            "a": StaticProperty([0, 0, 0]).to_dict(),
            "s": scale.to_dict(),
        },
        "ao": 0,
        "shapes": [
            {
                "ty": "gr",
                "it": [shape, fill],  # Shape first, then fill
                "nm": "Dot Group",
                "np": 2,
                "cix": 2,
                "bm": 0,
            }
        ],
        "ip": 0,
        "op": out_point,
        "st": 0,
        "bm": 0,
    }


def render_lottie(
    field: "DotField",
    width: float,
    height: float,
    settings: "HalftoneSettings",
    animation: "AnimationSettings | None" = None,
) -> dict:
    """Convert a dot field to a Lottie animation document.

    Args:
        field: Dots to render (any iterable of Dot works)
        width: Canvas width
        height: Canvas height
        settings: Halftone settings (shape and rotation are used)
        animation: Pulse settings, defaults when None

    Returns:
        JSON-serializable Lottie document; zero layers for an empty field
    """
    animation = animation or AnimationSettings()
    _, tempo = clamped_pulse(animation)
    out_point = timeline_out_point(tempo)

    layers = [
        build_layer(dot, index, width, height, out_point, settings, animation)
        for index, dot in enumerate(sample_dots(list(field)))
    ]

    # AIDEV-NOTE: Layers are reversed so the last processed dot is the
    # bottom-most layer. No background layer; the canvas stays transparent.
    return {
        "v": LOTTIE_VERSION,
        "fr": FRAME_RATE,
        "ip": 0,
        "op": out_point,
        "w": width,
        "h": height,
        "nm": "Halftone Animation",
        "ddd": 0,
        "assets": [],
        "layers": layers[::-1],
        "markers": [],
    }


def lottie_json(document: dict) -> str:
    """Serialize a Lottie document compactly for players and file export."""
    return json.dumps(document, separators=(",", ":"))
