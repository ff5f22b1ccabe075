"""Utility functions shared by the generator and the renderers.

AIDEV-NOTE: The SVG and Lottie exporters must clamp pulse settings and derive
per-dot timing identically, so both go through the helpers here.
"""

import math
from typing import TYPE_CHECKING

from models import (
    MAX_PULSE_STRENGTH,
    MAX_PULSE_TEMPO,
    MIN_PULSE_TEMPO,
)

if TYPE_CHECKING:
    from models import AnimationSettings, Dot


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up.

    AIDEV-NOTE: Python's round() is banker's rounding (round(0.5) == 0);
    colors, grid rows and frame numbers all need 127.5 -> 128.
    """
    return math.floor(value + 0.5)


def clamp_pulse_strength(pulse_strength: float) -> float:
    """Peak scale delta limited to [0, 0.35]."""
    return clamp(pulse_strength, 0.0, MAX_PULSE_STRENGTH)


def clamp_pulse_tempo(pulse_tempo: float) -> float:
    """Tempo multiplier limited to [0.25, 3]."""
    return clamp(pulse_tempo, MIN_PULSE_TEMPO, MAX_PULSE_TEMPO)


def clamped_pulse(animation: "AnimationSettings") -> "tuple[float, float]":
    """Return (pulse_strength, pulse_tempo) after clamping."""
    return (
        clamp_pulse_strength(animation.pulse_strength),
        clamp_pulse_tempo(animation.pulse_tempo),
    )


def pulse_timing(
    dot: "Dot", width: float, height: float, tempo: float
) -> "tuple[float, float]":
    """Position-based pulse delay and duration for a dot, in seconds.

    Nearby dots get similar timing so the field breathes as a slow travelling
    wave instead of pulsing in sync.

    Args:
        dot: Dot to time
        width: Canvas width used to normalize x
        height: Canvas height used to normalize y
        tempo: Clamped tempo multiplier

    Returns:
        Tuple of (delay, duration); delay spans up to ~8s across the field,
        duration 6-8s, both divided by tempo
    """
    norm_x = dot.x / width
    norm_y = dot.y / height
    delay = (norm_x + norm_y) * 4 / tempo
    duration = (6 + norm_x * 2) / tempo
    return delay, duration


def visible_dots(dots: "list[Dot]") -> "list[Dot]":
    """Filter out dots too small to be seen."""
    return [dot for dot in dots if dot.visible]
