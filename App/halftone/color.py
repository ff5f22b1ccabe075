"""Hex color parsing and linear RGB interpolation for dot gradients."""

import re

from .utils import clamp, round_half_up

_HEX_COLOR = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def hex_to_rgb(hex_color: str) -> "tuple[int, int, int] | None":
    """Parse a strict 6-digit hex color ("#rrggbb" or "rrggbb").

    Returns:
        RGB tuple (0-255 each channel), or None if the string is malformed
    """
    match = _HEX_COLOR.match(hex_color) if isinstance(hex_color, str) else None
    if match is None:
        return None
    r, g, b = (int(channel, 16) for channel in match.groups())
    return (r, g, b)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Encode RGB channels (0-255) as a lowercase "#rrggbb" string."""
    return f"#{r:02x}{g:02x}{b:02x}"


def lerp_color(color1: str, color2: str, amount: float) -> str:
    """Linearly interpolate between two hex colors.

    Args:
        color1: Start color ("#rrggbb")
        color2: End color ("#rrggbb")
        amount: Blend position, clamped to 0-1

    Returns:
        Blended color, or color1 unchanged if either color is malformed
    """
    c1 = hex_to_rgb(color1)
    c2 = hex_to_rgb(color2)
    if c1 is None or c2 is None:
        return color1

    a = clamp(amount, 0.0, 1.0)
    r, g, b = (round_half_up(start + (end - start) * a) for start, end in zip(c1, c2))
    return rgb_to_hex(r, g, b)
