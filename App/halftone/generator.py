"""Halftone dot field generation from RGBA pixel buffers.

AIDEV-NOTE: Samples one pixel at the center of each grid cell (no averaging,
aliasing is accepted) and maps its luminance to dot size. Brighter pixels give
larger dots unless the settings invert luminance.
"""

import math
from typing import TYPE_CHECKING

import numpy as np

from models import Dot, DotField, GradientDirection

from .color import lerp_color
from .utils import clamp, round_half_up

if TYPE_CHECKING:
    from models import HalftoneSettings

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def grid_shape(width: float, height: float, resolution: int) -> "tuple[int, int]":
    """Return (cols, rows) for a canvas, keeping the aspect ratio."""
    cols = max(1, int(resolution))
    rows = max(1, round_half_up(cols * (height / width)))
    return cols, rows


def dot_color(
    x: float,
    y: float,
    width: float,
    height: float,
    settings: "HalftoneSettings",
) -> str:
    """Color for a point, following the gradient settings.

    Args:
        x: Cell origin X in canvas pixels
        y: Cell origin Y in canvas pixels
        width: Canvas width
        height: Canvas height
        settings: Halftone settings (gradient toggle, direction, colors)

    Returns:
        Hex color string
    """
    if not settings.use_gradient:
        return settings.color1

    if settings.gradient_direction == GradientDirection.VERTICAL:
        position = y / height
    else:
        position = x / width
    return lerp_color(settings.color1, settings.color2, clamp(position, 0.0, 1.0))


def rgba_array(pixels, width: int, height: int) -> np.ndarray:
    """View a packed RGBA buffer as a (height, width, 4) uint8 array."""
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        data = np.frombuffer(pixels, dtype=np.uint8)
    else:
        data = np.asarray(pixels, dtype=np.uint8)
    return data.reshape(-1)[: width * height * 4].reshape(height, width, 4)


def generate_dots(
    pixels,
    width: int,
    height: int,
    settings: "HalftoneSettings",
    rng: "np.random.Generator | None" = None,
) -> DotField:
    """Convert pixel data into a row-major halftone dot field.

    Args:
        pixels: Packed RGBA buffer (bytes, bytearray, memoryview or numpy
            array) of length width * height * 4
        width: Canvas width in pixels
        height: Canvas height in pixels
        settings: Halftone settings snapshot
        rng: Random source for position jitter. A fresh unseeded generator
            is used when None; pass a seeded one for reproducible output.

    Returns:
        DotField with exactly cols * rows dots
    """
    rng = rng if rng is not None else np.random.default_rng()
    rgba = rgba_array(pixels, width, height)

    cols, rows = grid_shape(width, height, settings.resolution)
    cell_width = width / cols
    cell_height = height / rows

    base_size = (min(cell_width, cell_height) / 2) * settings.dot_size
    randomness = settings.randomness
    red_weight, green_weight, blue_weight = LUMA_WEIGHTS

    dots = []
    append_dot = dots.append
    for r in range(rows):
        for c in range(cols):
            x = c * cell_width
            y = r * cell_height

            # Nearest-to-center pixel of the cell
            sample_x = math.floor(x + cell_width / 2)
            sample_y = math.floor(y + cell_height / 2)
            red, green, blue = (int(v) for v in rgba[sample_y, sample_x, :3])

            luminance = (red_weight * red + green_weight * green + blue_weight * blue) / 255
            if settings.invert:
                luminance = 1 - luminance

            size = base_size * luminance

            # Two draws per dot, x then y
            rand_x = (rng.random() - 0.5) * randomness * cell_width
            rand_y = (rng.random() - 0.5) * randomness * cell_height

            append_dot(
                Dot(
                    x=x + cell_width / 2 + rand_x,
                    y=y + cell_height / 2 + rand_y,
                    size=size,
                    color=dot_color(x, y, width, height, settings),
                )
            )

    return DotField(dots=dots, width=width, height=height, cols=cols, rows=rows)


def recolor_dots(field: DotField, settings: "HalftoneSettings") -> DotField:
    """Recompute dot colors without resampling positions or sizes.

    AIDEV-NOTE: Used when only color/gradient settings change. The cell
    origin is recovered from each dot's row-major index so the result matches
    a fresh generation pass (apart from jitter).
    """
    recolored = []
    for index, dot in enumerate(field.dots):
        r, c = divmod(index, field.cols)
        color = dot_color(
            c * field.cell_width,
            r * field.cell_height,
            field.width,
            field.height,
            settings,
        )
        recolored.append(Dot(x=dot.x, y=dot.y, size=dot.size, color=color))

    return DotField(
        dots=recolored,
        width=field.width,
        height=field.height,
        cols=field.cols,
        rows=field.rows,
    )
