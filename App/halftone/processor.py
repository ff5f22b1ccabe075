"""Halftone processor holding the current image and settings.

AIDEV-NOTE: This is the single entry point the host layer talks to. It owns
the current pixel source and settings snapshot and exposes regenerate();
the host calls set_image/set_pixels/update_settings whenever an input
changes. There is no event subscription mechanism here.
"""

from dataclasses import fields, replace
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image, ImageFilter

from models import AnimationSettings, DotField, HalftoneSettings

from .generator import generate_dots, recolor_dots, rgba_array
from .live import render_live
from .lottie_export import lottie_json, render_lottie
from .svg_export import render_svg

if TYPE_CHECKING:
    from PyQt6.QtGui import QPaintDevice

# Canvas size used when the host gives no container size
DEFAULT_CANVAS_SIZE = 512

# Settings that change sampling and need a full regeneration
SAMPLING_FIELDS = ("resolution", "dot_size", "image_blur", "invert", "randomness")

# Settings that only change dot colors
COLOR_FIELDS = ("use_gradient", "gradient_direction", "color1", "color2")


def fit_canvas_size(
    image_width: int,
    image_height: int,
    max_width: int = DEFAULT_CANVAS_SIZE,
    max_height: int = DEFAULT_CANVAS_SIZE,
) -> "tuple[int, int]":
    """Fit an image into a container while keeping its aspect ratio.

    Args:
        image_width: Source image width in pixels
        image_height: Source image height in pixels
        max_width: Container width
        max_height: Container height

    Returns:
        Tuple of (canvas_width, canvas_height), each at least 1

    AIDEV-NOTE: Width fills the container first; height is capped after.
    """
    aspect_ratio = image_width / image_height
    canvas_width = max_width
    canvas_height = canvas_width / aspect_ratio
    if canvas_height > max_height:
        canvas_height = max_height
        canvas_width = canvas_height * aspect_ratio
    return max(1, int(canvas_width)), max(1, int(canvas_height))


def changed_fields(old: HalftoneSettings, new: HalftoneSettings) -> "set[str]":
    """Names of settings fields that differ between two snapshots."""
    return {
        f.name for f in fields(HalftoneSettings) if getattr(old, f.name) != getattr(new, f.name)
    }


class HalftoneProcessor:
    """Turns the current image into a dot field and renders it."""

    def __init__(
        self,
        settings: HalftoneSettings | None = None,
        animation: AnimationSettings | None = None,
        rng: "np.random.Generator | None" = None,
    ):
        self.settings = settings or HalftoneSettings()
        self.animation = animation or AnimationSettings()
        self.rng = rng if rng is not None else np.random.default_rng()

        self.image: Image.Image | None = None  # RGBA, already at canvas size
        self.field: DotField | None = None

    @property
    def canvas_size(self) -> "tuple[int, int]":
        if self.image is None:
            return (0, 0)
        return self.image.size

    def load_image(self, file_path: str | Path) -> Image.Image:
        """Load and validate an image file.

        Args:
            file_path: Path to image file (PNG, JPG, etc.)

        Returns:
            PIL Image in RGBA mode

        Raises:
            ValueError: If file cannot be loaded or is invalid
        """
        try:
            image = Image.open(file_path)
            # AIDEV-NOTE: Always convert to RGBA so pixel buffers are 4 bytes/pixel
            if image.mode != "RGBA":
                image = image.convert("RGBA")
            return image
        except Exception as e:
            raise ValueError(f"Failed to load image: {e}") from e

    def set_image(
        self,
        image: Image.Image | str | Path,
        canvas_size: "tuple[int, int] | None" = None,
    ) -> DotField | None:
        """Use a new source image and regenerate.

        Args:
            image: PIL image or path to an image file
            canvas_size: Container (max_width, max_height) to fit the image
                into; defaults to 512x512

        Returns:
            The new dot field
        """
        if not isinstance(image, Image.Image):
            image = self.load_image(image)
        elif image.mode != "RGBA":
            image = image.convert("RGBA")

        max_width, max_height = canvas_size or (DEFAULT_CANVAS_SIZE, DEFAULT_CANVAS_SIZE)
        width, height = fit_canvas_size(image.width, image.height, max_width, max_height)
        if (width, height) != image.size:
            image = image.resize((width, height), Image.Resampling.LANCZOS)

        print(f"Loaded image at canvas size {width}x{height} pixels.")
        self.image = image
        return self.regenerate()

    def set_pixels(self, pixels, width: int, height: int) -> DotField | None:
        """Use a raw RGBA buffer (e.g. from a host application) and regenerate."""
        self.image = Image.fromarray(rgba_array(pixels, width, height))
        return self.regenerate()

    def clear(self):
        """Drop the current image and dot field."""
        self.image = None
        self.field = None

    def update_settings(self, settings: HalftoneSettings) -> DotField | None:
        """Apply a new settings snapshot, doing as little work as possible.

        Sampling changes regenerate the field, color-only changes recolor it
        in place, and shape/fill/rotation changes leave it untouched.
        """
        changed = changed_fields(self.settings, settings)
        self.settings = settings

        if self.field is None or changed & set(SAMPLING_FIELDS):
            return self.regenerate()
        if changed & set(COLOR_FIELDS):
            self.field = recolor_dots(self.field, settings)
        return self.field

    def update(self, **changes) -> DotField | None:
        """Shorthand for update_settings(replace(settings, **changes))."""
        return self.update_settings(replace(self.settings, **changes))

    def update_animation(self, animation: AnimationSettings):
        self.animation = animation

    def sample_pixels(self) -> "np.ndarray | None":
        """RGBA pixels that generation samples, with the blur applied."""
        if self.image is None:
            return None

        image = self.image
        if self.settings.image_blur > 0:
            image = image.filter(ImageFilter.GaussianBlur(self.settings.image_blur))
        return np.asarray(image, dtype=np.uint8)

    def regenerate(self) -> DotField | None:
        """Rebuild the dot field from the current image and settings."""
        pixels = self.sample_pixels()
        if pixels is None:
            self.field = None
            return None

        width, height = self.canvas_size
        self.field = generate_dots(pixels, width, height, self.settings, rng=self.rng)
        print(
            f"Generated {len(self.field)} dots "
            f"({self.field.cols}x{self.field.rows} grid, "
            f"{len(self.field.visible())} visible)."
        )
        return self.field

    def export_svg(self) -> str:
        """SVG markup for the current field, empty without one."""
        if not self.field:
            return ""
        width, height = self.canvas_size
        return render_svg(self.field, width, height, self.settings, self.animation)

    def export_lottie(self) -> dict | None:
        """Lottie document for the current field, None without one."""
        if not self.field:
            return None
        width, height = self.canvas_size
        document = render_lottie(
            self.field, width, height, self.settings, self.animation
        )
        print(f"Exported Lottie animation with {len(document['layers'])} layers.")
        return document

    def export_lottie_json(self) -> str | None:
        """Lottie document as compact JSON text, ready to hand to a player."""
        document = self.export_lottie()
        if document is None:
            return None
        return lottie_json(document)

    def render_live(self, surface: "QPaintDevice"):
        """Draw the current field onto a preview surface."""
        if self.field is None:
            return
        render_live(self.field, surface, self.settings)
