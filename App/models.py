"""Data models and constants for the halftone dot studio."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# AIDEV-NOTE: Dots at or below this size are kept in the field but never drawn
MIN_VISIBLE_SIZE = 0.1

# Pulse animation limits shared by the SVG and Lottie exporters
MAX_PULSE_STRENGTH = 0.35
MIN_PULSE_TEMPO = 0.25
MAX_PULSE_TEMPO = 3.0

# Configuration file path
CONFIG_FILE = Path.home() / ".halftone_config.json"


class DotShape(Enum):
    """Shapes a halftone dot can be drawn as.

    AIDEV-NOTE: Closed set. Every renderer keeps one handler per member in a
    dispatch table, so adding a shape means touching svg_export, lottie_export
    and live together (tests check the tables are exhaustive).
    """

    ROUND = "round"
    SQUARE = "square"
    PLUS = "plus"  # "+" glyph
    CUSTOM = "custom"  # HalftoneSettings.custom_character glyph


class FillPattern(Enum):
    """How dot shapes are filled."""

    SOLID = "solid"  # Each dot's own color
    STRIPES = "stripes"  # 8x8 diagonal stripe tile
    CHECKERBOARD = "checkerboard"  # 10x10 two-color checker tile


class GradientDirection(Enum):
    """Axis along which color1 blends into color2."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Dot:
    """A single sampled halftone dot.

    AIDEV-NOTE: Position is in source canvas pixels (cell center plus jitter).
    Size is radius-like; shapes interpret it as radius or half-width.
    """

    x: float
    y: float
    size: float  # >= 0
    color: str  # "#rrggbb"

    @property
    def visible(self) -> bool:
        return self.size > MIN_VISIBLE_SIZE


@dataclass(frozen=True)
class HalftoneSettings:
    """Configuration snapshot driving one generation pass and its renderers."""

    # Sampling grid
    resolution: int = 100  # Grid columns; rows follow the aspect ratio
    dot_size: float = 1.0  # Max dot scale relative to half the cell
    dot_shape: DotShape = DotShape.ROUND
    image_blur: float = 0.0  # Gaussian blur radius in px applied before sampling
    invert: bool = False  # Invert luminance (dark areas get large dots)

    # Color
    use_gradient: bool = False
    gradient_direction: GradientDirection = GradientDirection.VERTICAL
    color1: str = "#000000"
    color2: str = "#ffffff"

    randomness: float = 0.0  # Position jitter, fraction of a cell (0-1)
    custom_character: str = "*"  # Glyph used when dot_shape is CUSTOM
    fill_pattern: FillPattern = FillPattern.SOLID
    angle: float = 0.0  # Rotation in degrees for non-round shapes

    def __post_init__(self):
        # Accept plain strings (e.g. from a JSON config) for the enum fields
        object.__setattr__(self, "dot_shape", DotShape(self.dot_shape))
        object.__setattr__(
            self, "gradient_direction", GradientDirection(self.gradient_direction)
        )
        object.__setattr__(self, "fill_pattern", FillPattern(self.fill_pattern))


@dataclass(frozen=True)
class AnimationSettings:
    """Pulse timing used by the SVG and Lottie exporters."""

    organic_pulse: bool = True
    pulse_strength: float = 0.08  # Extra scale at peak (0.08 => scale 1.08)
    pulse_tempo: float = 1.0  # Speed multiplier (1 = default)

    # AIDEV-NOTE: Interactive-only fields. Persisted for the UI layer but
    # never read by generation or export.
    hover_parallax: float = 1.0
    click_ripple_speed: float = 1.0
    ui_hover_motion: bool = True


@dataclass(frozen=True)
class DotField:
    """Ordered (row-major) dots produced by one generation pass."""

    dots: "tuple[Dot, ...]"
    width: float  # Canvas width the field was sampled from
    height: float
    cols: int
    rows: int
    cell_width: float = field(init=False)
    cell_height: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "dots", tuple(self.dots))
        object.__setattr__(self, "cell_width", self.width / self.cols)
        object.__setattr__(self, "cell_height", self.height / self.rows)

    def __len__(self) -> int:
        return len(self.dots)

    def __iter__(self):
        return iter(self.dots)

    def __getitem__(self, index):
        return self.dots[index]

    def visible(self) -> "list[Dot]":
        """Dots large enough to be rendered."""
        return [dot for dot in self.dots if dot.visible]
