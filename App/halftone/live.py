"""Live raster preview of a dot field on a Qt paint device.

AIDEV-NOTE: Mirrors the SVG export's shape, fill and rotation rules so the
preview matches what gets exported. Fill patterns have no named-pattern
equivalent in QPainter, so the tile is pre-rendered into a small offscreen
QImage and used as a repeating brush texture. No animation here: one static
frame per call.
"""

from typing import TYPE_CHECKING

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QImage, QPainter, QPen

from models import DotShape, FillPattern

if TYPE_CHECKING:
    from PyQt6.QtGui import QPaintDevice

    from models import Dot, DotField, HalftoneSettings

# Glyph boxes are generous so large characters are never clipped
GLYPH_BOX_SCALE = 4


def make_pattern_tile(
    fill_pattern: FillPattern, color1: str, color2: str
) -> "QImage | None":
    """Render the repeating tile for a fill pattern.

    Args:
        fill_pattern: Pattern to render
        color1: Foreground color (stripes / checker squares)
        color2: Background color

    Returns:
        Tile image (8x8 stripes, 10x10 checkerboard), or None for solid fills
    """
    if fill_pattern == FillPattern.SOLID:
        return None

    size = 8 if fill_pattern == FillPattern.STRIPES else 10
    tile = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    tile.fill(QColor(color2))

    painter = QPainter(tile)
    try:
        if fill_pattern == FillPattern.STRIPES:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setPen(QPen(QColor(color1), 2))
            # Three segments so the diagonal wraps seamlessly across tiles
            painter.drawLine(QPointF(-2, 2), QPointF(2, -2))
            painter.drawLine(QPointF(0, 8), QPointF(8, 0))
            painter.drawLine(QPointF(6, 10), QPointF(10, 6))
        else:
            painter.fillRect(0, 0, 5, 5, QColor(color1))
            painter.fillRect(5, 5, 5, 5, QColor(color1))
    finally:
        painter.end()

    return tile


def _draw_round(painter: QPainter, dot: "Dot", settings: "HalftoneSettings"):
    painter.drawEllipse(QPointF(0, 0), dot.size, dot.size)


def _draw_square(painter: QPainter, dot: "Dot", settings: "HalftoneSettings"):
    painter.drawRect(QRectF(-dot.size, -dot.size, dot.size * 2, dot.size * 2))


def _draw_glyph(painter: QPainter, dot: "Dot", settings: "HalftoneSettings"):
    if settings.dot_shape == DotShape.PLUS:
        char = "+"
    else:
        char = settings.custom_character or "*"

    font_size = dot.size * 3
    font = QFont("sans-serif")
    font.setBold(True)
    font.setPixelSize(max(1, round(font_size)))
    painter.setFont(font)

    # Text is drawn with the pen, so the pen carries the dot's fill
    painter.setPen(QPen(painter.brush(), 0))
    half = font_size * GLYPH_BOX_SCALE / 2
    painter.drawText(
        QRectF(-half, -half, half * 2, half * 2),
        int(Qt.AlignmentFlag.AlignCenter),
        char,
    )
    painter.setPen(Qt.PenStyle.NoPen)


SHAPE_PAINTERS = {
    DotShape.ROUND: _draw_round,
    DotShape.SQUARE: _draw_square,
    DotShape.PLUS: _draw_glyph,
    DotShape.CUSTOM: _draw_glyph,
}


def render_live(
    field: "DotField",
    surface: "QPaintDevice",
    settings: "HalftoneSettings",
) -> None:
    """Draw a dot field onto a caller-owned surface.

    Args:
        field: Dots to draw (any iterable of Dot works)
        surface: QImage (or other paint device) in canvas coordinates
        settings: Shape, fill pattern, colors and rotation
    """
    painter = QPainter(surface)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)

        # Start from a clear (transparent) frame
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        painter.fillRect(
            QRectF(0, 0, surface.width(), surface.height()), Qt.GlobalColor.transparent
        )
        painter.setCompositionMode(
            QPainter.CompositionMode.CompositionMode_SourceOver
        )
        painter.setPen(Qt.PenStyle.NoPen)

        tile = make_pattern_tile(
            settings.fill_pattern, settings.color1, settings.color2
        )
        pattern_brush = QBrush(tile) if tile is not None else None
        draw_shape = SHAPE_PAINTERS[settings.dot_shape]
        rotate = settings.dot_shape != DotShape.ROUND and settings.angle != 0

        for dot in field:
            if not dot.visible:
                continue

            if pattern_brush is not None:
                painter.setBrush(pattern_brush)
            else:
                painter.setBrush(QColor(dot.color))

            painter.save()
            painter.translate(dot.x, dot.y)
            if rotate:
                painter.rotate(settings.angle)
            draw_shape(painter, dot, settings)
            painter.restore()
    finally:
        painter.end()
