# Make the flat `App/` modules importable without installing, and run Qt
# headless so live-render tests work without a display.
import os
import sys
from pathlib import Path

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def _ensure_app_path():
    app_dir = Path(__file__).resolve().parents[1] / "App"
    if str(app_dir) not in sys.path:
        sys.path.insert(0, str(app_dir))


_ensure_app_path()


@pytest.fixture(scope="session")
def qapp():
    """Session-wide QGuiApplication (needed for fonts in glyph rendering)."""
    from PyQt6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication(sys.argv[:1])
    yield app


def solid_rgba(width: int, height: int, rgb=(255, 255, 255)) -> bytes:
    """Packed RGBA buffer filled with one opaque color."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = rgb
    pixels[..., 3] = 255
    return pixels.tobytes()


def horizontal_ramp(width: int, height: int) -> bytes:
    """Packed RGBA buffer going from black (left) to white (right)."""
    ramp = np.linspace(0, 255, width).round().astype(np.uint8)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = ramp
    pixels[..., 1] = ramp
    pixels[..., 2] = ramp
    pixels[..., 3] = 255
    return pixels.tobytes()


@pytest.fixture
def make_solid():
    """Factory for single-color RGBA buffers."""
    return solid_rgba


@pytest.fixture
def make_ramp():
    """Factory for black-to-white horizontal ramps."""
    return horizontal_ramp
