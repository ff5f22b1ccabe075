"""Tests for halftone dot field generation."""

import numpy as np
import pytest

from halftone.color import hex_to_rgb
from halftone.generator import dot_color, generate_dots, grid_shape, recolor_dots
from models import Dot, DotField, GradientDirection, HalftoneSettings


class TestGrid:
    """Tests for grid sizing."""

    def test_rows_follow_aspect_ratio(self):
        assert grid_shape(100, 50, 10) == (10, 5)
        assert grid_shape(50, 100, 10) == (10, 20)

    def test_minimum_one_row_and_column(self):
        assert grid_shape(1000, 1, 3) == (3, 1)
        assert grid_shape(10, 10, 0) == (1, 1)

    @pytest.mark.parametrize(
        "width,height,resolution",
        [(100, 50, 10), (64, 48, 7), (33, 100, 5), (200, 3, 40)],
    )
    def test_dot_count_is_rows_times_cols(self, make_solid, width, height, resolution):
        settings = HalftoneSettings(resolution=resolution)
        field = generate_dots(make_solid(width, height), width, height, settings)

        cols, rows = grid_shape(width, height, resolution)
        assert len(field) == rows * cols
        assert (field.cols, field.rows) == (cols, rows)


class TestSampling:
    """Tests for luminance sampling and dot sizing."""

    def test_white_image_gives_max_size(self, make_solid):
        settings = HalftoneSettings(resolution=10, dot_size=0.8)
        field = generate_dots(make_solid(100, 50), 100, 50, settings)

        max_size = (min(10, 10) / 2) * 0.8
        for dot in field:
            assert dot.size == pytest.approx(max_size)

    def test_black_image_gives_zero_size(self, make_solid):
        field = generate_dots(
            make_solid(40, 40, (0, 0, 0)), 40, 40, HalftoneSettings(resolution=4)
        )
        assert all(dot.size == 0 for dot in field)
        assert field.visible() == []

    def test_invert_swaps_luminance(self, make_solid):
        settings = HalftoneSettings(resolution=4, invert=True)
        field = generate_dots(make_solid(40, 40, (0, 0, 0)), 40, 40, settings)
        assert all(dot.size == pytest.approx(5.0) for dot in field)

    def test_bt601_weights(self, make_solid):
        field = generate_dots(
            make_solid(10, 10, (255, 0, 0)), 10, 10, HalftoneSettings(resolution=1)
        )
        assert field[0].size == pytest.approx(5.0 * 0.299)

    def test_samples_center_pixel_only(self):
        """Only the center pixel of each cell matters."""
        pixels = np.zeros((4, 4, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        for y, x in [(1, 1), (1, 3), (3, 1), (3, 3)]:
            pixels[y, x, :3] = 255

        field = generate_dots(pixels.tobytes(), 4, 4, HalftoneSettings(resolution=2))
        assert [dot.size for dot in field] == pytest.approx([1.0] * 4)

    def test_size_within_bounds(self, make_ramp):
        settings = HalftoneSettings(resolution=12, dot_size=1.5)
        field = generate_dots(make_ramp(120, 60), 120, 60, settings)

        max_size = (min(field.cell_width, field.cell_height) / 2) * 1.5
        assert all(0 <= dot.size <= max_size + 1e-9 for dot in field)

    def test_size_increases_with_brightness(self, make_ramp):
        field = generate_dots(make_ramp(100, 10), 100, 10, HalftoneSettings(resolution=10))
        sizes = [dot.size for dot in field]
        assert sizes == sorted(sizes)

    def test_accepts_numpy_arrays_and_bytearrays(self, make_solid):
        raw = make_solid(20, 20, (128, 128, 128))
        settings = HalftoneSettings(resolution=5, randomness=0)
        from_bytes = generate_dots(raw, 20, 20, settings)
        from_array = generate_dots(np.frombuffer(raw, np.uint8).reshape(20, 20, 4), 20, 20, settings)
        from_bytearray = generate_dots(bytearray(raw), 20, 20, settings)
        assert from_bytes == from_array == from_bytearray


class TestPositionsAndJitter:
    """Tests for dot placement."""

    def test_positions_are_cell_centers_without_jitter(self, make_solid):
        field = generate_dots(make_solid(100, 50), 100, 50, HalftoneSettings(resolution=10))
        assert (field[0].x, field[0].y) == (5.0, 5.0)
        assert (field[9].x, field[9].y) == (95.0, 5.0)
        assert (field[10].x, field[10].y) == (5.0, 15.0)

    def test_row_major_order(self, make_solid):
        field = generate_dots(make_solid(30, 30), 30, 30, HalftoneSettings(resolution=3))
        keys = [(dot.y, dot.x) for dot in field]
        assert keys == sorted(keys)

    def test_deterministic_without_randomness(self, make_ramp):
        settings = HalftoneSettings(resolution=8, randomness=0, use_gradient=True)
        first = generate_dots(make_ramp(64, 32), 64, 32, settings)
        second = generate_dots(make_ramp(64, 32), 64, 32, settings)
        assert first.dots == second.dots

    def test_seeded_jitter_is_reproducible(self, make_solid):
        settings = HalftoneSettings(resolution=8, randomness=0.7)
        pixels = make_solid(64, 64)
        first = generate_dots(pixels, 64, 64, settings, rng=np.random.default_rng(3))
        second = generate_dots(pixels, 64, 64, settings, rng=np.random.default_rng(3))
        third = generate_dots(pixels, 64, 64, settings, rng=np.random.default_rng(4))
        assert first.dots == second.dots
        assert first.dots != third.dots

    def test_jitter_stays_within_half_cell_scaled(self, make_solid):
        randomness = 0.6
        settings = HalftoneSettings(resolution=10, randomness=randomness)
        field = generate_dots(
            make_solid(100, 100), 100, 100, settings, rng=np.random.default_rng(0)
        )
        for index, dot in enumerate(field):
            r, c = divmod(index, field.cols)
            center_x = c * 10 + 5
            center_y = r * 10 + 5
            assert abs(dot.x - center_x) <= 0.5 * randomness * 10
            assert abs(dot.y - center_y) <= 0.5 * randomness * 10

    def test_jitter_does_not_change_size_or_color(self, make_solid):
        settings = HalftoneSettings(resolution=5, randomness=1.0)
        still = generate_dots(make_solid(50, 50), 50, 50, HalftoneSettings(resolution=5))
        jittered = generate_dots(make_solid(50, 50), 50, 50, settings)
        assert [(d.size, d.color) for d in still] == [(d.size, d.color) for d in jittered]


class TestGradient:
    """Tests for gradient coloring."""

    def test_solid_color_without_gradient(self, make_solid):
        settings = HalftoneSettings(resolution=4, color1="#112233", color2="#ffffff")
        field = generate_dots(make_solid(40, 40), 40, 40, settings)
        assert {dot.color for dot in field} == {"#112233"}

    def test_horizontal_gradient_example(self, make_solid):
        """100x50 image at resolution 10, white to black left to right."""
        settings = HalftoneSettings(
            resolution=10,
            color1="#ffffff",
            color2="#000000",
            use_gradient=True,
            gradient_direction=GradientDirection.HORIZONTAL,
        )
        field = generate_dots(make_solid(100, 50), 100, 50, settings)

        assert (field.cols, field.rows) == (10, 5)
        assert len(field) == 50
        first, last = field[0], field[9]
        assert first.color == "#ffffff"
        assert hex_to_rgb(last.color)[0] < hex_to_rgb(first.color)[0]

    @pytest.mark.parametrize("direction", list(GradientDirection))
    def test_gradient_is_monotonic_along_axis(self, make_solid, direction):
        settings = HalftoneSettings(
            resolution=12,
            color1="#000000",
            color2="#ff8040",
            use_gradient=True,
            gradient_direction=direction,
        )
        field = generate_dots(make_solid(120, 120), 120, 120, settings)

        if direction == GradientDirection.HORIZONTAL:
            line = [field[c] for c in range(field.cols)]
        else:
            line = [field[r * field.cols] for r in range(field.rows)]

        reds = [hex_to_rgb(dot.color)[0] for dot in line]
        blues = [hex_to_rgb(dot.color)[2] for dot in line]
        assert reds == sorted(reds)
        assert blues == sorted(blues)
        assert reds[0] == 0 and reds[-1] > 200

    def test_dot_color_clamps_position(self):
        settings = HalftoneSettings(
            use_gradient=True,
            color1="#000000",
            color2="#ffffff",
            gradient_direction="horizontal",
        )
        assert dot_color(-10, 0, 100, 100, settings) == "#000000"
        assert dot_color(500, 0, 100, 100, settings) == "#ffffff"


class TestRecolor:
    """Tests for recoloring without resampling."""

    def test_recolor_matches_regeneration(self, make_ramp):
        pixels = make_ramp(80, 40)
        before = HalftoneSettings(resolution=8)
        after = HalftoneSettings(
            resolution=8, use_gradient=True, color1="#ff0000", color2="#0000ff"
        )

        recolored = recolor_dots(generate_dots(pixels, 80, 40, before), after)
        regenerated = generate_dots(pixels, 80, 40, after)
        assert recolored.dots == regenerated.dots

    def test_recolor_keeps_positions_and_sizes(self, make_ramp):
        settings = HalftoneSettings(resolution=6, randomness=0.9)
        field = generate_dots(make_ramp(60, 60), 60, 60, settings)
        recolored = recolor_dots(field, HalftoneSettings(color1="#abcdef"))

        assert [(d.x, d.y, d.size) for d in recolored] == [(d.x, d.y, d.size) for d in field]
        assert {d.color for d in recolored} == {"#abcdef"}
        assert recolored is not field


class TestDotField:
    """Tests for the DotField container."""

    def test_visible_filters_small_dots(self):
        dots = [Dot(1, 1, 0.1, "#000000"), Dot(2, 2, 0.11, "#000000"), Dot(3, 3, 0, "#000000")]
        field = DotField(dots=dots, width=10, height=10, cols=3, rows=1)
        assert field.visible() == [dots[1]]
        assert len(field) == 3

    def test_dots_are_immutable(self):
        field = DotField(dots=[Dot(1, 1, 1, "#000000")], width=10, height=10, cols=1, rows=1)
        assert isinstance(field.dots, tuple)
        with pytest.raises(AttributeError):
            field.dots[0].size = 3
