"""Tests for median-cut palette construction."""

import numpy as np
import pytest

from png2svg.palette import (
    ColorBox,
    build_palette,
    distinct_colors,
    fill_shortfall,
    median_cut,
    palette_size_from_options,
)
from png2svg.types import VectorizeOptions


class TestPaletteSize:
    """Test cases for palette_size_from_options."""

    def test_defaults(self):
        """8 colors at detail 0.6 round up to 5."""
        assert palette_size_from_options(VectorizeOptions()) == 5

    def test_single_precision_product(self):
        """10 * 0.7 must give 7, not 8."""
        assert palette_size_from_options(VectorizeOptions(colors=10, detail=0.7)) == 7

    def test_detail_clamped_low(self):
        assert palette_size_from_options(VectorizeOptions(colors=8, detail=0.0)) == 1

    def test_colors_floor(self):
        assert palette_size_from_options(VectorizeOptions(colors=1, detail=1.0)) == 2


class TestColorBox:
    """Test cases for ColorBox."""

    def test_bounds(self):
        box = ColorBox(np.array([[1, 50, 3, 255], [9, 20, 3, 100]], dtype=np.uint8))
        np.testing.assert_array_equal(box.min, [1, 20, 3, 100])
        np.testing.assert_array_equal(box.max, [9, 50, 3, 255])

    def test_widest_channel_prefers_red_on_tie(self):
        box = ColorBox(np.array([[0, 0, 0, 255], [10, 10, 0, 255]], dtype=np.uint8))
        assert box.widest_channel() == 0

    def test_widest_channel_blue(self):
        box = ColorBox(np.array([[0, 0, 0, 255], [5, 10, 90, 255]], dtype=np.uint8))
        assert box.widest_channel() == 2

    def test_average_truncates(self):
        box = ColorBox(np.array([[1, 0, 0, 255], [2, 0, 0, 254]], dtype=np.uint8))
        np.testing.assert_array_equal(box.average(), [1, 0, 0, 254])


class TestMedianCut:
    """Test cases for median_cut."""

    def test_split_at_median(self):
        """Four reds split into two pairs along the red channel."""
        pixels = np.array(
            [[200, 0, 0, 255], [0, 0, 0, 255], [210, 0, 0, 255], [10, 0, 0, 255]],
            dtype=np.uint8,
        )
        colors = median_cut(pixels, 2)
        np.testing.assert_array_equal(np.array(colors), [[5, 0, 0, 255], [205, 0, 0, 255]])

    def test_stops_when_nothing_to_split(self):
        pixels = np.array([[1, 2, 3, 255]], dtype=np.uint8)
        assert len(median_cut(pixels, 4)) == 1

    def test_reaches_target(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, (500, 4), dtype=np.uint8)
        pixels[:, 3] = 255
        assert len(median_cut(pixels, 6)) == 6


class TestFillShortfall:
    """Test cases for fill_shortfall."""

    def test_only_dissimilar_colors_added(self):
        colors = [np.array([0, 0, 0, 255], dtype=np.uint8)]
        candidates = np.array(
            [[5, 0, 0, 255], [100, 0, 0, 255], [0, 0, 0, 255]], dtype=np.uint8
        )
        palette = fill_shortfall(colors, candidates, 3)
        np.testing.assert_array_equal(np.array(palette), [[0, 0, 0, 255], [100, 0, 0, 255]])

    def test_respects_budget(self):
        colors = [np.array([0, 0, 0, 255], dtype=np.uint8)]
        candidates = np.array([[100, 0, 0, 255], [0, 100, 0, 255]], dtype=np.uint8)
        assert len(fill_shortfall(colors, candidates, 2)) == 2


class TestBuildPalette:
    """Test cases for build_palette."""

    def test_transparent_image(self, transparent_image):
        """Fully transparent images fall back to one color."""
        palette = build_palette(transparent_image, 4)
        assert len(palette) == 1
        np.testing.assert_array_equal(palette[0], [0, 0, 0, 0])

    def test_empty_image(self):
        palette = build_palette(np.zeros((0, 0, 4), dtype=np.uint8), 4)
        assert len(palette) == 1

    def test_palette_size_limit(self, gradient_image):
        assert len(build_palette(gradient_image, 3)) <= 3

    def test_few_colors_kept_exactly(self):
        """Images with no more distinct colors than the budget keep them all."""
        image = np.zeros((2, 3, 4), dtype=np.uint8)
        image[:, :] = [10, 20, 30, 255]
        image[0, 1] = [200, 0, 0, 255]
        image[1, 2] = [0, 200, 0, 128]

        palette = build_palette(image, 4)

        np.testing.assert_array_equal(
            palette, [[10, 20, 30, 255], [200, 0, 0, 255], [0, 200, 0, 128]]
        )

    def test_transparent_slot_reserved(self):
        image = np.zeros((1, 4, 4), dtype=np.uint8)
        image[0, 0] = [255, 0, 0, 255]
        image[0, 1] = [0, 255, 0, 255]

        palette = build_palette(image, 3)

        assert len(palette) == 3
        np.testing.assert_array_equal(palette[-1], [0, 0, 0, 0])

    def test_quantized_with_transparency(self):
        """Budget shrinks by one when transparent pixels are present."""
        image = np.zeros((1, 5, 4), dtype=np.uint8)
        image[0, 0] = [0, 0, 0, 255]
        image[0, 1] = [10, 0, 0, 255]
        image[0, 2] = [200, 0, 0, 255]
        image[0, 3] = [210, 0, 0, 255]

        palette = build_palette(image, 3)

        np.testing.assert_array_equal(
            palette, [[5, 0, 0, 255], [205, 0, 0, 255], [0, 0, 0, 0]]
        )

    @pytest.mark.parametrize("max_colors", [1, 2, 5, 16])
    def test_never_empty(self, max_colors):
        rng = np.random.default_rng(max_colors)
        image = rng.integers(0, 256, (8, 8, 4), dtype=np.uint8)
        palette = build_palette(image, max_colors)
        assert 1 <= len(palette) <= max(max_colors, 2)

    def test_deterministic(self):
        rng = np.random.default_rng(3)
        image = rng.integers(0, 256, (16, 16, 4), dtype=np.uint8)
        np.testing.assert_array_equal(build_palette(image, 6), build_palette(image, 6))


class TestDistinctColors:
    """Test cases for distinct_colors."""

    def test_first_appearance_order(self):
        pixels = np.array(
            [[9, 9, 9, 255], [1, 1, 1, 255], [9, 9, 9, 255], [5, 5, 5, 255]], dtype=np.uint8
        )
        np.testing.assert_array_equal(
            distinct_colors(pixels), [[9, 9, 9, 255], [1, 1, 1, 255], [5, 5, 5, 255]]
        )
