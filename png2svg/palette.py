"""Palette construction using median-cut color quantization."""

import logging
import math
from typing import List

import numpy as np

from .types import ImageArray, Palette, TRANSPARENT, VectorizeOptions

logger = logging.getLogger(__name__)

# Squared RGBA distance a leftover source color must exceed against every
# palette entry before it is added to fill a short palette.
DISSIMILAR_DISTANCE_SQ = 100


def palette_size_from_options(options: VectorizeOptions) -> int:
    """Target palette size: ceil(max(colors, 2) * clamp(detail, 0.1, 1.0)).

    Computed in single precision so that products such as 10 * 0.7 land
    on 7 rather than just above it.
    """
    detail = np.float32(min(max(options.detail, 0.1), 1.0))
    base = np.float32(max(options.colors, 2))
    return int(math.ceil(float(np.float32(base * detail))))


class ColorBox:
    """A bucket of sampled pixels bounded by per-channel min/max."""

    def __init__(self, pixels: np.ndarray):
        self.pixels = pixels
        self.min = pixels.min(axis=0)
        self.max = pixels.max(axis=0)

    def __len__(self) -> int:
        return len(self.pixels)

    def widest_channel(self) -> int:
        """Index of the RGB channel with the greatest range (ties R > G > B)."""
        ranges = self.max[:3].astype(np.int32) - self.min[:3].astype(np.int32)
        return int(np.argmax(ranges))

    def split(self):
        """Split at the median index along the widest channel."""
        channel = self.widest_channel()
        order = np.argsort(self.pixels[:, channel], kind="stable")
        ordered = self.pixels[order]
        mid = len(ordered) // 2
        return ColorBox(ordered[:mid]), ColorBox(ordered[mid:])

    def average(self) -> np.ndarray:
        """Integer-truncated channel-wise mean, alpha included."""
        total = self.pixels.sum(axis=0, dtype=np.uint64)
        return (total // np.uint64(len(self.pixels))).astype(np.uint8)


def distinct_colors(pixels: np.ndarray) -> np.ndarray:
    """Unique RGBA rows of ``pixels`` in order of first appearance."""
    if len(pixels) == 0:
        return pixels.reshape(0, 4)
    unique, first = np.unique(pixels, axis=0, return_index=True)
    return unique[np.argsort(first, kind="stable")]


def median_cut(pixels: np.ndarray, max_colors: int) -> List[np.ndarray]:
    """Reduce ``pixels`` to at most ``max_colors`` representative colors.

    Boxes are split iteratively: each round takes the most populous
    splittable box (first one wins on ties), removes it and appends its
    two halves.

    Args:
        pixels: Sampled pixels (N, 4), N >= 1
        max_colors: Maximum number of boxes

    Returns:
        One averaged color per box, in box order
    """
    boxes = [ColorBox(pixels)]

    while len(boxes) < max_colors:
        best = -1
        for i, box in enumerate(boxes):
            if len(box) > 1 and (best < 0 or len(box) > len(boxes[best])):
                best = i
        if best < 0:
            break

        # Both halves are non-empty since the box holds at least two pixels
        boxes.extend(boxes.pop(best).split())

    return [box.average() for box in boxes]


def _color_distance_sq(a: np.ndarray, b: np.ndarray) -> int:
    diff = a.astype(np.int32) - b.astype(np.int32)
    return int(np.dot(diff, diff))


def fill_shortfall(colors: List[np.ndarray], candidates: np.ndarray, budget: int) -> List[np.ndarray]:
    """Top up a short palette with sufficiently dissimilar source colors."""
    palette = list(colors)

    for candidate in candidates:
        if len(palette) >= budget:
            break
        # Colors already present fail the distance test
        if all(_color_distance_sq(candidate, c) > DISSIMILAR_DISTANCE_SQ for c in palette):
            palette.append(candidate.copy())

    return palette


def build_palette(image: ImageArray, max_colors: int) -> Palette:
    """Build a palette of at most ``max_colors`` entries for an RGBA image.

    Fully transparent pixels are left out of the sampled population. When
    any exist, one slot is reserved and the transparent sentinel is
    appended after the opaque colors.

    Args:
        image: RGBA image (H, W, 4) uint8
        max_colors: Target palette size

    Returns:
        Palette array (n, 4) uint8, n >= 1
    """
    pixels = image.reshape(-1, 4)
    opaque = pixels[pixels[:, 3] != 0]
    has_transparent = len(opaque) < len(pixels)

    if len(opaque) == 0:
        logger.debug("No opaque pixels, using transparent sentinel only")
        return np.array([TRANSPARENT], dtype=np.uint8)

    budget = max(max_colors - 1, 1) if has_transparent else max(max_colors, 1)
    distinct = distinct_colors(opaque)

    if len(distinct) <= budget:
        colors = list(distinct)
    else:
        colors = median_cut(opaque, budget)
        if len(colors) < budget:
            colors = fill_shortfall(colors, distinct, budget)

    if has_transparent:
        colors.append(np.array(TRANSPARENT, dtype=np.uint8))

    palette = np.array(colors, dtype=np.uint8).reshape(-1, 4)
    logger.debug(
        f"Built palette of {len(palette)} colors from {len(distinct)} "
        f"distinct opaque colors (budget {budget})"
    )
    return palette
