"""Nearest-color mapping of pixels onto a palette."""

import numpy as np

from .types import ImageArray, Palette, QuantizedImage


def transparent_index(palette: Palette) -> int:
    """Index of the transparent sentinel, or 0 if the palette has none."""
    hits = np.flatnonzero(palette[:, 3] == 0)
    return int(hits[0]) if len(hits) else 0


def map_to_palette(image: ImageArray, palette: Palette) -> QuantizedImage:
    """Assign every pixel the index of its nearest palette color.

    Pixels with alpha 0 go to the transparent entry. Others take the
    opaque entry with the smallest squared RGBA distance; ties keep the
    lowest index.

    Args:
        image: RGBA image (H, W, 4) uint8
        palette: Palette array (n, 4) uint8

    Returns:
        QuantizedImage with one index per pixel
    """
    height, width = image.shape[:2]
    pixels = image.reshape(-1, 4).astype(np.int32)

    indices = np.zeros(len(pixels), dtype=np.intp)
    best_dist = np.full(len(pixels), np.iinfo(np.int64).max, dtype=np.int64)

    # One pass per palette entry keeps memory at O(pixels)
    for idx, color in enumerate(palette):
        if color[3] == 0:
            continue
        diff = pixels - color.astype(np.int32)
        dist = np.einsum("ij,ij->i", diff, diff).astype(np.int64)
        closer = dist < best_dist
        indices[closer] = idx
        best_dist[closer] = dist[closer]

    indices[pixels[:, 3] == 0] = transparent_index(palette)

    return QuantizedImage(width=width, height=height, palette=palette, indices=indices)
