"""Curve simplification using the Ramer-Douglas-Peucker algorithm."""

from typing import Optional

import numpy as np

from .types import Contour, VectorizeMode, VectorizeOptions

POSTER_TOLERANCE_SCALE = 0.5
POSTER_TOLERANCE_FLOOR = 0.3
PIXEL_ART_TOLERANCE_SCALE = 2.0


def mode_tolerance(options: VectorizeOptions) -> Optional[float]:
    """Simplification tolerance for the options' mode.

    Returns:
        Scaled tolerance, or None when the mode skips simplification
    """
    mode = options.mode
    if mode is VectorizeMode.LOGO:
        return None
    elif mode is VectorizeMode.POSTER:
        return max(options.tolerance * POSTER_TOLERANCE_SCALE, POSTER_TOLERANCE_FLOOR)
    elif mode is VectorizeMode.PIXEL_ART:
        return options.tolerance * PIXEL_ART_TOLERANCE_SCALE
    raise ValueError(f"Unknown mode: {mode!r}")


def segment_distance_sq(points: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Squared distance from each point to segment ab (clamped projection)."""
    ab = b - a
    length_sq = float(np.dot(ab, ab))
    if length_sq == 0.0:
        diff = points - a
    else:
        t = np.clip(((points - a) @ ab) / length_sq, 0.0, 1.0)
        diff = points - (a + t[:, None] * ab)
    return np.einsum("ij,ij->i", diff, diff)


def simplify_contour(contour: Contour, tolerance: float) -> Contour:
    """Simplify contour using Douglas-Peucker.

    Runs over an explicit stack of index ranges instead of recursion so
    long contours cannot exhaust the call stack. Split order and result
    match the recursive formulation.

    Args:
        contour: Ordered (x, y) points
        tolerance: Maximum allowed distance of a dropped point

    Returns:
        Simplified contour; first and last points are always kept
    """
    if len(contour) <= 2:
        return list(contour)

    points = np.asarray(contour, dtype=np.float64)
    keep = np.zeros(len(points), dtype=bool)
    keep[0] = keep[-1] = True
    tolerance_sq = tolerance * tolerance

    stack = [(0, len(points) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        dist = segment_distance_sq(points[first + 1:last], points[first], points[last])
        offset = int(np.argmax(dist))
        if dist[offset] > tolerance_sq:
            split = first + 1 + offset
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return [contour[i] for i in np.flatnonzero(keep)]


def simplify_for_mode(contour: Contour, options: VectorizeOptions) -> Contour:
    """Simplify with the mode-scaled tolerance; logo contours pass through."""
    tolerance = mode_tolerance(options)
    if tolerance is None:
        return contour
    return simplify_contour(contour, tolerance)
