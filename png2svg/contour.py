"""Boundary tracing of connected components."""

import logging
import math
from typing import Optional, Set, Tuple

import numpy as np
from scipy import ndimage

from .components import component_mask
from .types import ConnectedComponent, Contour, Point

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int]

# Scan order for neighbor search: clockwise from east (y grows downward).
# Even entries are cardinal, odd entries diagonal.
DIRECTIONS = [
    (1, 0), (1, 1), (0, 1), (-1, 1),
    (-1, 0), (-1, -1), (0, -1), (1, -1),
]

# Extra radii searched when a walk gets stuck
JUMP_RADII = (2, 3)

# Points needed before the walk may step back onto its start pixel
MIN_POINTS_RETURN = 4

# Points needed before proximity to the start closes the contour
MIN_POINTS_PROXIMITY = 11
PROXIMITY_DISTANCE = 1.5


def pixel_center(pixel: Pixel) -> Point:
    """Center of a pixel in image coordinates."""
    return (pixel[0] + 0.5, pixel[1] + 0.5)


def boundary_pixels(grid: np.ndarray, component: ConnectedComponent) -> Set[Pixel]:
    """Pixels of a component with at least one 8-neighbor outside it.

    A neighbor counts as outside when it is off the image or carries a
    different palette index. Only the bounding box plus a one-pixel ring
    is examined.
    """
    height, width = grid.shape
    min_x, min_y, max_x, max_y = component.bbox
    x0, y0 = max(min_x - 1, 0), max(min_y - 1, 0)
    x1, y1 = min(max_x + 2, width), min(max_y + 2, height)

    layer = grid[y0:y1, x0:x1] == component.color_index
    interior = ndimage.binary_erosion(
        layer, structure=np.ones((3, 3), dtype=bool), border_value=0
    )
    edge = component_mask(component, layer.shape, origin=(x0, y0)) & ~interior
    ys, xs = np.nonzero(edge)
    return set(zip((xs + x0).tolist(), (ys + y0).tolist()))


def _next_neighbor(
    current: Pixel,
    boundary: Set[Pixel],
    visited: Set[Pixel],
    start: Pixel,
    allow_start: bool,
) -> Optional[Pixel]:
    """First eligible neighbor in scan order, cardinal before diagonal."""
    best = None
    for i, (dx, dy) in enumerate(DIRECTIONS):
        candidate = (current[0] + dx, current[1] + dy)
        if candidate not in boundary:
            continue
        if candidate in visited and not (allow_start and candidate == start):
            continue
        if i % 2 == 0:
            return candidate
        if best is None:
            best = candidate
    return best


def _jump_target(current: Pixel, boundary: Set[Pixel], visited: Set[Pixel]) -> Optional[Pixel]:
    for radius in JUMP_RADII:
        for dx, dy in DIRECTIONS:
            candidate = (current[0] + dx * radius, current[1] + dy * radius)
            if candidate in boundary and candidate not in visited:
                return candidate
    return None


def trace_contour(grid: np.ndarray, component: ConnectedComponent) -> Optional[Contour]:
    """Walk the boundary of a component into an ordered point sequence.

    This is a greedy walk, not a topologically exact contour follower:
    starting from the top-left boundary pixel it repeatedly steps to an
    unvisited boundary neighbor, jumping up to three pixels away when
    stuck. Shapes with holes or one-pixel-wide arms can come out
    self-intersecting.

    Args:
        grid: Palette indices (H, W)
        component: Component to trace

    Returns:
        List of pixel-center points, closed when the walk came back to the
        start, or None if fewer than 3 points could be traced
    """
    boundary = boundary_pixels(grid, component)
    if not boundary:
        return None

    start = min(boundary, key=lambda p: (p[1], p[0]))
    points = [pixel_center(start)]
    visited = {start}
    current = start
    max_points = 2 * len(boundary)

    while len(points) <= max_points:
        nxt = _next_neighbor(
            current, boundary, visited, start, len(points) >= MIN_POINTS_RETURN
        )
        if nxt == start:
            points.append(points[0])
            break

        if nxt is None:
            nxt = _jump_target(current, boundary, visited)
            if nxt is None:
                if len(points) > 2:
                    points.append(points[0])
                break

        visited.add(nxt)
        points.append(pixel_center(nxt))
        current = nxt

        if len(points) >= MIN_POINTS_PROXIMITY:
            last, first = points[-1], points[0]
            if math.hypot(last[0] - first[0], last[1] - first[1]) <= PROXIMITY_DISTANCE:
                points.append(first)
                break

    if len(points) < 3:
        logger.debug(
            f"Tracing component of color {component.color_index} "
            f"({len(component)} px) gave {len(points)} point(s)"
        )
        return None

    return points
