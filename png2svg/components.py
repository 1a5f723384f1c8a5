"""Connected-component labeling of quantized color layers."""

from typing import List, Optional

import numpy as np

from .types import ConnectedComponent

NEIGHBORS_8 = [
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
]


def label_components(
    grid: np.ndarray,
    color_index: int,
    visited: Optional[np.ndarray] = None,
) -> List[ConnectedComponent]:
    """Partition all pixels holding ``color_index`` into 8-connected groups.

    Seeds are taken in row-major order and grown with an explicit work
    stack, so components come out in discovery order.

    Args:
        grid: Palette indices (H, W)
        color_index: Palette index to label
        visited: Optional shared (H, W) bool array, updated in place

    Returns:
        List of components in discovery order
    """
    height, width = grid.shape
    if visited is None:
        visited = np.zeros((height, width), dtype=bool)

    components = []
    for seed in np.flatnonzero(grid == color_index):
        sy, sx = divmod(int(seed), width)
        if visited[sy, sx]:
            continue

        component = ConnectedComponent(color_index=color_index)
        visited[sy, sx] = True
        stack = [(sx, sy)]

        while stack:
            x, y = stack.pop()
            component.pixels.append((x, y))
            for dx, dy in NEIGHBORS_8:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    if not visited[ny, nx] and grid[ny, nx] == color_index:
                        visited[ny, nx] = True
                        stack.append((nx, ny))

        components.append(component)

    return components


def component_mask(component: ConnectedComponent, shape, origin=(0, 0)) -> np.ndarray:
    """Boolean mask of a component's pixels.

    Args:
        component: Component to rasterize
        shape: (H, W) of the mask
        origin: (x, y) image position of the mask's top-left cell
    """
    mask = np.zeros(shape, dtype=bool)
    if component.pixels:
        xs, ys = zip(*component.pixels)
        mask[np.array(ys) - origin[1], np.array(xs) - origin[0]] = True
    return mask
