"""SVG generation from traced contours or row runs."""

import logging
from typing import List, Tuple

import numpy as np

from .components import label_components
from .contour import trace_contour
from .simplify import simplify_for_mode
from .types import (
    Color,
    ConnectedComponent,
    Contour,
    PathData,
    QuantizedImage,
    VectorizeMode,
    VectorizeOptions,
)

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

# Visible colors never drop below this fill opacity in the contour renderer
MIN_GROUP_OPACITY = 0.95

# Control point reach per unit of smoothness in logo curves
CURVE_REACH = 0.3


def format_number(x: float, precision: int = 2) -> str:
    """Format number with given precision, trailing zeros stripped."""
    formatted = f"{x:.{precision}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted == "-0":
        formatted = "0"
    return formatted


def color_to_hex(color: Color) -> str:
    """Convert RGB(A) color to hex string (alpha ignored)."""
    r, g, b = (int(c) for c in color[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def group_opacity(alpha: int) -> float:
    return max(alpha / 255.0, MIN_GROUP_OPACITY)


def run_opacity(alpha: int, options: VectorizeOptions) -> float:
    """Fill opacity for the row-run renderer, scaled by smoothness."""
    smoothness = min(max(options.smoothness, 0.2), 1.0)
    return min(max(alpha / 255.0 * smoothness, 0.05), 1.0)


def _pt(point) -> str:
    return f"{format_number(point[0])} {format_number(point[1])}"


def contour_to_line_path(contour: Contour) -> PathData:
    """Convert contour to a closed polyline path."""
    commands = [f"M {_pt(contour[0])}"]
    commands.extend(f"L {_pt(p)}" for p in contour[1:])
    commands.append("Z")
    return " ".join(commands)


def contour_to_curve_path(contour: Contour, smoothness: float) -> PathData:
    """Convert contour to a closed path of cubic segments.

    Each interior point gets two control points on either side of it,
    along the direction from its previous to its next neighbor, scaled by
    ``smoothness * 0.3``. The last segment is a straight line.
    """
    reach = smoothness * CURVE_REACH
    points = np.asarray(contour, dtype=np.float64)
    last = len(points) - 1

    def handle(i: int) -> np.ndarray:
        return (points[i + 1] - points[i - 1]) * reach

    commands = [f"M {_pt(points[0])}"]
    for i in range(1, last):
        c1 = points[i - 1] if i - 1 == 0 else points[i - 1] + handle(i - 1)
        c2 = points[i] - handle(i)
        commands.append(f"C {_pt(c1)} {_pt(c2)} {_pt(points[i])}")
    commands.append(f"L {_pt(points[last])}")
    commands.append("Z")
    return " ".join(commands)


def contour_to_path(contour: Contour, options: VectorizeOptions) -> PathData:
    """Pick curves or lines for a contour based on mode and smoothness."""
    mode = options.mode
    if mode is VectorizeMode.LOGO:
        if options.smoothness > 0.5 and len(contour) > 4:
            return contour_to_curve_path(contour, options.smoothness)
        return contour_to_line_path(contour)
    elif mode in (VectorizeMode.POSTER, VectorizeMode.PIXEL_ART):
        return contour_to_line_path(contour)
    raise ValueError(f"Unknown mode: {mode!r}")


def bbox_path(component: ConnectedComponent) -> PathData:
    """Rectangle covering the component's bounding box.

    A single isolated pixel becomes a unit quad.
    """
    min_x, min_y, max_x, max_y = component.bbox
    return (
        f"M {min_x} {min_y} H {max_x + 1} V {max_y + 1} H {min_x} Z"
    )


def component_path(
    grid: np.ndarray, component: ConnectedComponent, options: VectorizeOptions
) -> PathData:
    """Trace, simplify and serialize one component."""
    contour = trace_contour(grid, component)
    if contour is None:
        return bbox_path(component)
    return contour_to_path(simplify_for_mode(contour, options), options)


def _svg_open(width: int, height: int, shape_rendering: str) -> str:
    return (
        f'<svg xmlns="{SVG_NS}" viewBox="0 0 {width} {height}" '
        f'width="{width}" height="{height}" aria-label="vectorized" '
        f'shape-rendering="{shape_rendering}">'
    )


def render_contours(quantized: QuantizedImage, options: VectorizeOptions) -> str:
    """Render a quantized image as per-color groups of traced paths.

    Args:
        quantized: Quantized image
        options: Options controlling simplification and smoothing

    Returns:
        Complete SVG string
    """
    grid = quantized.grid
    visited = np.zeros(grid.shape, dtype=bool)
    shape_rendering = (
        "crispEdges" if options.mode is VectorizeMode.PIXEL_ART else "geometricPrecision"
    )

    lines = [_svg_open(quantized.width, quantized.height, shape_rendering)]
    total = 0

    for color_index, color in enumerate(quantized.palette):
        if color[3] == 0:
            continue
        components = label_components(grid, color_index, visited)
        if not components:
            continue

        lines.append(
            f'  <g fill="{color_to_hex(color)}" '
            f'fill-opacity="{group_opacity(int(color[3])):.3f}">'
        )
        for component in components:
            lines.append(f'    <path d="{component_path(grid, component, options)}"/>')
        lines.append("  </g>")
        total += len(components)

    lines.append("</svg>")
    logger.debug(f"Rendered {total} components")
    return "\n".join(lines)


def row_runs(row: np.ndarray) -> List[Tuple[int, int, int]]:
    """Maximal runs of equal values as (start, end, value), end exclusive."""
    runs = []
    x = 0
    while x < len(row):
        end = x + 1
        while end < len(row) and row[end] == row[x]:
            end += 1
        runs.append((x, end, int(row[x])))
        x = end
    return runs


def render_runs(quantized: QuantizedImage, options: VectorizeOptions) -> str:
    """Render a quantized image as one rectangle per horizontal color run."""
    lines = [_svg_open(quantized.width, quantized.height, "crispEdges")]

    for y, row in enumerate(quantized.grid):
        for start, end, color_index in row_runs(row):
            color = quantized.palette[color_index]
            if color[3] == 0:
                continue
            lines.append(
                f'  <rect x="{start}" y="{y}" width="{end - start}" height="1" '
                f'fill="{color_to_hex(color)}" '
                f'fill-opacity="{run_opacity(int(color[3]), options):.3f}"/>'
            )

    lines.append("</svg>")
    return "\n".join(lines)


def save_svg(svg_string: str, output_path: str) -> None:
    """Save SVG string to file."""
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(svg_string)
