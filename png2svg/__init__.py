"""png2svg: raster-to-SVG vectorization.

Reduces an image to a small palette with median-cut quantization, groups
same-colored pixels into 8-connected regions, traces and simplifies their
outlines, and writes the result as grouped SVG paths.
"""

from png2svg.options import default_options_json, options_from_json, options_to_json
from png2svg.pipeline import Pipeline, png_to_svg, png_to_svg_json, vectorize_image
from png2svg.types import (
    DecodeError,
    OptionsError,
    QuantizedImage,
    VectorizationError,
    VectorizeMode,
    VectorizeOptions,
)

__version__ = "0.1.0"
__all__ = [
    "Pipeline",
    "png_to_svg",
    "png_to_svg_json",
    "vectorize_image",
    "default_options_json",
    "options_from_json",
    "options_to_json",
    "QuantizedImage",
    "VectorizeMode",
    "VectorizeOptions",
    "VectorizationError",
    "DecodeError",
    "OptionsError",
]
