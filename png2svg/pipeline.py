"""Main pipeline orchestrator for png2svg."""

import io
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from .mapper import map_to_palette
from .options import options_from_json
from .palette import build_palette, palette_size_from_options
from .svg import render_contours, render_runs, save_svg
from .types import (
    DecodeError,
    ImageArray,
    OptionsError,
    QuantizedImage,
    VectorizationError,
    VectorizeOptions,
)

logger = logging.getLogger(__name__)

RENDERERS = {
    "contours": render_contours,
    "runs": render_runs,
}


def decode_image(data: bytes) -> ImageArray:
    """Decode encoded image bytes into an RGBA array.

    Args:
        data: Encoded image (PNG, or anything else Pillow can read)

    Returns:
        RGBA image (H, W, 4) uint8

    Raises:
        DecodeError: If the bytes cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"failed to decode image: {e}") from e
    return np.asarray(rgba, dtype=np.uint8)


def quantize_image(image: ImageArray, options: VectorizeOptions) -> QuantizedImage:
    """Build the palette and map every pixel onto it."""
    palette = build_palette(image, palette_size_from_options(options))
    return map_to_palette(image, palette)


def quantized_preview(quantized: QuantizedImage) -> ImageArray:
    """Reconstruct an RGBA image from palette indices."""
    return quantized.palette[quantized.indices].reshape(quantized.height, quantized.width, 4)


def vectorize_image(
    image: ImageArray,
    options: Optional[VectorizeOptions] = None,
    renderer: str = "contours",
) -> str:
    """Vectorize an already decoded RGBA image.

    Args:
        image: RGBA image (H, W, 4) uint8
        options: Vectorization options; defaults if None
        renderer: "contours" (traced paths) or "runs" (row rectangles)

    Returns:
        SVG string
    """
    return Pipeline(options, renderer).vectorize(image)


def png_to_svg(
    data: bytes,
    options: Optional[VectorizeOptions] = None,
    renderer: str = "contours",
) -> str:
    """Convert encoded image bytes to an SVG document.

    Args:
        data: Encoded image bytes
        options: Vectorization options; defaults if None
        renderer: "contours" or "runs"

    Returns:
        SVG string

    Raises:
        DecodeError: If the image cannot be decoded
        VectorizationError: If vectorization fails

    Example:
        >>> svg = png_to_svg(Path("logo.png").read_bytes())
        >>> svg = png_to_svg(data, VectorizeOptions(colors=4, mode=VectorizeMode.POSTER))
    """
    return Pipeline(options, renderer).process(data)


def png_to_svg_json(data: bytes, options_json: str) -> str:
    """Binding-friendly entry point taking options as JSON text.

    Raises:
        OptionsError: If the JSON is malformed or a value is out of range
    """
    return png_to_svg(data, options_from_json(options_json).validate())


class Pipeline:
    """Main vectorization pipeline."""

    def __init__(self, options: Optional[VectorizeOptions] = None, renderer: str = "contours"):
        """Initialize pipeline with options.

        Args:
            options: Vectorization options. Uses defaults if None.
            renderer: Name of the SVG renderer to use
        """
        if renderer not in RENDERERS:
            raise OptionsError(
                f"renderer must be one of: {', '.join(RENDERERS)}, got {renderer!r}"
            )
        self.options = options or VectorizeOptions()
        self.renderer = renderer
        self.debug_stages: List[Tuple[str, np.ndarray]] = []

    def process(self, data: bytes, debug: bool = False) -> str:
        """Decode image bytes and vectorize them.

        Raises:
            DecodeError: If the image cannot be decoded
            VectorizationError: If vectorization fails
        """
        image = decode_image(data)
        return self.vectorize(image, debug=debug)

    def vectorize(self, image: ImageArray, debug: bool = False) -> str:
        """Vectorize a decoded RGBA image.

        Args:
            image: RGBA image (H, W, 4) uint8
            debug: If True, record intermediate stage images

        Returns:
            SVG string
        """
        self.debug_stages = []
        try:
            if image.ndim != 3 or image.shape[2] != 4:
                raise VectorizationError(f"expected an (H, W, 4) RGBA array, got {image.shape}")

            if debug:
                self.debug_stages.append(("1_original", image))

            quantized = quantize_image(image, self.options)
            logger.debug(
                f"Quantized {quantized.width}x{quantized.height} image "
                f"to {len(quantized.palette)} colors"
            )

            if debug:
                self.debug_stages.append(("2_quantized", quantized_preview(quantized)))

            return RENDERERS[self.renderer](quantized, self.options)

        except VectorizationError:
            raise
        except Exception as e:
            raise VectorizationError(f"vectorization failed: {e}") from e


def process_image(
    image_path: str,
    output_path: Optional[str] = None,
    options: Optional[VectorizeOptions] = None,
    renderer: str = "contours",
) -> str:
    """Vectorize an image file.

    Convenience function for one-off processing.

    Args:
        image_path: Path to input image
        output_path: Optional path to save SVG output
        options: Optional vectorization options
        renderer: "contours" or "runs"

    Returns:
        SVG string

    Raises:
        FileNotFoundError: If the input file doesn't exist
    """
    path = Path(image_path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")

    svg = png_to_svg(path.read_bytes(), options, renderer)

    if output_path:
        save_svg(svg, output_path)

    return svg
