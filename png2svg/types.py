"""Common types and exceptions for png2svg."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import numpy as np

# Type aliases
ImageArray = np.ndarray
Palette = np.ndarray
Color = Tuple[int, int, int, int]
Point = Tuple[float, float]
Contour = List[Point]
PathData = str

TRANSPARENT: Color = (0, 0, 0, 0)


class VectorizeMode(Enum):
    """Rendering mode hint."""

    LOGO = "logo"
    POSTER = "poster"
    PIXEL_ART = "pixel"


@dataclass(frozen=True)
class VectorizeOptions:
    """Configuration for one vectorization run."""

    # Target palette ceiling, 2-64
    colors: int = 8

    # Scales the effective palette size down, 0.0-1.0
    detail: float = 0.6

    # Curve bulge for logo mode, 0.0-1.0
    smoothness: float = 0.5

    # Simplification error bound, 0.1-10.0, scaled per mode
    tolerance: float = 1.5

    mode: VectorizeMode = VectorizeMode.LOGO

    def validate(self) -> "VectorizeOptions":
        """Check every field against its documented range.

        Returns:
            The options themselves, so calls can be chained

        Raises:
            OptionsError: If a field is out of range
        """
        if isinstance(self.colors, bool) or not isinstance(self.colors, int):
            raise OptionsError(f"colors must be an integer, got {self.colors!r}")
        if not 2 <= self.colors <= 64:
            raise OptionsError(f"colors must be in [2, 64], got {self.colors}")
        if not 0.0 <= self.detail <= 1.0:
            raise OptionsError(f"detail must be in [0.0, 1.0], got {self.detail}")
        if not 0.0 <= self.smoothness <= 1.0:
            raise OptionsError(f"smoothness must be in [0.0, 1.0], got {self.smoothness}")
        if not 0.1 <= self.tolerance <= 10.0:
            raise OptionsError(f"tolerance must be in [0.1, 10.0], got {self.tolerance}")
        if not isinstance(self.mode, VectorizeMode):
            raise OptionsError(f"mode must be a VectorizeMode, got {self.mode!r}")
        return self


@dataclass
class QuantizedImage:
    """Palette plus one palette index per source pixel, row-major."""

    width: int
    height: int
    palette: Palette
    indices: np.ndarray

    def __post_init__(self):
        if len(self.indices) != self.width * self.height:
            raise VectorizationError(
                f"index count {len(self.indices)} does not match "
                f"{self.width}x{self.height} image"
            )
        if len(self.palette) == 0:
            raise VectorizationError("palette must contain at least one color")
        if len(self.indices) and int(self.indices.max()) >= len(self.palette):
            raise VectorizationError("palette index out of range")

    @property
    def grid(self) -> np.ndarray:
        """Indices as a (height, width) view."""
        return self.indices.reshape(self.height, self.width)


@dataclass
class ConnectedComponent:
    """8-connected group of pixels sharing one palette index."""

    color_index: int
    pixels: List[Tuple[int, int]] = field(default_factory=list)  # (x, y)

    def __len__(self) -> int:
        return len(self.pixels)

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        """Bounding box as (min_x, min_y, max_x, max_y), inclusive."""
        xs = [p[0] for p in self.pixels]
        ys = [p[1] for p in self.pixels]
        return min(xs), min(ys), max(xs), max(ys)


class VectorizationError(Exception):
    """Base exception for vectorization errors."""

    pass


class DecodeError(VectorizationError):
    """Exception raised when the input bytes cannot be decoded."""

    pass


class OptionsError(VectorizationError, ValueError):
    """Exception raised for invalid options or option payloads."""

    pass
