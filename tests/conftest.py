"""Pytest configuration and fixtures."""

import io

import numpy as np
import pytest
from PIL import Image


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGBA array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(image.astype(np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


def solid_image(width: int, height: int, color) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :] = color
    return image


@pytest.fixture
def checkerboard():
    """2x2 image alternating full and half alpha."""
    image = np.zeros((2, 2, 4), dtype=np.uint8)
    for y in range(2):
        for x in range(2):
            alpha = 255 if (x + y) % 2 == 0 else 128
            image[y, x] = [x * 80, y * 40, 200, alpha]
    return image


@pytest.fixture
def transparent_image():
    """Fully transparent 4x4 image."""
    return np.zeros((4, 4, 4), dtype=np.uint8)


@pytest.fixture
def gradient_image():
    """Non-uniform 4x4 image with mixed alpha."""
    image = np.zeros((4, 4, 4), dtype=np.uint8)
    for y in range(4):
        for x in range(4):
            alpha = 255 if (x + y) % 2 == 0 else 128
            image[y, x] = [x * 10, y * 10, 50, alpha]
    return image


@pytest.fixture
def logo_image():
    """32x32 white canvas with a red square and a blue disc."""
    image = solid_image(32, 32, [255, 255, 255, 255])
    image[4:14, 4:14] = [220, 20, 20, 255]
    yy, xx = np.mgrid[0:32, 0:32]
    disc = (xx - 21) ** 2 + (yy - 21) ** 2 <= 36
    image[disc] = [20, 40, 200, 255]
    return image


@pytest.fixture
def logo_png(logo_image):
    return encode_png(logo_image)
