"""
Shared pytest fixtures for the image resizer test suite.

Images are built in memory: `make_image` gives model Images (16-bit RGBA),
`encode_png` / `encode_as` give encoded bytes made with Pillow.
"""

import sys
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.image import Image  # noqa: E402

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


def _rgba8(width, height, fill):
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :] = fill
    return arr


@pytest.fixture
def make_image():
    """
    Factory: make_image(w, h, fill, rects=[((x0, y0, x1, y1), colour), ...]).
    Rect corners are inclusive, colours are 8-bit RGBA.
    """
    def _make(width, height, fill=WHITE, rects=()):
        arr = _rgba8(width, height, fill)
        for (x0, y0, x1, y1), colour in rects:
            arr[y0:y1 + 1, x0:x1 + 1] = colour
        return Image(pixels=arr.astype(np.uint16) * 257)
    return _make


@pytest.fixture
def gradient_image():
    def _make(width, height):
        xs = (np.arange(width) * 255 // width).astype(np.uint8)
        ys = (np.arange(height) * 255 // height).astype(np.uint8)
        arr = np.zeros((height, width, 4), dtype=np.uint8)
        arr[..., 0] = xs[np.newaxis, :]
        arr[..., 1] = ys[:, np.newaxis]
        arr[..., 2] = 128
        arr[..., 3] = 255
        return Image(pixels=arr.astype(np.uint16) * 257)
    return _make


@pytest.fixture
def encode_as():
    """Factory: encode_as(image, "PNG"|"JPEG"|"WEBP") → bytes via Pillow."""
    def _encode(image, fmt="PNG", **params):
        pil = PILImage.fromarray(np.ascontiguousarray(image.pixels >> 8, dtype=np.uint8))
        if fmt == "JPEG":
            pil = pil.convert("RGB")
        buffer = BytesIO()
        pil.save(buffer, format=fmt, **params)
        return buffer.getvalue()
    return _encode


@pytest.fixture
def encode_png(encode_as):
    def _encode(image):
        return encode_as(image, "PNG")
    return _encode


@pytest.fixture
def open_result():
    """Decode output bytes with Pillow for assertions."""
    def _open(data):
        pil = PILImage.open(BytesIO(data))
        pil.load()
        return pil
    return _open
