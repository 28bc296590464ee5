from __future__ import annotations
from typing import NamedTuple
import numpy as np

MAX_CHANNEL = 0xFFFF  # 16-bit channel ceiling


class Color(NamedTuple):
    """
    Straight-alpha RGBA colour, 16 bits per channel (0 … 65535).
    """
    r: int
    g: int
    b: int
    a: int

    @classmethod
    def from_rgba8(cls, r: int, g: int, b: int, a: int = 255) -> "Color":
        """Expand 8-bit channels the usual way (v * 257, so 0xAB → 0xABAB)."""
        return cls(r * 257, g * 257, b * 257, a * 257)

    @property
    def is_opaque(self) -> bool:
        return self.a == MAX_CHANNEL

    def premultiplied(self) -> tuple[int, int, int, int]:
        return (
            self.r * self.a // MAX_CHANNEL,
            self.g * self.a // MAX_CHANNEL,
            self.b * self.a // MAX_CHANNEL,
            self.a,
        )


TRANSPARENT = Color(0, 0, 0, 0)


def colors_equal(c1: Color, c2: Color) -> bool:
    """
    Exact equality on all four channels at 16-bit precision.

    Both colours are compared alpha-premultiplied, so any two fully
    transparent pixels are equal whatever RGB they carry.
    """
    return Color(*c1).premultiplied() == Color(*c2).premultiplied()


def premultiply(pixels: np.ndarray) -> np.ndarray:
    """(H, W, 4) uint16 straight RGBA → (H, W, 4) uint16 premultiplied."""
    wide = pixels.astype(np.uint32)
    alpha = wide[..., 3:4]
    out = wide.copy()
    out[..., :3] = wide[..., :3] * alpha // MAX_CHANNEL
    return out.astype(np.uint16)


def color_mask(pixels: np.ndarray, color: Color) -> np.ndarray:
    """
    Vectorised `colors_equal` over a whole grid.

    Returns a bool array of shape (H, W), True where the pixel equals *color*.
    """
    target = np.array(Color(*color).premultiplied(), dtype=np.uint16)
    return np.all(premultiply(pixels) == target, axis=-1)
