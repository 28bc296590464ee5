from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np

from models.bounds import TrimBounds
from models.color import Color


@dataclass
class Image:
    """
    Simple data object: RGBA pixels (+ optional source path for bookkeeping).
    No codec logic outside the repository.

    Coordinates passed to `at` / `sub_image` are image coordinates, i.e. they
    start at `origin` rather than at zero.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint16, straight RGBA.
    origin: tuple[int, int] = (0, 0)  # (x, y) of the top-left pixel.
    path: Path | None = None  # Source of the image.

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def bounds(self) -> TrimBounds:
        x0, y0 = self.origin
        return TrimBounds(x0, y0, x0 + self.width, y0 + self.height)

    def at(self, x: int, y: int) -> Color:
        x0, y0 = self.origin
        return Color(*(int(v) for v in self.pixels[y - y0, x - x0]))

    def sub_image(self, bounds: TrimBounds) -> "Image":
        """View onto *bounds*; shares storage with this image."""
        x0, y0 = self.origin
        view = self.pixels[bounds.top - y0:bounds.bottom - y0,
                           bounds.left - x0:bounds.right - x0]
        return Image(pixels=view, origin=(bounds.left, bounds.top), path=self.path)
