import logging
import numpy as np

from models.bounds import TrimBounds
from models.color import color_mask
from models.image import Image

logger = logging.getLogger(__name__)


class TrimService:
    """
    Border trimming.

    The top-left pixel decides the mode once per call:
      • not fully opaque → transparency mode, a pixel is trimmable iff alpha == 0
      • fully opaque     → solid-colour mode, trimmable iff it equals the top-left colour
    """

    @staticmethod
    def trimmable_mask(image: Image) -> np.ndarray:
        reference = image.at(image.origin[0], image.origin[1])
        if not reference.is_opaque:
            return image.pixels[..., 3] == 0
        return color_mask(image.pixels, reference)

    @staticmethod
    def _first(flags: np.ndarray, default: int) -> int:
        hits = np.flatnonzero(flags)
        return int(hits[0]) if hits.size else default

    @staticmethod
    def _last(flags: np.ndarray, default: int) -> int:
        hits = np.flatnonzero(flags)
        return int(hits[-1]) + 1 if hits.size else default

    def find_trim_bounds(self, image: Image) -> TrimBounds:
        """
        Scan inward from each edge for the first line holding a non-trimmable
        pixel. Left/right scans only look at rows [top, bottom).

        An image with nothing to keep yields its full bounds.
        """
        full = image.bounds
        if image.width == 0 or image.height == 0:
            return full

        keep = ~self.trimmable_mask(image)
        h, w = keep.shape

        rows = keep.any(axis=1)
        top = self._first(rows, 0)
        bottom = self._last(rows[top:], h - top) + top

        cols = keep[top:bottom].any(axis=0)
        left = self._first(cols, 0)
        right = self._last(cols[left:], w - left) + left

        x0, y0 = image.origin
        return TrimBounds(left + x0, top + y0, right + x0, bottom + y0)

    def trim(self, image: Image) -> Image:
        """
        Crop solid-colour or transparent borders.

        Returns the *same* object when there is nothing to trim (including
        the all-background case); otherwise a copy re-based at (0, 0).
        """
        bounds = self.find_trim_bounds(image)
        if bounds == image.bounds:
            logger.debug("Nothing to trim")
            return image

        logger.debug(f"Trim {image.width}x{image.height} → {bounds.width}x{bounds.height} at {bounds.as_tuple()}")
        cropped = image.sub_image(bounds).pixels.copy()
        return Image(pixels=cropped, path=image.path)
