from collections import deque
import logging
import numpy as np

from models.color import TRANSPARENT, color_mask
from models.image import Image

logger = logging.getLogger(__name__)


class BackgroundService:
    """
    Business-level helper for background removal.

    • The background colour is the top-left pixel, matched exactly.
    • Only pixels connected to an image edge through same-coloured
      4-neighbours count as background; enclosed regions survive.
    • Returns a **new** Image with the same bounds.
    """

    @staticmethod
    def background_mask(image: Image) -> np.ndarray:
        """
        Breadth-first flood fill from every edge pixel matching the background.

        Returns a bool array (H, W), True where the pixel is background.
        """
        h, w = image.height, image.width
        if h == 0 or w == 0:
            return np.zeros((h, w), dtype=bool)

        reference = image.at(*image.origin)
        candidate = color_mask(image.pixels, reference).ravel().tolist()
        marked = bytearray(h * w)  # row-major, index = y * w + x
        queue = deque()

        def seed(idx: int) -> None:
            if candidate[idx] and not marked[idx]:
                marked[idx] = 1
                queue.append(idx)

        for x in range(w):
            seed(x)                  # top row
            seed((h - 1) * w + x)    # bottom row
        for y in range(h):
            seed(y * w)              # left column
            seed(y * w + w - 1)      # right column

        while queue:
            idx = queue.popleft()
            y, x = divmod(idx, w)
            if x > 0:
                seed(idx - 1)
            if x < w - 1:
                seed(idx + 1)
            if y > 0:
                seed(idx - w)
            if y < h - 1:
                seed(idx + w)

        return np.frombuffer(bytes(marked), dtype=np.uint8).reshape(h, w).astype(bool)

    def remove_background(self, image: Image) -> Image:
        """Make edge-connected background pixels fully transparent."""
        mask = self.background_mask(image)
        out = image.pixels.copy()
        out[mask] = TRANSPARENT

        logger.debug(f"Background removal cleared {int(mask.sum())} of {mask.size} pixels")
        return Image(pixels=out, origin=image.origin, path=image.path)
