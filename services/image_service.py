from pathlib import Path
from typing import Union
import logging
import os

from dotenv import load_dotenv
from PIL import Image as PILImage

from models.bounds import TargetSize
from models.image import Image
from repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageTooLargeError(ValueError):
    """Decoded image exceeds the configured pixel ceiling."""


class ImageService:
    """Codec + resampling helpers.  No trim / background logic here."""

    def __init__(self, max_pixels: int | None = None):
        self.MAX_IMAGE_PIXELS = int(max_pixels or os.getenv("MAX_IMAGE_PIXELS", "40000000"))
        self.image_repository = ImageRepository()

    def decode(self, data: bytes) -> Image:
        """Decode bytes and enforce the pixel ceiling before any processing."""
        image = self.image_repository.decode(data)
        self.check_pixel_count(image)
        return image

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object."""
        image = self.image_repository.load(path)
        self.check_pixel_count(image)
        return image

    def check_pixel_count(self, image: Image) -> None:
        pixel_count = image.width * image.height
        if pixel_count > self.MAX_IMAGE_PIXELS:
            raise ImageTooLargeError(
                f"Image is {image.width}x{image.height} ({pixel_count} pixels), "
                f"limit is {self.MAX_IMAGE_PIXELS} pixels"
            )

    def check_target_size(self, target: TargetSize) -> None:
        pixel_count = target.width * target.height
        if pixel_count > self.MAX_IMAGE_PIXELS:
            raise ImageTooLargeError(
                f"Requested output {target.width}x{target.height} ({pixel_count} pixels) "
                f"is over the limit of {self.MAX_IMAGE_PIXELS} pixels"
            )

    def resize(self, image: Image, target: TargetSize) -> Image:
        """
        Resample to *target* with Pillow's bicubic kernel (Catmull-Rom, a = -0.5).

        Pillow resamples RGBA in premultiplied space, so transparent pixels do
        not bleed their colour into neighbours. Same-size requests still go
        through the resampler.
        """
        pil_image = self.image_repository.to_pil_image(image)
        resized = pil_image.resize((target.width, target.height), PILImage.Resampling.BICUBIC)
        logger.debug(f"Resampled {image.width}x{image.height} → {target.width}x{target.height}")
        return self.image_repository.from_pil_image(resized)

    def encode(self, image: Image, fmt: str, quality: int, compression_level: int | None = None) -> bytes:
        return self.image_repository.encode(image, fmt, quality, compression_level)

    def save(self, data: bytes, path: Union[str, Path]) -> Path:
        return self.image_repository.save(data, path)
