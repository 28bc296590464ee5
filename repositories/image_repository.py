from io import BytesIO
from pathlib import Path
from typing import Union
import logging

import cv2
import numpy as np
from PIL import Image as PILImage

from models.color import MAX_CHANNEL
from models.image import Image

logger = logging.getLogger(__name__)

# quality threshold → zlib level (0 none, 1 best speed, 6 default, 9 best)
PNG_COMPRESSION_BUCKETS = ((95, 0), (70, 1), (40, 6))
PNG_BEST_COMPRESSION = 9


class ImageDecodeError(ValueError):
    """Input bytes are empty, corrupt, or in a format no decoder understands."""


class ImageEncodeError(RuntimeError):
    """The encoder rejected the image or its parameters."""


def png_compression_level(quality: int) -> int:
    for threshold, level in PNG_COMPRESSION_BUCKETS:
        if quality >= threshold:
            return level
    return PNG_BEST_COMPRESSION


class ImageRepository:
    """
    Handles byte / file I/O for Image entities.

    Decoding goes through OpenCV (PNG, JPEG, WebP, …) and always yields
    16-bit straight RGBA; encoding and resampling go through Pillow.
    """

    @staticmethod
    def _to_rgba16(arr: np.ndarray) -> np.ndarray:
        """
        Normalise whatever cv2.imdecode hands back to (H, W, 4) uint16 RGBA.
        """
        if arr.dtype == np.uint8:
            arr = arr.astype(np.uint16) * 257
        elif arr.dtype == np.uint16:
            pass
        elif arr.dtype in (np.float32, np.float64):
            arr = (np.clip(arr, 0.0, 1.0) * MAX_CHANNEL + 0.5).astype(np.uint16)
        else:
            raise ImageDecodeError(f"failed to decode image: unsupported sample type {arr.dtype}")

        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        channels = arr.shape[2]
        opaque = np.full(arr.shape[:2] + (1,), MAX_CHANNEL, dtype=np.uint16)

        if channels == 1:  # grey
            rgba = np.concatenate([arr, arr, arr, opaque], axis=2)
        elif channels == 2:  # grey + alpha
            grey = arr[:, :, :1]
            rgba = np.concatenate([grey, grey, grey, arr[:, :, 1:2]], axis=2)
        elif channels == 3:  # BGR
            rgba = np.concatenate([arr[:, :, ::-1], opaque], axis=2)
        elif channels == 4:  # BGRA
            rgba = arr[:, :, [2, 1, 0, 3]]
        else:
            raise ImageDecodeError(f"failed to decode image: unsupported channel count {channels}")
        return np.ascontiguousarray(rgba, dtype=np.uint16)

    def decode(self, data: bytes) -> Image:
        """Decode an encoded byte stream into an Image object."""
        if not data:
            raise ImageDecodeError("failed to decode image: empty input")

        buf = np.frombuffer(data, dtype=np.uint8)
        try:
            arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        except cv2.error as err:
            raise ImageDecodeError(f"failed to decode image: {err}") from err

        if arr is None or arr.size == 0:
            raise ImageDecodeError("failed to decode image: unknown or corrupt format")

        pixels = self._to_rgba16(arr)
        logger.debug(f"Decoded {pixels.shape[1]}x{pixels.shape[0]} image ({arr.dtype}, {len(data)} bytes)")
        return Image(pixels=pixels)

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        image = self.decode(path.read_bytes())
        image.path = path
        return image

    # ─── Pillow bridge ────────────────────────────────────────────────
    @staticmethod
    def to_pil_image(image: Image) -> PILImage.Image:
        """16-bit RGBA → 8-bit Pillow RGBA (high byte of every channel)."""
        rgba8 = np.ascontiguousarray(image.pixels >> 8, dtype=np.uint8)
        return PILImage.fromarray(rgba8)

    @staticmethod
    def from_pil_image(pil_image: PILImage.Image) -> Image:
        rgba8 = np.asarray(pil_image.convert("RGBA"), dtype=np.uint8)
        return Image(pixels=rgba8.astype(np.uint16) * 257)

    def encode(
        self,
        image: Image,
        fmt: str = "png",
        quality: int = 90,
        compression_level: int | None = None,
    ) -> bytes:
        """
        Encode to PNG or JPEG.

        PNG compression is picked from *quality* unless *compression_level*
        (0-9) is given. JPEG has no alpha channel, so transparent areas are
        flattened onto black.
        """
        pil_image = self.to_pil_image(image)
        buffer = BytesIO()
        try:
            if fmt == "jpeg":
                backdrop = PILImage.new("RGBA", pil_image.size, (0, 0, 0, 255))
                flat = PILImage.alpha_composite(backdrop, pil_image).convert("RGB")
                flat.save(buffer, format="JPEG", quality=quality)
            else:
                level = png_compression_level(quality) if compression_level is None else compression_level
                if not 0 <= level <= 9:
                    raise ValueError(f"PNG compression level must be 0-9, got {level}")
                pil_image.save(buffer, format="PNG", compress_level=level)
        except (OSError, ValueError) as err:
            raise ImageEncodeError(f"failed to encode image: {err}") from err

        return buffer.getvalue()

    @staticmethod
    def save(data: bytes, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
