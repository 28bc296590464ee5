from __future__ import annotations
from dataclasses import dataclass

DEFAULT_QUALITY = 90
FORMATS = {
    "png": ("image/png", "png"),
    "jpeg": ("image/jpeg", "jpg"),
}


def normalize_format(fmt: str | None) -> str:
    """Unknown or empty formats fall back to PNG; "jpg" is an alias of "jpeg"."""
    fmt = (fmt or "").strip().lower()
    if fmt == "jpg":
        fmt = "jpeg"
    return fmt if fmt in FORMATS else "png"


def normalize_quality(quality: int | None, default: int = DEFAULT_QUALITY) -> int:
    """Quality outside 1-100 (or missing) is replaced by *default*."""
    if quality is None or quality <= 0 or quality > 100:
        return default
    return quality


@dataclass
class ProcessOptions:
    """User-facing knobs of the resize pipeline."""
    trim: bool = False
    remove_background: bool = False
    format: str = "png"
    quality: int = DEFAULT_QUALITY
    width: int = 0   # 0 → derive from height / keep original
    height: int = 0
    compression_level: int | None = None  # PNG only, overrides the quality bucket

    def __post_init__(self):
        self.format = normalize_format(self.format)
        self.quality = normalize_quality(self.quality)
        self.width = max(0, int(self.width or 0))
        self.height = max(0, int(self.height or 0))

    @property
    def mime_type(self) -> str:
        return FORMATS[self.format][0]

    @property
    def extension(self) -> str:
        return FORMATS[self.format][1]


@dataclass
class ProcessedImage:
    """Encoded pipeline output."""
    data: bytes
    mime_type: str
    width: int
    height: int
    extension: str

    @property
    def size(self) -> int:
        return len(self.data)
