from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple


@dataclass(frozen=True)
class TrimBounds:
    """
    Retained rectangle in image coordinates; right/bottom are exclusive.
    """
    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self):
        if self.left > self.right or self.top > self.bottom:
            raise ValueError(f"Invalid bounds {self.as_tuple()}")

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.left, self.top, self.right, self.bottom


class TargetSize(NamedTuple):
    """Resolved (width, height) for the final resample step."""
    width: int
    height: int
