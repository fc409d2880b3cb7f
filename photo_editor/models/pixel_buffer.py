from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

Color = Tuple[int, int, int]


@dataclass(eq=False)
class PixelBuffer:
    """
    Simple data object: one editable image state.
    No codec or filter logic in this file.
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype uint8, RGB order, row-major.

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self.height, self.width

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def to_color(value) -> Color:
    """
    Normalise any 3-item sequence (tuple, list, ndarray, "r,g,b" string)
    into an (R, G, B) tuple with every channel clamped to [0, 255].
    """
    if isinstance(value, str):
        value = [part for part in value.replace(" ", "").split(",") if part]
    channels = [int(round(float(c))) for c in value]
    if len(channels) != 3:
        raise ValueError(f"Colour needs exactly 3 channels, got {len(channels)}: {value!r}")
    r, g, b = (max(0, min(255, c)) for c in channels)
    return r, g, b
