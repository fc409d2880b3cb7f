from __future__ import annotations
from enum import Enum
from typing import Callable
import numpy as np

from ..errors import UnknownOperationError
from .pixel_buffer import Color, to_color


def _grayscale_weighted(rgb: np.ndarray) -> np.ndarray:
    # integer luma avoids 0.299+0.587+0.114 float drift under floor()
    wide = rgb.astype(np.int32)
    luma = (299 * wide[..., 0] + 587 * wide[..., 1] + 114 * wide[..., 2]) // 1000
    return np.repeat(luma[..., None], 3, axis=-1).astype(np.uint8)


def _grayscale_average(rgb: np.ndarray) -> np.ndarray:
    avg = rgb.astype(np.int32).sum(axis=-1) // 3
    return np.repeat(avg[..., None], 3, axis=-1).astype(np.uint8)


def _invert(rgb: np.ndarray) -> np.ndarray:
    return 255 - rgb


def _shift(rgb: np.ndarray) -> np.ndarray:
    # (R, G, B) -> (B, R, G)
    return rgb[..., [2, 0, 1]]


def _only(channel: int) -> Callable[[np.ndarray], np.ndarray]:
    def keep(rgb: np.ndarray) -> np.ndarray:
        out = np.zeros_like(rgb)
        out[..., channel] = rgb[..., channel]
        return out
    return keep


def _without(channel: int) -> Callable[[np.ndarray], np.ndarray]:
    def remove(rgb: np.ndarray) -> np.ndarray:
        out = rgb.copy()
        out[..., channel] = 0
        return out
    return remove


class ColorTransform(Enum):
    """
    Closed set of pure per-pixel colour maps.

    Every member carries a vectorised function (..., 3) uint8 -> (..., 3) uint8,
    so the same behaviour maps one pixel or a whole grid.
    """
    GRAYSCALE = ("grayscale", _grayscale_weighted)
    GRAYSCALE_AVERAGE = ("grayscale_average", _grayscale_average)
    INVERT = ("invert", _invert)
    SHIFT = ("shift", _shift)
    KEEP_RED = ("keep_red", _only(0))
    KEEP_GREEN = ("keep_green", _only(1))
    KEEP_BLUE = ("keep_blue", _only(2))
    REMOVE_RED = ("remove_red", _without(0))
    REMOVE_GREEN = ("remove_green", _without(1))
    REMOVE_BLUE = ("remove_blue", _without(2))

    def __init__(self, label: str, fn: Callable[[np.ndarray], np.ndarray]):
        self.label = label
        self.fn = fn

    # ── Apply ────────────────────────────────────────────────────────
    def apply_to_array(self, rgb: np.ndarray) -> np.ndarray:
        """Map an (..., 3) uint8 array; the input is never written."""
        return np.ascontiguousarray(self.fn(rgb), dtype=np.uint8)

    def __call__(self, pixel: Color) -> Color:
        """Map a single (R, G, B) pixel."""
        out = self.apply_to_array(np.asarray(to_color(pixel), dtype=np.uint8))
        return int(out[0]), int(out[1]), int(out[2])

    # ── Lookup ───────────────────────────────────────────────────────
    @classmethod
    def from_name(cls, name: str) -> "ColorTransform":
        """
        Case-insensitive lookup; '-', '_' and spaces are interchangeable
        and a trailing '_only' is accepted ("keep-red-only" -> KEEP_RED).
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
        if key.endswith("_only"):
            key = key[: -len("_only")]
        for member in cls:
            if member.label == key:
                return member
        raise UnknownOperationError(f"Unknown colour transform: {name!r}")
