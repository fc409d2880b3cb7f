from __future__ import annotations

import os
import logging
from typing import Union
import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.color_transform import ColorTransform
from ..models.kernel import ConvolutionKernel

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class FilterService:
    """
    Whole-buffer filters: per-pixel colour transforms and convolution.
    *   Every filter reads the source read-only and returns a *new* buffer.
    *   No I/O here.
    """

    def __init__(self):
        # "weighted" (luma) or "average"; decides what the plain "grayscale" name means
        self.grayscale_mode = os.getenv("GRAYSCALE_MODE", "weighted").strip().lower()

    # ─── Lookup ────────────────────────────────────────────────────
    def resolve_transform(self, transform: Union[str, ColorTransform]) -> ColorTransform:
        if isinstance(transform, ColorTransform):
            return transform
        resolved = ColorTransform.from_name(transform)
        if resolved is ColorTransform.GRAYSCALE and self.grayscale_mode == "average":
            return ColorTransform.GRAYSCALE_AVERAGE
        return resolved

    @staticmethod
    def resolve_kernel(kernel: Union[str, ConvolutionKernel]) -> ConvolutionKernel:
        return ConvolutionKernel.preset(kernel)

    # ─── Public API ────────────────────────────────────────────────
    def apply_color_transform(
            self,
            buffer: PixelBuffer,
            transform: Union[str, ColorTransform],
    ) -> PixelBuffer:
        """
        Map every pixel through `transform` and return a new buffer
        of identical dimensions.
        """
        transform = self.resolve_transform(transform)
        new_pixels = transform.apply_to_array(buffer.pixels)
        logger.info(f"Applied colour transform {transform.name} to {buffer.width}x{buffer.height} buffer")
        return PixelBuffer(new_pixels)

    def apply_convolution(
            self,
            buffer: PixelBuffer,
            kernel: Union[str, ConvolutionKernel],
    ) -> PixelBuffer:
        """
        Convolve with toroidal (wrap-around) addressing.

        For each kernel tap (i, j) the whole source grid is rolled so that
        position (row, col) holds src[(row + i - kh//2) % H][(col + j - kw//2) % W];
        the weighted views are summed in float64, rounded half-to-even and
        clamped to [0, 255].  Taps only ever read the untouched source.

        Args:
            buffer: Source buffer (not modified)
            kernel: ConvolutionKernel or preset name

        Returns:
            PixelBuffer: New buffer with the same width/height
        """
        kernel = self.resolve_kernel(kernel)
        src = buffer.pixels.astype(np.float64)
        acc = np.zeros_like(src)
        weights = kernel.weights()
        centre_r, centre_c = kernel.height // 2, kernel.width // 2

        for i in range(kernel.height):
            for j in range(kernel.width):
                w = weights[i, j]
                if w == 0.0:
                    continue
                # np.roll(a, s)[r] == a[(r - s) % n]
                shifted = np.roll(src, shift=(centre_r - i, centre_c - j), axis=(0, 1))
                acc += shifted * w

        new_pixels = np.clip(np.rint(acc), 0, 255).astype(np.uint8)
        logger.info(f"Applied {kernel.height}x{kernel.width} kernel '{kernel.name}' "
                    f"to {buffer.width}x{buffer.height} buffer")
        return PixelBuffer(np.ascontiguousarray(new_pixels))
