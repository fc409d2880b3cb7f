from io import BytesIO
import logging
import os

import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError
from dotenv import load_dotenv

from ..errors import (
    InvalidDimensionError,
    OutOfBoundsError,
    DecodeError,
    UnsupportedFormatError,
    EncodeError,
)
from ..models.pixel_buffer import PixelBuffer, Color, to_color

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Pillow format names keyed by the aliases callers tend to pass in.
_FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF", "PBM": "PPM", "PGM": "PPM"}


class PixelBufferRepository:
    """
    Handles allocation, deep copies, pixel access and byte-level codecs
    for PixelBuffer entities. Never touches the file system.
    """
    def __init__(self):
        formats = os.getenv("SUPPORTED_SAVE_FORMATS", "PNG,BMP,TIFF,JPEG,GIF,PPM")
        self.SUPPORTED_FORMATS = {self.normalise_format(f) for f in formats.split(",") if f.strip()}
        self.JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "95"))

    # ─── Allocation ───────────────────────────────────────────────────
    @staticmethod
    def create_buffer(width: int, height: int, fill: Color = (0, 0, 0)) -> PixelBuffer:
        if isinstance(width, bool) or isinstance(height, bool) \
                or not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
            raise InvalidDimensionError(f"Dimensions must be integers, got {width!r}x{height!r}")
        if width < 1 or height < 1:
            raise InvalidDimensionError(f"Dimensions must be at least 1x1, got {width}x{height}")
        pixels = np.empty((int(height), int(width), 3), dtype=np.uint8)
        pixels[:, :] = to_color(fill)
        return PixelBuffer(pixels)

    @staticmethod
    def from_array(pixels: np.ndarray) -> PixelBuffer:
        arr = np.asarray(pixels)
        if arr.ndim != 3 or arr.shape[2] != 3 or arr.shape[0] < 1 or arr.shape[1] < 1:
            raise InvalidDimensionError(f"Pixel array must have shape (H>=1, W>=1, 3), got {arr.shape}")
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        return PixelBuffer(np.array(arr, dtype=np.uint8, order="C", copy=True))

    @staticmethod
    def clone(buffer: PixelBuffer) -> PixelBuffer:
        return PixelBuffer(buffer.pixels.copy(order="C"))

    # ─── Pixel access ─────────────────────────────────────────────────
    @staticmethod
    def check_bounds(buffer: PixelBuffer, row: int, col: int) -> None:
        if not (0 <= row < buffer.height and 0 <= col < buffer.width):
            raise OutOfBoundsError(
                f"({row}, {col}) is outside a {buffer.height}x{buffer.width} buffer"
            )

    @classmethod
    def retrieve_pixel(cls, buffer: PixelBuffer, row: int, col: int) -> Color:
        cls.check_bounds(buffer, row, col)
        r, g, b = buffer.pixels[row, col]
        return int(r), int(g), int(b)

    @classmethod
    def set_pixel(cls, buffer: PixelBuffer, row: int, col: int, color: Color) -> None:
        cls.check_bounds(buffer, row, col)
        buffer.pixels[row, col] = to_color(color)

    # ─── Codecs ───────────────────────────────────────────────────────
    @staticmethod
    def normalise_format(fmt: str) -> str:
        key = str(fmt).strip().lstrip(".").upper()
        return _FORMAT_ALIASES.get(key, key)

    @staticmethod
    def decode(data: bytes) -> PixelBuffer:
        """
        Bytes in any Pillow-readable format → RGB PixelBuffer.
        Unrecognised input raises UnsupportedFormatError; damaged input of a
        known format raises a plain DecodeError.
        """
        if not data:
            raise UnsupportedFormatError("No image data supplied")
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                fmt = pil_img.format
                rgb = pil_img.convert("RGB")
        except UnidentifiedImageError as err:
            raise UnsupportedFormatError("Unsupported or unrecognised image format") from err
        except PILImage.DecompressionBombError as err:
            raise DecodeError(f"Image is too large to decode: {err}") from err
        except (OSError, SyntaxError, ValueError, EOFError) as err:
            raise DecodeError(f"Could not decode image: {err}") from err

        pixels = np.array(rgb, dtype=np.uint8)
        logger.debug(f"Decoded {fmt} image: {pixels.shape[1]}x{pixels.shape[0]}")
        return PixelBuffer(np.ascontiguousarray(pixels))

    def encode(self, buffer: PixelBuffer, fmt: str = "PNG") -> bytes:
        pil_format = self.normalise_format(fmt)
        if pil_format not in self.SUPPORTED_FORMATS:
            raise EncodeError(
                f"Unsupported output format {fmt!r}; expected one of {sorted(self.SUPPORTED_FORMATS)}"
            )

        pil_img = PILImage.fromarray(np.ascontiguousarray(buffer.pixels))
        out = BytesIO()
        params = {"quality": self.JPEG_QUALITY} if pil_format == "JPEG" else {}
        try:
            pil_img.save(out, format=pil_format, **params)
        except (KeyError, OSError, ValueError) as err:
            raise EncodeError(f"Could not encode image as {pil_format}: {err}") from err
        return out.getvalue()
