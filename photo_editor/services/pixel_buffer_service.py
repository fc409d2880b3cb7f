import os
import logging
from typing import Optional
import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer, Color, to_color
from ..repositories.pixel_buffer_repository import PixelBufferRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class PixelBufferService:
    """Business-level buffer API.  No filters, no history."""
    def __init__(self):
        self.DEFAULT_WIDTH = int(os.getenv("DEFAULT_CANVAS_WIDTH", "500"))
        self.DEFAULT_HEIGHT = int(os.getenv("DEFAULT_CANVAS_HEIGHT", "500"))
        self.DEFAULT_FILL = to_color(os.getenv("DEFAULT_FILL_COLOR", "0,0,0"))
        self.DEFAULT_FORMAT = os.getenv("DEFAULT_SAVE_FORMAT", "PNG")
        self.repository = PixelBufferRepository()

    def create(self, width: int, height: int, fill: Optional[Color] = None) -> PixelBuffer:
        """Allocate a width x height buffer with every pixel set to `fill`."""
        fill = self.DEFAULT_FILL if fill is None else fill
        buffer = self.repository.create_buffer(width, height, fill)
        logger.debug(f"Created {width}x{height} buffer filled with {to_color(fill)}")
        return buffer

    def create_default(self, fill: Optional[Color] = None) -> PixelBuffer:
        return self.create(self.DEFAULT_WIDTH, self.DEFAULT_HEIGHT, fill)

    def from_array(self, pixels: np.ndarray) -> PixelBuffer:
        return self.repository.from_array(pixels)

    def clone(self, buffer: PixelBuffer) -> PixelBuffer:
        return self.repository.clone(buffer)

    def get_pixel(self, buffer: PixelBuffer, row: int, col: int) -> Color:
        return self.repository.retrieve_pixel(buffer, row, col)

    def set_pixel(self, buffer: PixelBuffer, row: int, col: int, color: Color) -> None:
        self.repository.set_pixel(buffer, row, col, color)

    # ─── Codecs ───────────────────────────────────────────────────────
    def decode(self, data: bytes) -> PixelBuffer:
        buffer = self.repository.decode(data)
        logger.info(f"Decoded image {buffer.width}x{buffer.height} from {len(data)} bytes")
        return buffer

    def encode(self, buffer: PixelBuffer, fmt: Optional[str] = None) -> bytes:
        fmt = fmt or self.DEFAULT_FORMAT
        data = self.repository.encode(buffer, fmt)
        logger.info(f"Encoded {buffer.width}x{buffer.height} image as {fmt.upper()} ({len(data)} bytes)")
        return data

    def supported_formats(self):
        return sorted(self.repository.SUPPORTED_FORMATS)
