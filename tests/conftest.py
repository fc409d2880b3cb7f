import numpy as np
import pytest

from photo_editor.models.pixel_buffer import PixelBuffer
from photo_editor.services.pixel_buffer_service import PixelBufferService


@pytest.fixture
def buffer_service() -> PixelBufferService:
    return PixelBufferService()


@pytest.fixture
def noise_buffer() -> PixelBuffer:
    """Deterministic 7x9 buffer of random colours."""
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(7, 9, 3), dtype=np.uint8))


@pytest.fixture
def make_buffer(buffer_service):
    """Factory: make_buffer(width, height, fill)."""
    def _make(width, height, fill=(0, 0, 0)):
        return buffer_service.create(width, height, fill)
    return _make
