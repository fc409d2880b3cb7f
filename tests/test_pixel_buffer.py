"""
Tests for PixelBuffer allocation, pixel access and byte codecs.
"""
from io import BytesIO
import struct
import zlib

import numpy as np
import pytest
from PIL import Image as PILImage

from photo_editor.errors import (
    InvalidDimensionError,
    OutOfBoundsError,
    DecodeError,
    UnsupportedFormatError,
    EncodeError,
)
from photo_editor.models.pixel_buffer import PixelBuffer, to_color


class TestCreate:
    def test_every_pixel_is_fill(self, buffer_service):
        buf = buffer_service.create(4, 3, (10, 20, 30))
        assert buf.width == 4
        assert buf.height == 3
        assert buf.pixels.shape == (3, 4, 3)
        assert buf.pixels.dtype == np.uint8
        assert (buf.pixels == [10, 20, 30]).all()

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (0, 0)])
    def test_rejects_non_positive_dimensions(self, buffer_service, width, height):
        with pytest.raises(InvalidDimensionError):
            buffer_service.create(width, height, (0, 0, 0))

    def test_rejects_non_integer_dimensions(self, buffer_service):
        with pytest.raises(InvalidDimensionError):
            buffer_service.create(2.5, 3, (0, 0, 0))

    def test_default_canvas_from_env(self, monkeypatch):
        from photo_editor.services.pixel_buffer_service import PixelBufferService
        monkeypatch.setenv("DEFAULT_CANVAS_WIDTH", "12")
        monkeypatch.setenv("DEFAULT_CANVAS_HEIGHT", "8")
        monkeypatch.setenv("DEFAULT_FILL_COLOR", "255,255,255")
        buf = PixelBufferService().create_default()
        assert buf.shape == (8, 12)
        assert (buf.pixels == 255).all()

    def test_fill_channels_are_clamped(self, buffer_service):
        buf = buffer_service.create(1, 1, (300, -5, 128))
        assert buffer_service.get_pixel(buf, 0, 0) == (255, 0, 128)

    def test_from_array_copies(self, buffer_service):
        arr = np.zeros((2, 2, 3), dtype=np.uint8)
        buf = buffer_service.from_array(arr)
        arr[0, 0] = 99
        assert buffer_service.get_pixel(buf, 0, 0) == (0, 0, 0)

    def test_from_array_rejects_bad_shape(self, buffer_service):
        with pytest.raises(InvalidDimensionError):
            buffer_service.from_array(np.zeros((2, 2), dtype=np.uint8))
        with pytest.raises(InvalidDimensionError):
            buffer_service.from_array(np.zeros((0, 2, 3), dtype=np.uint8))


class TestCloneAndAccess:
    def test_clone_is_independent(self, buffer_service, noise_buffer):
        copy = buffer_service.clone(noise_buffer)
        assert copy == noise_buffer
        assert copy.pixels is not noise_buffer.pixels
        buffer_service.set_pixel(copy, 0, 0, (1, 2, 3))
        buffer_service.set_pixel(noise_buffer, 0, 0, (9, 9, 9))
        assert buffer_service.get_pixel(copy, 0, 0) == (1, 2, 3)

    def test_get_and_set(self, make_buffer, buffer_service):
        buf = make_buffer(3, 2)
        buffer_service.set_pixel(buf, 1, 2, (7, 8, 9))
        assert buffer_service.get_pixel(buf, 1, 2) == (7, 8, 9)
        assert buffer_service.get_pixel(buf, 0, 0) == (0, 0, 0)

    @pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (2, 0), (0, 3), (5, 5)])
    def test_out_of_bounds(self, make_buffer, buffer_service, row, col):
        buf = make_buffer(3, 2)
        with pytest.raises(OutOfBoundsError):
            buffer_service.get_pixel(buf, row, col)
        with pytest.raises(OutOfBoundsError):
            buffer_service.set_pixel(buf, row, col, (1, 1, 1))

    def test_out_of_bounds_is_an_index_error(self, make_buffer, buffer_service):
        with pytest.raises(IndexError):
            buffer_service.get_pixel(make_buffer(1, 1), 1, 0)


class TestCodecs:
    def test_png_round_trip(self, buffer_service, noise_buffer):
        data = buffer_service.encode(noise_buffer, "png")
        assert data.startswith(b"\x89PNG")
        assert buffer_service.decode(data) == noise_buffer

    def test_default_format_is_png(self, buffer_service, noise_buffer):
        assert buffer_service.encode(noise_buffer).startswith(b"\x89PNG")

    def test_format_aliases(self, buffer_service, noise_buffer):
        data = buffer_service.encode(noise_buffer, ".jpg")
        assert data[:2] == b"\xff\xd8"

    def test_unsupported_encode_format(self, buffer_service, noise_buffer):
        with pytest.raises(EncodeError):
            buffer_service.encode(noise_buffer, "xyz")

    def test_decode_converts_to_rgb(self, buffer_service):
        rgba = PILImage.new("RGBA", (3, 2), (10, 20, 30, 40))
        out = BytesIO()
        rgba.save(out, format="PNG")
        buf = buffer_service.decode(out.getvalue())
        assert buf.shape == (2, 3)
        assert buffer_service.get_pixel(buf, 1, 2) == (10, 20, 30)

    def test_garbage_is_unsupported_format(self, buffer_service):
        with pytest.raises(UnsupportedFormatError):
            buffer_service.decode(b"definitely not an image")

    def test_empty_bytes_is_unsupported_format(self, buffer_service):
        with pytest.raises(UnsupportedFormatError):
            buffer_service.decode(b"")

    def test_truncated_png_is_generic_decode_error(self, buffer_service):
        rng = np.random.default_rng(7)
        noisy = PixelBuffer(rng.integers(0, 256, size=(128, 128, 3), dtype=np.uint8))
        data = buffer_service.encode(noisy, "PNG")
        with pytest.raises(DecodeError) as info:
            buffer_service.decode(data[: len(data) - 1000])
        assert not isinstance(info.value, UnsupportedFormatError)

    def test_oversized_png_is_generic_decode_error(self, buffer_service):
        data = bytearray(buffer_service.encode(PixelBuffer(np.zeros((1, 1, 3), dtype=np.uint8)), "PNG"))
        # rewrite IHDR width/height to 30000x30000 and fix up its CRC
        data[16:24] = struct.pack(">II", 30000, 30000)
        data[29:33] = struct.pack(">I", zlib.crc32(bytes(data[12:29])) & 0xffffffff)
        with pytest.raises(DecodeError) as info:
            buffer_service.decode(bytes(data))
        assert not isinstance(info.value, UnsupportedFormatError)
        assert "too large" in str(info.value)


def test_to_color_parses_strings_and_clamps():
    assert to_color("1, 2,3") == (1, 2, 3)
    assert to_color([256, -1, 3.6]) == (255, 0, 4)
    with pytest.raises(ValueError):
        to_color((1, 2))
