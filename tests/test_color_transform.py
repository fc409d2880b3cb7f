"""
Tests for the per-pixel colour transforms.
"""
import numpy as np
import pytest

from photo_editor.errors import UnknownOperationError
from photo_editor.models.color_transform import ColorTransform
from photo_editor.services.filter_service import FilterService


@pytest.fixture
def filter_service() -> FilterService:
    return FilterService()


@pytest.mark.parametrize("transform,expected", [
    (ColorTransform.GRAYSCALE, (18, 18, 18)),
    (ColorTransform.GRAYSCALE_AVERAGE, (20, 20, 20)),
    (ColorTransform.INVERT, (245, 235, 225)),
    (ColorTransform.SHIFT, (30, 10, 20)),
    (ColorTransform.KEEP_RED, (10, 0, 0)),
    (ColorTransform.KEEP_GREEN, (0, 20, 0)),
    (ColorTransform.KEEP_BLUE, (0, 0, 30)),
    (ColorTransform.REMOVE_RED, (0, 20, 30)),
    (ColorTransform.REMOVE_GREEN, (10, 0, 30)),
    (ColorTransform.REMOVE_BLUE, (10, 20, 0)),
])
def test_single_pixel_outputs(transform, expected):
    assert transform((10, 20, 30)) == expected


@pytest.mark.parametrize("v", [0, 1, 77, 128, 254, 255])
def test_grayscale_keeps_gray_pixels(v):
    assert ColorTransform.GRAYSCALE((v, v, v)) == (v, v, v)
    assert ColorTransform.GRAYSCALE_AVERAGE((v, v, v)) == (v, v, v)


def test_grayscale_weighted_floors():
    # 0.299*255 + 0.587*0 + 0.114*0 = 76.245
    assert ColorTransform.GRAYSCALE((255, 0, 0)) == (76, 76, 76)
    assert ColorTransform.GRAYSCALE((255, 255, 255)) == (255, 255, 255)


def test_invert_is_self_inverse(filter_service, noise_buffer):
    once = filter_service.apply_color_transform(noise_buffer, ColorTransform.INVERT)
    twice = filter_service.apply_color_transform(once, ColorTransform.INVERT)
    assert once != noise_buffer
    assert twice == noise_buffer


def test_shift_is_a_three_cycle(filter_service, noise_buffer):
    buf = noise_buffer
    for _ in range(3):
        buf = filter_service.apply_color_transform(buf, ColorTransform.SHIFT)
    assert buf == noise_buffer


def test_source_is_not_modified(filter_service, noise_buffer):
    before = noise_buffer.pixels.copy()
    for transform in ColorTransform:
        result = filter_service.apply_color_transform(noise_buffer, transform)
        assert result.pixels is not noise_buffer.pixels
        assert result.shape == noise_buffer.shape
        assert result.pixels.dtype == np.uint8
    assert np.array_equal(noise_buffer.pixels, before)


def test_buffer_matches_per_pixel_function(filter_service, noise_buffer):
    result = filter_service.apply_color_transform(noise_buffer, ColorTransform.GRAYSCALE)
    for row in range(noise_buffer.height):
        for col in range(noise_buffer.width):
            pixel = tuple(int(c) for c in noise_buffer.pixels[row, col])
            assert tuple(int(c) for c in result.pixels[row, col]) == ColorTransform.GRAYSCALE(pixel)


@pytest.mark.parametrize("name,expected", [
    ("invert", ColorTransform.INVERT),
    ("Keep-Red-Only", ColorTransform.KEEP_RED),
    ("remove blue", ColorTransform.REMOVE_BLUE),
    ("GRAYSCALE_AVERAGE", ColorTransform.GRAYSCALE_AVERAGE),
])
def test_from_name(name, expected):
    assert ColorTransform.from_name(name) is expected


def test_unknown_name():
    with pytest.raises(UnknownOperationError):
        ColorTransform.from_name("sepia")


def test_grayscale_mode_average(monkeypatch, noise_buffer):
    monkeypatch.setenv("GRAYSCALE_MODE", "average")
    service = FilterService()
    by_name = service.apply_color_transform(noise_buffer, "grayscale")
    explicit = service.apply_color_transform(noise_buffer, ColorTransform.GRAYSCALE_AVERAGE)
    assert by_name == explicit
