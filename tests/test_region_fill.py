"""
Tests for the 4-connected flood fill.
"""
import numpy as np
import pytest

from photo_editor.errors import OutOfBoundsError
from photo_editor.services.region_fill_service import RegionFillService

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
BLUE = (0, 0, 255)


@pytest.fixture
def fill_service() -> RegionFillService:
    return RegionFillService()


def test_three_by_three_black_becomes_white(fill_service, make_buffer):
    buf = make_buffer(3, 3, BLACK)
    result = fill_service.fill_region(buf, 1, 1, WHITE)
    assert (result.pixels == 255).all()


@pytest.mark.parametrize("row,col", [(0, 0), (3, 7), (5, 2)])
def test_solid_buffer_fills_completely(fill_service, make_buffer, row, col):
    buf = make_buffer(8, 6, (12, 34, 56))
    result = fill_service.fill_region(buf, row, col, RED)
    assert (result.pixels == RED).all()


def test_input_is_untouched(fill_service, make_buffer):
    buf = make_buffer(4, 4, BLACK)
    fill_service.fill_region(buf, 0, 0, WHITE)
    assert (buf.pixels == 0).all()


def test_wall_stops_the_fill(fill_service, make_buffer):
    buf = make_buffer(5, 5, BLACK)
    buf.pixels[:, 2] = RED
    result = fill_service.fill_region(buf, 0, 0, BLUE)
    assert (result.pixels[:, :2] == BLUE).all()
    assert (result.pixels[:, 2] == RED).all()
    assert (result.pixels[:, 3:] == BLACK).all()


def test_does_not_leak_diagonally(fill_service, make_buffer):
    buf = make_buffer(3, 3, WHITE)
    for row in range(3):
        for col in range(3):
            if (row + col) % 2 == 0:
                buf.pixels[row, col] = BLACK
    result = fill_service.fill_region(buf, 1, 1, RED)
    assert tuple(result.pixels[1, 1]) == RED
    changed = np.argwhere((result.pixels != buf.pixels).any(axis=-1))
    assert changed.tolist() == [[1, 1]]


def test_fill_with_target_colour_is_unchanged(fill_service, noise_buffer):
    colour = tuple(int(c) for c in noise_buffer.pixels[2, 3])
    result = fill_service.fill_region(noise_buffer, 2, 3, colour)
    assert result == noise_buffer
    assert result.pixels is not noise_buffer.pixels


def test_large_region_does_not_recurse(fill_service, make_buffer):
    buf = make_buffer(200, 200, BLACK)
    result = fill_service.fill_region(buf, 100, 100, WHITE)
    assert (result.pixels == 255).all()


@pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (4, 0), (0, 5), (10, 10)])
def test_out_of_bounds_start(fill_service, make_buffer, row, col):
    buf = make_buffer(5, 4, BLACK)
    before = buf.pixels.copy()
    with pytest.raises(OutOfBoundsError):
        fill_service.fill_region(buf, row, col, WHITE)
    assert np.array_equal(buf.pixels, before)
