import numpy as np
import pytest

from mandelgray import (
    RenderParameters,
    interleaved_offset,
    pixel_to_complex,
    scale_coordinate,
    scaled_axis,
)


@pytest.mark.parametrize(
    "center, size, pixels_wide",
    [(-0.5, 2.0, 1024), (0.0, 2.0, 4), (0.3, 0.001, 17), (-1.25, 3.5, 1)],
)
def test_scaling_spans_half_open_window(center, size, pixels_wide):
    assert scale_coordinate(center, size, 0, pixels_wide) == pytest.approx(center - size / 2)
    assert scale_coordinate(center, size, pixels_wide, pixels_wide) == pytest.approx(center + size / 2)


def test_scaling_is_strictly_increasing():
    values = [scale_coordinate(-0.5, 2.0, xy, 64) for xy in range(65)]
    assert all(a < b for a, b in zip(values, values[1:]))


def test_scaling_is_affine():
    steps = np.diff([scale_coordinate(0.1, 2.0, xy, 8) for xy in range(9)])
    np.testing.assert_allclose(steps, 0.25)


def test_reference_grid_corners():
    assert scale_coordinate(-0.5, 2.0, 0, 4) == -1.5
    assert scale_coordinate(0.0, 2.0, 0, 4) == -1.0
    assert scale_coordinate(-0.5, 2.0, 2, 4) == -0.5
    assert scale_coordinate(0.0, 2.0, 2, 4) == 0.0


@pytest.mark.parametrize("center, size, pixels_wide", [(-0.5, 2.0, 33), (0.123, 0.7, 10), (2.0, 1e-6, 5)])
def test_scaled_axis_matches_scalar_scaling(center, size, pixels_wide):
    expected = np.array([scale_coordinate(center, size, xy, pixels_wide) for xy in range(pixels_wide)])
    axis = scaled_axis(center, size, pixels_wide)
    assert axis.dtype == np.float64
    np.testing.assert_array_equal(axis, expected)


def test_scaled_axis_empty_grid():
    assert scaled_axis(0.0, 2.0, 0).size == 0


@pytest.mark.parametrize(
    "width, x, y, channel, channel_count, expected",
    [
        (4, 0, 0, 0, 1, 0),
        (4, 2, 1, 0, 1, 6),
        (4, 3, 3, 0, 1, 15),
        (4, 2, 1, 2, 3, 20),
        (1024, 1023, 1023, 0, 1, 1024 * 1024 - 1),
    ],
)
def test_interleaved_offset(width, x, y, channel, channel_count, expected):
    assert interleaved_offset(width, x, y, channel, channel_count) == expected


def test_pixel_to_complex():
    params = RenderParameters(pixels_wide=4)
    assert pixel_to_complex(params, 0, 0) == complex(-1.5, -1.0)
    assert pixel_to_complex(params, 2, 2) == complex(-0.5, 0.0)
    assert pixel_to_complex(params, 3, 1) == complex(0.0, -0.5)
