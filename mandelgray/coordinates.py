"""Pixel-grid to complex-plane mapping and flat buffer indexing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .renderer import RenderParameters


def scale_coordinate(center: float, size: float, xy: float, pixels_wide: int) -> float:
    """Map pixel index ``xy`` on one axis to its coordinate in the complex plane.

    Pixel ``0`` lands on ``center - size / 2`` and the one-past-the-end index
    ``pixels_wide`` on ``center + size / 2``, so the sampled window is half-open.
    """

    return (center - (size / 2.0)) + ((size * xy) / pixels_wide)


def scaled_axis(center: float, size: float, pixels_wide: int) -> np.ndarray:
    """Return ``scale_coordinate`` for every index of an axis as a float64 array."""

    if pixels_wide <= 0:
        return np.array([], dtype=np.float64)
    xy = np.arange(pixels_wide, dtype=np.float64)
    # Same operation order as scale_coordinate so both paths agree bit for bit.
    return (np.float64(center) - (np.float64(size) / 2.0)) + ((np.float64(size) * xy) / pixels_wide)


def interleaved_offset(width: int, x: int, y: int, channel: int = 0, channel_count: int = 1) -> int:
    """Offset of ``(x, y, channel)`` in a row-major buffer of interleaved channels."""

    return (y * width + x) * channel_count + channel


def pixel_to_complex(params: RenderParameters, x: int, y: int) -> complex:
    x0 = scale_coordinate(params.center_x, params.size, x, params.pixels_wide)
    y0 = scale_coordinate(params.center_y, params.size, y, params.pixels_wide)
    return complex(x0, y0)
