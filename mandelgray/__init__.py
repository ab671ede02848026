"""Public API for grayscale Mandelbrot rendering utilities."""

from .renderer import (
    BACKENDS,
    ConfigurationError,
    RenderParameters,
    RenderResult,
    create_grayscale_samples,
    escape_time,
    render_frame,
)
from .coordinates import (
    interleaved_offset,
    pixel_to_complex,
    scale_coordinate,
    scaled_axis,
)
from .sink import resolve_output_path, write_grayscale_image

__all__ = [
    "BACKENDS",
    "ConfigurationError",
    "RenderParameters",
    "RenderResult",
    "create_grayscale_samples",
    "escape_time",
    "interleaved_offset",
    "pixel_to_complex",
    "render_frame",
    "resolve_output_path",
    "scale_coordinate",
    "scaled_axis",
    "write_grayscale_image",
]
