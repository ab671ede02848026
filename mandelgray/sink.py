"""Persisting grayscale sample buffers as image files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image

DEFAULT_FILENAME = "mandelbrot.jpg"


def resolve_output_path(filename: str | Path = DEFAULT_FILENAME, base_dir: Optional[Path] = None) -> Path:
    """Return the absolute path ``filename`` refers to, relative to ``base_dir`` or the cwd."""

    base = Path.cwd() if base_dir is None else Path(base_dir)
    return (base / Path(filename).expanduser()).resolve()


def _pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def samples_to_image(samples: np.ndarray, width: int, height: int, channels: int = 1) -> PIL.Image.Image:
    """Wrap a flat, row-major 8-bit buffer in a Pillow image."""

    expected = width * height * channels
    if samples.size != expected:
        raise ValueError(f"Expected {expected} samples for a {width}x{height}x{channels} image, got {samples.size}")
    shape = (height, width) if channels == 1 else (height, width, channels)
    array = np.ascontiguousarray(samples, dtype=np.uint8).reshape(shape)
    return PIL.Image.fromarray(array)


def write_grayscale_image(
    samples: np.ndarray,
    width: int,
    height: int,
    output_path: Path,
    image_format: Optional[str] = None,
) -> bool:
    """Write ``samples`` to ``output_path``; report whether the file was written.

    The format is taken from ``image_format`` when given, otherwise from the
    file suffix. Filesystem and encoder failures are reported as ``False``.
    """

    ext = image_format or output_path.suffix
    pil_format = _pil_format_name(ext) if ext else None
    try:
        image = samples_to_image(samples, width, height)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(str(output_path), format=pil_format)
    except (OSError, ValueError, KeyError):
        return False
    return True
