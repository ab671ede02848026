"""Rendering primitives for grayscale Mandelbrot images."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .coordinates import interleaved_offset, scale_coordinate, scaled_axis

MAX_SAMPLE = 255
BACKENDS = ("tensorflow", "python")


class ConfigurationError(ValueError):
    """Raised when render parameters describe an invalid view or grid."""


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single square render of the Mandelbrot set.

    ``escape_radius`` defaults to ``None``, in which case the window edge
    length ``size`` doubles as the escape bound.
    """

    center_x: float = -0.5
    center_y: float = 0.0
    size: float = 2.0
    max_iterations: int = 255
    pixels_wide: int = 1024
    escape_radius: Optional[float] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.size) or self.size <= 0:
            raise ConfigurationError(f"size must be a positive finite number, got {self.size!r}")
        if not (math.isfinite(self.center_x) and math.isfinite(self.center_y)):
            raise ConfigurationError(
                f"center must be finite, got ({self.center_x!r}, {self.center_y!r})"
            )
        if int(self.pixels_wide) != self.pixels_wide or self.pixels_wide < 1:
            raise ConfigurationError(f"pixels_wide must be a positive integer, got {self.pixels_wide!r}")
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 0:
            raise ConfigurationError(
                f"max_iterations must be a non-negative integer, got {self.max_iterations!r}"
            )
        if self.escape_radius is not None and (
            not math.isfinite(self.escape_radius) or self.escape_radius <= 0
        ):
            raise ConfigurationError(
                f"escape_radius must be a positive finite number, got {self.escape_radius!r}"
            )

    @property
    def bound(self) -> float:
        return self.size if self.escape_radius is None else self.escape_radius

    @property
    def saturates(self) -> bool:
        """Whether some escape counts cannot be represented in an 8-bit sample."""

        return self.max_iterations > MAX_SAMPLE


@dataclass(frozen=True)
class RenderResult:
    """Container for a rendered grayscale frame."""

    samples: np.ndarray
    iterations: np.ndarray
    params: RenderParameters

    def sample_at(self, x: int, y: int) -> int:
        return int(self.samples[interleaved_offset(self.params.pixels_wide, x, y)])


def escape_time(z0: complex, size: float, max_iterations: int) -> int:
    """Return the first iteration at which the orbit of ``z0`` leaves ``|z| <= size``.

    The orbit starts at ``z0`` and follows ``z -> z * z + z0``. Points that stay
    bounded for ``max_iterations`` steps report ``max_iterations``.
    """

    z = z0
    for i in range(max_iterations):
        # hypot reports inf where abs() of a complex would raise OverflowError.
        if math.hypot(z.real, z.imag) > size:
            return i
        z = z * z + z0

    return max_iterations


def to_sample(gray: int) -> int:
    """Saturate a brightness value into the 8-bit sample range."""

    return min(max(gray, 0), MAX_SAMPLE)


def create_grayscale_samples(
    center_x: float,
    center_y: float,
    size: float,
    max_iterations: int,
    pixels_wide: int,
    *,
    escape_radius: Optional[float] = None,
    counts: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Render the view window into a flat, row-major buffer of 8-bit samples.

    Points inside the set come out black (``0``); points escaping on the first
    test come out as ``max_iterations``, saturated to ``255``. When ``counts``
    is given, the raw escape count of pixel ``(x, y)`` is stored at
    ``counts[y, x]``.
    """

    bound = size if escape_radius is None else escape_radius
    samples = np.zeros(max(pixels_wide, 0) ** 2, dtype=np.uint8)

    for y in range(pixels_wide):
        y0 = scale_coordinate(center_y, size, y, pixels_wide)
        for x in range(pixels_wide):
            x0 = scale_coordinate(center_x, size, x, pixels_wide)
            iterations = escape_time(complex(x0, y0), bound, max_iterations)
            if counts is not None:
                counts[y, x] = iterations
            gray = max_iterations - iterations
            samples[interleaved_offset(pixels_wide, x, y)] = to_sample(gray)

    return samples


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor, bound: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance the orbit of every point that has not escaped yet."""

    zs_new = zs * zs + cs
    zs = tf.where(active, zs_new, zs)
    ns = ns + tf.cast(active, tf.int32)
    new_active = tf.logical_and(active, tf.abs(zs) <= bound)
    return zs, ns, new_active


@tf.function
def _escape_run(cs: tf.Tensor, bound: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Count escape iterations for a grid of points using a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.identity(cs)
    ns = tf.zeros(tf.shape(cs), tf.int32)
    # Points already outside the bound never take a step.
    active = tf.abs(zs) <= bound

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active, bound)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def _iterations_tensorflow(params: RenderParameters, device: Optional[str]) -> np.ndarray:
    x = scaled_axis(params.center_x, params.size, params.pixels_wide)
    y = scaled_axis(params.center_y, params.size, params.pixels_wide)

    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(x, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(y, dtype=tf.float64)
        X, Y = tf.meshgrid(x_tf, y_tf)
        cs = tf.complex(X, Y)
        bound = tf.constant(params.bound, dtype=tf.float64)
        max_iterations = tf.constant(params.max_iterations, dtype=tf.int32)
        ns = _escape_run(cs, bound, max_iterations)

    return ns.numpy()


def render_frame(params: RenderParameters, *, backend: str = "tensorflow", device: Optional[str] = None) -> RenderResult:
    """Render a grayscale frame given the supplied parameters.

    ``backend`` selects the per-pixel reference loop (``"python"``) or the
    vectorized grid evaluation (``"tensorflow"``). They agree except where a
    fused multiply-add in the vectorized kernel moves a boundary pixel.
    """

    if backend == "python":
        iterations = np.zeros((params.pixels_wide, params.pixels_wide), dtype=np.int32)
        samples = create_grayscale_samples(
            params.center_x,
            params.center_y,
            params.size,
            params.max_iterations,
            params.pixels_wide,
            escape_radius=params.escape_radius,
            counts=iterations,
        )
    elif backend == "tensorflow":
        iterations = _iterations_tensorflow(params, device)
        gray = np.int64(params.max_iterations) - iterations.astype(np.int64)
        samples = np.clip(gray, 0, MAX_SAMPLE).astype(np.uint8).reshape(-1)
    else:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")

    return RenderResult(samples=samples, iterations=iterations, params=params)
