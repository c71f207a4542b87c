"""Rendering primitives for Newton and Julia frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .kernel import (
    JULIA_BAILOUT,
    JULIA_ITERATIONS,
    NEWTON_ITERATIONS,
    NEWTON_TOLERANCE,
    JuliaResult,
    NewtonResult,
    decode_julia,
    decode_newton,
    julia_grid,
    newton_grid,
)
from .palette import CONTRAST, colorize_julia, colorize_newton


@dataclass(frozen=True)
class Window:
    """Region of the complex plane sampled by a render, and its raster size."""

    x_res: int
    y_res: int
    x_center: float
    y_center: float
    x_width: float
    y_width: float

    @classmethod
    def from_bounds(cls, x_min: float, y_min: float, x_max: float, y_max: float, x_res: int, y_res: int) -> "Window":
        return cls(
            x_res=x_res,
            y_res=y_res,
            x_center=(x_min + x_max) / 2.0,
            y_center=(y_min + y_max) / 2.0,
            x_width=x_max - x_min,
            y_width=y_max - y_min,
        )


# [-2, 2] x [-2, 2] at 1024 x 1024, shared by both processes.
REFERENCE_WINDOW = Window.from_bounds(-2.0, -2.0, 2.0, 2.0, 1024, 1024)


@dataclass(frozen=True)
class SamplingMetadata:
    """Metadata describing the sampling grid for a rendered frame."""

    x_min: float
    y_min: float
    x_step: float
    y_step: float
    x_res: int
    y_res: int


def _compute_metadata(window: Window) -> SamplingMetadata:
    x_res = max(int(window.x_res), 1)
    y_res = max(int(window.y_res), 1)

    x_width = np.float64(window.x_width)
    y_width = np.float64(window.y_width)

    x_min = np.float64(window.x_center) - x_width / 2.0
    y_min = np.float64(window.y_center) - y_width / 2.0

    # Half-open sampling: pixel k sits at min + k * width / res.
    return SamplingMetadata(
        x_min=float(x_min),
        y_min=float(y_min),
        x_step=float(x_width / x_res),
        y_step=float(y_width / y_res),
        x_res=x_res,
        y_res=y_res,
    )


def pixel_to_complex(metadata: SamplingMetadata, row: int, col: int) -> complex:
    x = np.float64(metadata.x_min) + np.float64(col) * np.float64(metadata.x_step)
    y = np.float64(metadata.y_min) + np.float64(row) * np.float64(metadata.y_step)
    return complex(float(x), float(y))


def complex_to_pixel(metadata: SamplingMetadata, z: complex) -> tuple[int, int]:
    """Nearest ``(row, col)`` sample to ``z``; raises ``ValueError`` outside the window."""

    z = complex(z)
    col = int(round((z.real - metadata.x_min) / metadata.x_step))
    row = int(round((z.imag - metadata.y_min) / metadata.y_step))
    if not (0 <= row < metadata.y_res and 0 <= col < metadata.x_res):
        raise ValueError(f"{z} lies outside the sampled window")
    return row, col


def _sample_grid(metadata: SamplingMetadata) -> tf.Tensor:
    x = metadata.x_min + metadata.x_step * np.arange(metadata.x_res, dtype=np.float64)
    y = metadata.y_min + metadata.y_step * np.arange(metadata.y_res, dtype=np.float64)
    X, Y = tf.meshgrid(tf.convert_to_tensor(x, dtype=tf.float64), tf.convert_to_tensor(y, dtype=tf.float64))
    return tf.complex(X, Y)


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class NewtonFrame:
    """Raster and per-pixel classification of a Newton render."""

    raster: np.ndarray
    roots: np.ndarray
    iterations: np.ndarray
    metadata: SamplingMetadata

    def classify(self, row: int, col: int) -> NewtonResult:
        return decode_newton(self.roots[row, col], self.iterations[row, col])

    def classify_point(self, z: complex) -> NewtonResult:
        return self.classify(*complex_to_pixel(self.metadata, z))


@dataclass(frozen=True)
class JuliaFrame:
    """Raster and per-pixel escape iterations of a Julia render."""

    raster: np.ndarray
    escape: np.ndarray
    parameter: complex
    metadata: SamplingMetadata

    def classify(self, row: int, col: int) -> JuliaResult:
        return decode_julia(self.escape[row, col])

    def classify_point(self, z: complex) -> JuliaResult:
        return self.classify(*complex_to_pixel(self.metadata, z))


def render_newton_frame(
    window: Window = REFERENCE_WINDOW,
    *,
    max_iterations: int = NEWTON_ITERATIONS,
    tolerance: float = NEWTON_TOLERANCE,
    contrast: int = CONTRAST,
    device: Optional[str] = None,
) -> NewtonFrame:
    """Render the basins of attraction of Newton's method for z**4 - 1."""

    metadata = _compute_metadata(window)
    with tf.device(device if device is not None else "/CPU:0"):
        roots, iterations = newton_grid(_sample_grid(metadata), max_iterations, tolerance)

    return NewtonFrame(
        raster=_freeze(colorize_newton(roots, iterations, contrast)),
        roots=_freeze(roots),
        iterations=_freeze(iterations),
        metadata=metadata,
    )


def render_julia_frame(
    c: complex,
    window: Window = REFERENCE_WINDOW,
    *,
    max_iterations: int = JULIA_ITERATIONS,
    bailout: float = JULIA_BAILOUT,
    contrast: int = CONTRAST,
    colormap: Optional[str] = None,
    device: Optional[str] = None,
) -> JuliaFrame:
    """Render the Julia set of z -> z**2 + c over ``window``."""

    metadata = _compute_metadata(window)
    with tf.device(device if device is not None else "/CPU:0"):
        escape = julia_grid(_sample_grid(metadata), c, max_iterations, bailout)

    raster = colorize_julia(escape, contrast, colormap=colormap, max_iterations=max_iterations)
    return JuliaFrame(
        raster=_freeze(raster),
        escape=_freeze(escape),
        parameter=complex(c),
        metadata=metadata,
    )
