"""Map kernel classifications to pixel colors."""

from __future__ import annotations

import numpy as np
from matplotlib import colormaps

from .kernel import (
    BOUNDED,
    JULIA_ITERATIONS,
    NEWTON_ROOTS,
    Converged,
    Escaped,
    JuliaResult,
    NewtonResult,
)

# Colors are computed on 16-bit channels and reduced to 8 bits for rasters.
CHANNEL_MAX = 65535
BRIGHTNESS = 60000
CONTRAST = 2000

BLACK = (0, 0, 0, CHANNEL_MAX)

# Channels lit for each root, in NEWTON_ROOTS order: 1 red, -1 blue, i green, -i purple.
ROOT_CHANNELS = np.array(
    [
        [1, 0, 0],
        [0, 0, 1],
        [0, 1, 0],
        [1, 0, 1],
    ],
    dtype=np.int64,
)


def _clamp(value: int) -> int:
    return max(0, min(int(value), CHANNEL_MAX))


def to_8bit(color: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    """Reduce a 16-bit RGBA color to 8 bits per channel."""

    return tuple(channel // 257 for channel in color)


def newton_color(result: NewtonResult, contrast: int = CONTRAST) -> tuple[int, int, int, int]:
    """16-bit RGBA color for a Newton classification.

    Converged points get their root's hue dimmed by ``contrast`` per iteration;
    everything else is opaque black.
    """

    if not isinstance(result, Converged):
        return BLACK
    level = _clamp(BRIGHTNESS - contrast * result.iteration)
    channels = ROOT_CHANNELS[NEWTON_ROOTS.index(result.root)]
    r, g, b = (level * int(on) for on in channels)
    return (r, g, b, CHANNEL_MAX)


def julia_color(result: JuliaResult, contrast: int = CONTRAST) -> tuple[int, int, int, int]:
    """16-bit RGBA color for a Julia classification: green rises and blue falls with the escape iteration."""

    if not isinstance(result, Escaped):
        return BLACK
    green = _clamp(contrast * result.iteration)
    blue = _clamp(BRIGHTNESS - contrast * result.iteration)
    return (0, green, blue, CHANNEL_MAX)


def _finish(rgba16: np.ndarray) -> np.ndarray:
    return np.uint8(np.clip(rgba16, 0, CHANNEL_MAX) // 257)


def colorize_newton(roots: np.ndarray, iterations: np.ndarray, contrast: int = CONTRAST) -> np.ndarray:
    """Array form of :func:`newton_color`; returns a ``uint8`` RGBA raster."""

    roots = np.asarray(roots)
    level = np.clip(BRIGHTNESS - contrast * np.asarray(iterations, dtype=np.int64), 0, CHANNEL_MAX)
    converged = roots >= 0
    channels = ROOT_CHANNELS[np.where(converged, roots, 0)]
    rgba = np.zeros(roots.shape + (4,), dtype=np.int64)
    rgba[..., :3] = np.where(converged[..., None], channels * level[..., None], 0)
    rgba[..., 3] = CHANNEL_MAX
    return _finish(rgba)


def colorize_julia(
    escape: np.ndarray,
    contrast: int = CONTRAST,
    *,
    colormap: str | None = None,
    max_iterations: int = JULIA_ITERATIONS,
    inside_rgb: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """Array form of :func:`julia_color`; returns a ``uint8`` RGBA raster.

    When ``colormap`` names a matplotlib colormap, escaped points are colored by
    ``escape / max_iterations`` through it instead of the green/blue ramp.
    """

    escape = np.asarray(escape, dtype=np.int64)
    inside = escape == BOUNDED

    if colormap is not None:
        cmap = colormaps[colormap]
        v = np.clip(escape / max(max_iterations - 1, 1), 0.0, 1.0)
        rgba = np.array(cmap(v), copy=True)
        for k in (0, 1, 2):
            rgba[..., k] = np.where(inside, inside_rgb[k], rgba[..., k])
        rgba[..., 3] = 1.0
        return np.uint8(np.clip(rgba * 255, 0, 255))

    rgba = np.zeros(escape.shape + (4,), dtype=np.int64)
    rgba[..., 1] = np.where(inside, 0, np.clip(contrast * escape, 0, CHANNEL_MAX))
    rgba[..., 2] = np.where(inside, 0, np.clip(BRIGHTNESS - contrast * escape, 0, CHANNEL_MAX))
    rgba[..., 3] = CHANNEL_MAX
    return _finish(rgba)
