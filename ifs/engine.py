"""Entry points called by the request layer (CLI or HTTP)."""

from __future__ import annotations

from functools import partial
from typing import Optional

import numpy as np

from .kernel import JULIA_BAILOUT, JULIA_ITERATIONS
from .palette import CONTRAST
from .pipeline import AnimationSequence, render_animation
from .renderer import REFERENCE_WINDOW, Window, render_julia_frame, render_newton_frame

NEWTON_WINDOW = REFERENCE_WINDOW
JULIA_WINDOW = REFERENCE_WINDOW


def render_newton(window: Window = NEWTON_WINDOW, *, device: Optional[str] = None) -> np.ndarray:
    """Raster of the basins of Newton's method for z**4 - 1."""

    return render_newton_frame(window, device=device).raster


def _julia_raster(
    c: complex,
    *,
    window: Window,
    max_iterations: int,
    bailout: float,
    contrast: int,
    colormap: Optional[str],
    device: Optional[str],
) -> np.ndarray:
    frame = render_julia_frame(
        c,
        window,
        max_iterations=max_iterations,
        bailout=bailout,
        contrast=contrast,
        colormap=colormap,
        device=device,
    )
    return frame.raster


def render_julia_single(
    parameter: complex,
    window: Window = JULIA_WINDOW,
    *,
    max_iterations: int = JULIA_ITERATIONS,
    bailout: float = JULIA_BAILOUT,
    colormap: Optional[str] = None,
    device: Optional[str] = None,
) -> np.ndarray:
    """Raster of the Julia set for a single parameter ``c``."""

    return _julia_raster(
        parameter,
        window=window,
        max_iterations=max_iterations,
        bailout=bailout,
        contrast=CONTRAST,
        colormap=colormap,
        device=device,
    )


def render_julia_animation(
    n_frames: int,
    n_workers: int,
    path_name: str,
    window: Window = JULIA_WINDOW,
    *,
    max_iterations: int = JULIA_ITERATIONS,
    bailout: float = JULIA_BAILOUT,
    colormap: Optional[str] = None,
    device: Optional[str] = None,
    **pipeline_options,
) -> AnimationSequence:
    """Julia set rasters for each parameter along ``path_name``, in frame order."""

    render = partial(
        _julia_raster,
        window=window,
        max_iterations=max_iterations,
        bailout=bailout,
        contrast=CONTRAST,
        colormap=colormap,
        device=device,
    )
    return render_animation(n_frames, n_workers, path_name, render, **pipeline_options)
