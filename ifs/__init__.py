"""Public API for Newton and Julia iterated function system rendering."""

from .engine import render_julia_animation, render_julia_single, render_newton
from .errors import (
    IFSError,
    InvalidFrameCount,
    InvalidPathName,
    InvalidWorkerCount,
    RenderCancelled,
    RenderPanic,
    RenderTimeout,
)
from .kernel import Bounded, Converged, Escaped, Singular, Unconverged, julia_escape, newton_orbit
from .paths import PARAMETER_PATHS, get_path, path_parameters
from .pipeline import AnimationSequence, FrameJob, FramePipeline, FrameResult, build_jobs, render_animation
from .renderer import (
    REFERENCE_WINDOW,
    JuliaFrame,
    NewtonFrame,
    SamplingMetadata,
    Window,
    pixel_to_complex,
    render_julia_frame,
    render_newton_frame,
)

__all__ = [
    "AnimationSequence",
    "Bounded",
    "Converged",
    "Escaped",
    "FrameJob",
    "FramePipeline",
    "FrameResult",
    "IFSError",
    "InvalidFrameCount",
    "InvalidPathName",
    "InvalidWorkerCount",
    "JuliaFrame",
    "NewtonFrame",
    "PARAMETER_PATHS",
    "REFERENCE_WINDOW",
    "RenderCancelled",
    "RenderPanic",
    "RenderTimeout",
    "SamplingMetadata",
    "Singular",
    "Unconverged",
    "Window",
    "build_jobs",
    "get_path",
    "julia_escape",
    "newton_orbit",
    "path_parameters",
    "pixel_to_complex",
    "render_animation",
    "render_julia_animation",
    "render_julia_frame",
    "render_julia_single",
    "render_newton",
    "render_newton_frame",
]
