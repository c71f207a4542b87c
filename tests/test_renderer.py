from __future__ import annotations

import numpy as np
import pytest

from ifs.kernel import Bounded, Converged, Singular, julia_escape, newton_orbit
from ifs.renderer import (
    REFERENCE_WINDOW,
    Window,
    _compute_metadata,
    complex_to_pixel,
    pixel_to_complex,
    render_julia_frame,
    render_newton_frame,
)


def test_reference_window_bounds() -> None:
    metadata = _compute_metadata(REFERENCE_WINDOW)
    assert (metadata.x_res, metadata.y_res) == (1024, 1024)
    assert pixel_to_complex(metadata, 0, 0) == complex(-2, -2)
    assert pixel_to_complex(metadata, 512, 512) == 0j
    assert pixel_to_complex(metadata, 1023, 1023) == complex(2 - 4 / 1024, 2 - 4 / 1024)


def test_from_bounds_round_trips_center_and_width() -> None:
    window = Window.from_bounds(-1.5, -1.0, 0.5, 1.0, 40, 20)
    assert window == Window(x_res=40, y_res=20, x_center=-0.5, y_center=0.0, x_width=2.0, y_width=2.0)


def test_complex_to_pixel(tiny_window: Window) -> None:
    metadata = _compute_metadata(tiny_window)
    assert complex_to_pixel(metadata, 0j) == (8, 8)
    assert complex_to_pixel(metadata, complex(1, 0)) == (8, 12)
    with pytest.raises(ValueError):
        complex_to_pixel(metadata, complex(5, 0))


def test_newton_frame_colors_roots_and_singularity(tiny_window: Window) -> None:
    frame = render_newton_frame(tiny_window)

    assert frame.raster.shape == (16, 16, 4)
    assert frame.raster.dtype == np.uint8
    assert frame.classify_point(1 + 0j) == Converged(1 + 0j, 0)
    assert tuple(frame.raster[8, 12]) == (233, 0, 0, 255)
    assert frame.classify_point(0j) == Singular(0)
    assert tuple(frame.raster[8, 8]) == (0, 0, 0, 255)


def test_newton_frame_agrees_with_scalar_kernel(tiny_window: Window) -> None:
    frame = render_newton_frame(tiny_window)
    matches = [
        frame.classify(row, col) == newton_orbit(pixel_to_complex(frame.metadata, row, col))
        for row in range(16)
        for col in range(16)
    ]
    assert all(matches)


def test_julia_origin_is_bounded_in_documented_example(julia_window: Window) -> None:
    frame = render_julia_frame(complex(-0.8, 0.156), julia_window, max_iterations=200)
    assert pixel_to_complex(frame.metadata, 32, 32) == 0j
    assert frame.classify_point(0j) == Bounded()
    assert tuple(frame.raster[32, 32]) == (0, 0, 0, 255)


def test_julia_frame_agrees_with_scalar_kernel(tiny_window: Window) -> None:
    c = complex(-0.4, 0.6)
    frame = render_julia_frame(c, tiny_window)
    matches = [
        frame.classify(row, col) == julia_escape(pixel_to_complex(frame.metadata, row, col), c)
        for row in range(16)
        for col in range(16)
    ]
    assert all(matches)


def test_frames_are_read_only(tiny_window: Window) -> None:
    frame = render_julia_frame(complex(-0.4, 0.6), tiny_window)
    assert not frame.raster.flags.writeable
    with pytest.raises(ValueError):
        frame.raster[0, 0, 0] = 1


def test_render_is_pure(tiny_window: Window) -> None:
    first = render_julia_frame(complex(0.285, 0.01), tiny_window)
    second = render_julia_frame(complex(0.285, 0.01), tiny_window)
    np.testing.assert_array_equal(first.raster, second.raster)
    np.testing.assert_array_equal(first.escape, second.escape)
