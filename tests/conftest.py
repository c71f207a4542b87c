"""Shared fixtures: small windows so TensorFlow renders stay fast."""

from __future__ import annotations

import pytest

from ifs.renderer import Window


@pytest.fixture()
def tiny_window() -> Window:
    """[-2, 2] x [-2, 2] sampled at 16 x 16; pixel steps of exactly 0.25."""
    return Window.from_bounds(-2.0, -2.0, 2.0, 2.0, 16, 16)


@pytest.fixture()
def julia_window() -> Window:
    """[-1.5, 1.5] x [-1.5, 1.5] at 64 x 64; the center pixel samples z = 0 exactly."""
    return Window.from_bounds(-1.5, -1.5, 1.5, 1.5, 64, 64)

