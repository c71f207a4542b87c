from __future__ import annotations

import numpy as np
import pytest

from ifs.kernel import BOUNDED, SINGULAR, UNCONVERGED, Bounded, Converged, Escaped, Singular, Unconverged
from ifs.palette import (
    BLACK,
    CHANNEL_MAX,
    colorize_julia,
    colorize_newton,
    julia_color,
    newton_color,
    to_8bit,
)


@pytest.mark.parametrize(
    "root, expected",
    [
        (1 + 0j, (60000, 0, 0, CHANNEL_MAX)),
        (-1 + 0j, (0, 0, 60000, CHANNEL_MAX)),
        (1j, (0, 60000, 0, CHANNEL_MAX)),
        (-1j, (60000, 0, 60000, CHANNEL_MAX)),
    ],
)
def test_newton_root_hues(root: complex, expected: tuple[int, int, int, int]) -> None:
    assert newton_color(Converged(root, 0)) == expected


def test_newton_brightness_falls_with_iterations_and_clamps() -> None:
    assert newton_color(Converged(1 + 0j, 10)) == (40000, 0, 0, CHANNEL_MAX)
    assert newton_color(Converged(1 + 0j, 40)) == (0, 0, 0, CHANNEL_MAX)


def test_newton_unsettled_points_are_opaque_black() -> None:
    assert newton_color(Unconverged()) == BLACK
    assert newton_color(Singular(0)) == BLACK
    assert BLACK[3] == CHANNEL_MAX


def test_julia_ramp() -> None:
    assert julia_color(Bounded()) == BLACK
    assert julia_color(Escaped(0)) == (0, 0, 60000, CHANNEL_MAX)
    assert julia_color(Escaped(10)) == (0, 20000, 40000, CHANNEL_MAX)
    assert julia_color(Escaped(40)) == (0, CHANNEL_MAX, 0, CHANNEL_MAX)


def test_julia_more_iterations_are_greener() -> None:
    greens = [julia_color(Escaped(i))[1] for i in range(40)]
    assert greens == sorted(greens)


def test_colorize_newton_matches_scalar_colors() -> None:
    roots = np.array([[0, 1, 2, 3], [UNCONVERGED, SINGULAR, 0, 3]])
    iterations = np.array([[0, 5, 10, 29], [0, 0, 31, 2]])
    raster = colorize_newton(roots, iterations)

    assert raster.shape == (2, 4, 4)
    assert raster.dtype == np.uint8
    expected_results = [
        [Converged(1 + 0j, 0), Converged(-1 + 0j, 5), Converged(1j, 10), Converged(-1j, 29)],
        [Unconverged(), Singular(0), Converged(1 + 0j, 31), Converged(-1j, 2)],
    ]
    for row, results in enumerate(expected_results):
        for col, result in enumerate(results):
            assert tuple(raster[row, col]) == to_8bit(newton_color(result))


def test_colorize_julia_matches_scalar_colors() -> None:
    escape = np.array([[BOUNDED, 0, 1], [15, 29, 35]])
    raster = colorize_julia(escape)

    for (row, col), code in np.ndenumerate(escape):
        result = Bounded() if code == BOUNDED else Escaped(int(code))
        assert tuple(raster[row, col]) == to_8bit(julia_color(result))


def test_colorize_julia_with_colormap_keeps_interior_black() -> None:
    escape = np.array([[BOUNDED, 3], [50, 399]])
    raster = colorize_julia(escape, colormap="viridis", max_iterations=400)

    assert raster.shape == (2, 2, 4)
    assert tuple(raster[0, 0]) == (0, 0, 0, 255)
    assert (raster[..., 3] == 255).all()
    assert tuple(raster[0, 1]) != tuple(raster[1, 1])
