from __future__ import annotations

import numpy as np
import pytest

from ifs.kernel import (
    BOUNDED,
    NEWTON_ROOTS,
    SINGULAR,
    UNCONVERGED,
    Bounded,
    Converged,
    Escaped,
    Singular,
    Unconverged,
    decode_julia,
    decode_newton,
    julia_escape,
    julia_grid,
    newton_grid,
    newton_orbit,
)


@pytest.mark.parametrize("root", NEWTON_ROOTS)
def test_newton_converges_to_nearby_root(root: complex) -> None:
    result = newton_orbit(root + 1e-6)
    assert isinstance(result, Converged)
    assert result.root == root
    assert result.iteration < 10


def test_newton_close_to_one_converges_quickly() -> None:
    assert newton_orbit(complex(1 + 1e-6, 0)) == Converged(1 + 0j, 1)


def test_newton_starting_on_a_root_converges_at_iteration_zero() -> None:
    assert newton_orbit(1j) == Converged(1j, 0)


def test_newton_zero_is_singular() -> None:
    assert newton_orbit(0) == Singular(0)


def test_newton_budget_exhausted_is_unconverged() -> None:
    assert newton_orbit(2 + 0j, max_iterations=1) == Unconverged()


def test_julia_escape_reports_first_iteration_over_bailout() -> None:
    # 0 -> 1 -> 2 -> 5 -> 26: the fourth iterate (index 3) is the first beyond 10.
    assert julia_escape(0, 1) == Escaped(3)
    assert julia_escape(0, 1, bailout=4.0) == Escaped(2)


def test_julia_escape_is_minimal() -> None:
    c = complex(0.5, 0.5)
    z0 = complex(0.1, -0.2)
    result = julia_escape(z0, c)
    assert isinstance(result, Escaped)

    z = z0
    for i in range(result.iteration):
        z = z * z + c
        assert abs(z) <= 10.0, f"iterate {i} already exceeded the bailout"


def test_julia_escape_is_deterministic() -> None:
    args = (complex(-0.4, 0.6), complex(-0.8, 0.156))
    assert julia_escape(*args) == julia_escape(*args)


def test_julia_origin_bounded_for_dendrite_parameter() -> None:
    assert julia_escape(0, complex(-0.8, 0.156), max_iterations=200) == Bounded()


def test_julia_origin_for_dendrite_parameter_escapes_late_with_full_budget() -> None:
    # c = -0.8 + 0.156i lies just outside the Mandelbrot set; the orbit of 0 lingers
    # for a long time before escaping.
    result = julia_escape(0, complex(-0.8, 0.156))
    assert isinstance(result, Escaped)
    assert result.iteration > 200


def test_decoders_map_codes_to_results() -> None:
    assert decode_julia(BOUNDED) == Bounded()
    assert decode_julia(7) == Escaped(7)
    assert decode_newton(UNCONVERGED, 0) == Unconverged()
    assert decode_newton(SINGULAR, 3) == Singular(3)
    assert decode_newton(2, 5) == Converged(1j, 5)


def test_julia_grid_matches_scalar_kernel() -> None:
    xs = -2.0 + 0.25 * np.arange(16)
    points = xs[None, :] + 1j * xs[:, None]
    c = complex(-0.4, 0.6)

    escape = julia_grid(points, c)
    expected = np.array([[julia_escape(z, c) for z in row] for row in points], dtype=object)
    decoded = np.array([[decode_julia(code) for code in row] for row in escape], dtype=object)

    assert escape.shape == points.shape
    assert (decoded == expected).all()


def test_newton_grid_matches_scalar_kernel() -> None:
    xs = -2.0 + 0.25 * np.arange(16)
    points = xs[None, :] + 1j * xs[:, None]

    roots, iterations = newton_grid(points)
    decoded = np.array(
        [[decode_newton(r, n) for r, n in zip(root_row, iter_row)] for root_row, iter_row in zip(roots, iterations)],
        dtype=object,
    )
    expected = np.array([[newton_orbit(z) for z in row] for row in points], dtype=object)

    assert (decoded == expected).all()


def test_newton_grid_flags_zero_as_singular() -> None:
    roots, iterations = newton_grid(np.array([0j, 1 + 0j, -1j]))
    assert roots.tolist() == [SINGULAR, 0, 3]
    assert iterations.tolist() == [0, 0, 0]
