"""Iteration kernels for Newton's method on z**4 - 1 and the family z -> z**2 + c."""

from __future__ import annotations

import cmath
from dataclasses import dataclass
from typing import Union

import numpy as np
import tensorflow as tf

NEWTON_ITERATIONS = 400
NEWTON_TOLERANCE = 1e-16
# Checked in this order; the first root within tolerance wins.
NEWTON_ROOTS = (complex(1, 0), complex(-1, 0), complex(0, 1), complex(0, -1))

JULIA_ITERATIONS = 400
JULIA_BAILOUT = 10.0

# Codes used by the array kernels.
UNCONVERGED = -1
SINGULAR = -2
BOUNDED = -1


@dataclass(frozen=True)
class Converged:
    """Newton iterates came within tolerance of ``root`` at 0-based ``iteration``."""

    root: complex
    iteration: int


@dataclass(frozen=True)
class Unconverged:
    """Newton iterates never came within tolerance of a root."""


@dataclass(frozen=True)
class Singular:
    """The Newton update was undefined (z**3 == 0) or produced a non-finite iterate."""

    iteration: int


@dataclass(frozen=True)
class Escaped:
    """The orbit modulus first exceeded the bailout at 0-based ``iteration``."""

    iteration: int


@dataclass(frozen=True)
class Bounded:
    """The orbit stayed within the bailout for the whole iteration budget."""


NewtonResult = Union[Converged, Unconverged, Singular]
JuliaResult = Union[Escaped, Bounded]


def newton_orbit(
    z: complex,
    max_iterations: int = NEWTON_ITERATIONS,
    tolerance: float = NEWTON_TOLERANCE,
) -> NewtonResult:
    """Classify ``z`` by the fourth root of unity Newton's method converges to."""

    z = complex(z)
    for i in range(max_iterations):
        cube = z * z * z
        if cube == 0:
            return Singular(i)
        z -= (z - 1 / cube) / 4
        if not cmath.isfinite(z):
            return Singular(i)
        for root in NEWTON_ROOTS:
            if abs(z - root) < tolerance:
                return Converged(root, i)
    return Unconverged()


def julia_escape(
    z: complex,
    c: complex,
    max_iterations: int = JULIA_ITERATIONS,
    bailout: float = JULIA_BAILOUT,
) -> JuliaResult:
    """Iterate z -> z**2 + c and report the first iteration whose modulus exceeds ``bailout``."""

    z = complex(z)
    c = complex(c)
    for i in range(max_iterations):
        z = z * z + c
        if abs(z) > bailout:
            return Escaped(i)
    return Bounded()


def decode_newton(root_code: int, iteration: int) -> NewtonResult:
    """Turn one cell of the :func:`newton_grid` output into a result object."""

    root_code = int(root_code)
    if root_code == UNCONVERGED:
        return Unconverged()
    if root_code == SINGULAR:
        return Singular(int(iteration))
    return Converged(NEWTON_ROOTS[root_code], int(iteration))


def decode_julia(escape_code: int) -> JuliaResult:
    """Turn one cell of the :func:`julia_grid` output into a result object."""

    escape_code = int(escape_code)
    if escape_code == BOUNDED:
        return Bounded()
    return Escaped(escape_code)


@tf.function
def _julia_step(
    i: tf.Tensor,
    zs: tf.Tensor,
    c: tf.Tensor,
    escape: tf.Tensor,
    active: tf.Tensor,
    bailout: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single z -> z**2 + c step for points that have not escaped."""

    zs_new = zs * zs + c
    zs = tf.where(active, zs_new, zs)
    escaped = tf.logical_and(active, tf.abs(zs) > bailout)
    escape = tf.where(escaped, i, escape)
    return zs, escape, tf.logical_and(active, tf.logical_not(escaped))


@tf.function
def _julia_run(zs: tf.Tensor, c: tf.Tensor, max_iterations: tf.Tensor, bailout: tf.Tensor) -> tf.Tensor:
    """Iterate the quadratic family using a TensorFlow while loop."""

    i = tf.constant(0, dtype=tf.int32)
    escape = tf.fill(tf.shape(zs), tf.constant(BOUNDED, dtype=tf.int32))
    active = tf.ones_like(escape, tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, escape: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, escape: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, escape, active = _julia_step(i, zs, c, escape, active, bailout)
        return i + 1, zs, escape, active

    _, _, escape, _ = tf.while_loop(cond, body, (i, zs, escape, active))
    return escape


@tf.function
def _newton_step(
    i: tf.Tensor,
    zs: tf.Tensor,
    roots: tf.Tensor,
    iterations: tf.Tensor,
    active: tf.Tensor,
    tolerance: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single Newton update for points that have not settled."""

    one = tf.constant(1.0, dtype=tf.complex128)
    four = tf.constant(4.0, dtype=tf.complex128)

    cube = zs * zs * zs
    singular = tf.logical_and(active, tf.equal(cube, tf.zeros_like(cube)))
    active = tf.logical_and(active, tf.logical_not(singular))
    safe_cube = tf.where(active, cube, tf.ones_like(cube))
    zs = tf.where(active, zs - (zs - one / safe_cube) / four, zs)

    finite = tf.logical_and(tf.math.is_finite(tf.math.real(zs)), tf.math.is_finite(tf.math.imag(zs)))
    singular = tf.logical_or(singular, tf.logical_and(active, tf.logical_not(finite)))
    active = tf.logical_and(active, finite)

    matched = tf.fill(tf.shape(roots), tf.constant(UNCONVERGED, dtype=tf.int32))
    for k, root in enumerate(NEWTON_ROOTS):
        distance = tf.abs(zs - tf.constant(root, dtype=tf.complex128))
        hit = tf.logical_and(tf.logical_and(active, matched < 0), distance < tolerance)
        matched = tf.where(hit, tf.constant(k, dtype=tf.int32), matched)
    converged = matched >= 0

    roots = tf.where(singular, tf.constant(SINGULAR, dtype=tf.int32), roots)
    roots = tf.where(converged, matched, roots)
    settled = tf.logical_or(singular, converged)
    iterations = tf.where(settled, i, iterations)
    return zs, roots, iterations, tf.logical_and(active, tf.logical_not(converged))


@tf.function
def _newton_run(zs: tf.Tensor, max_iterations: tf.Tensor, tolerance: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate Newton's method using a TensorFlow while loop."""

    i = tf.constant(0, dtype=tf.int32)
    roots = tf.fill(tf.shape(zs), tf.constant(UNCONVERGED, dtype=tf.int32))
    iterations = tf.zeros_like(roots)
    active = tf.ones_like(roots, tf.bool)

    def cond(i, zs, roots, iterations, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zs, roots, iterations, active):
        zs, roots, iterations, active = _newton_step(i, zs, roots, iterations, active, tolerance)
        return i + 1, zs, roots, iterations, active

    _, _, roots, iterations, _ = tf.while_loop(cond, body, (i, zs, roots, iterations, active))
    return roots, iterations


def _as_complex_tensor(points) -> tf.Tensor:
    if isinstance(points, tf.Tensor):
        return tf.cast(points, tf.complex128)
    return tf.convert_to_tensor(np.asarray(points, dtype=np.complex128))


def julia_grid(
    points: np.ndarray,
    c: complex,
    max_iterations: int = JULIA_ITERATIONS,
    bailout: float = JULIA_BAILOUT,
) -> np.ndarray:
    """Vectorized :func:`julia_escape`; returns escape iterations, ``BOUNDED`` where none."""

    zs = _as_complex_tensor(points)
    escape = _julia_run(
        zs,
        tf.constant(complex(c), dtype=tf.complex128),
        tf.constant(max_iterations, dtype=tf.int32),
        tf.constant(bailout, dtype=tf.float64),
    )
    return escape.numpy()


def newton_grid(
    points: np.ndarray,
    max_iterations: int = NEWTON_ITERATIONS,
    tolerance: float = NEWTON_TOLERANCE,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized :func:`newton_orbit`; returns ``(roots, iterations)`` code arrays."""

    zs = _as_complex_tensor(points)
    roots, iterations = _newton_run(
        zs,
        tf.constant(max_iterations, dtype=tf.int32),
        tf.constant(tolerance, dtype=tf.float64),
    )
    return roots.numpy(), iterations.numpy()
