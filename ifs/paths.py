"""Parameter paths: the value of c used by each frame of a Julia animation."""

from __future__ import annotations

import cmath
import math
from types import MappingProxyType
from typing import Callable, Mapping

from .errors import InvalidPathName

ParameterPath = Callable[[int, int], complex]

ANGOR_START = -1.45
ANGOR_WIDTH = 0.2
WABBIT_CENTER = complex(0.3887, -0.2158)
WABBIT_WIDTH = 0.06
EXP_RADIUS = 0.7885


def _triangle(index: int, total: int, width: float) -> float:
    """Offset rising linearly to ``width`` over the first half of the frames and falling back over the second."""

    half = total // 2
    if half == 0:
        return 0.0
    delta = width / half
    if index < half:
        return index * delta
    return width - (index - half) * delta


def angor(index: int, total: int) -> complex:
    """Sweep c along the real axis from -1.45 to -1.25 and back."""

    return complex(ANGOR_START + _triangle(index, total, ANGOR_WIDTH), 0.0)


def wabbit(index: int, total: int) -> complex:
    """Move c diagonally away from .3887 - .2158i and back."""

    alpha = _triangle(index, total, WABBIT_WIDTH)
    return complex(WABBIT_CENTER.real + alpha, WABBIT_CENTER.imag + alpha)


def exp_path(index: int, total: int) -> complex:
    """Move c once around the circle .7885 e^(i alpha)."""

    return EXP_RADIUS * cmath.exp(complex(0.0, index * 2 * math.pi / total))


PARAMETER_PATHS: Mapping[str, ParameterPath] = MappingProxyType(
    {
        "Angor": angor,
        "Exp": exp_path,
        "Wabbit": wabbit,
    }
)


def get_path(name: str) -> ParameterPath:
    try:
        return PARAMETER_PATHS[name]
    except (KeyError, TypeError):
        raise InvalidPathName(name, tuple(PARAMETER_PATHS)) from None


def path_parameters(name: str, total: int) -> tuple[complex, ...]:
    """Parameters for frames ``0 .. total - 1`` along the named path."""

    path = get_path(name)
    return tuple(path(index, total) for index in range(total))
