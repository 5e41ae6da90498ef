# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Gradient Tools
==============
Builds lists of packed IPT_HQ colors that blend smoothly from one color to
another, or along a chain of colors.

Blending happens byte-wise in IPT_HQ (see ``lerp_float_colors``), which is
close to perceptually even. Every intermediate color is passed through
``limit_to_gamut``, since a straight line in IPT can leave the RGB gamut.

The ``interpolation`` argument reshapes progress along the gradient: any
callable taking and returning a float in 0..1 will do. ``linear`` is the
default.
"""

from typing import Callable, Final, List, MutableSequence, Sequence, TypeAlias

from tinct_colortools import limit_to_gamut
from tinct_floatcolors import lerp_float_colors

__all__ = [
    "Interpolation",
    "linear",
    "smooth",
    "make_gradient",
    "append_gradient",
    "append_gradient_chain",
    "append_partial_gradient",
]

Interpolation: TypeAlias = Callable[[float], float]

_SPLIT_EPSILON: Final[float] = 1e-6


def linear(a: float) -> float:
    return a


def smooth(a: float) -> float:
    """Hermite smoothstep; eases in and out of each end."""
    return a * a * (3.0 - 2.0 * a)


def make_gradient(start: float, end: float, steps: int,
                  interpolation: Interpolation = linear) -> List[float]:
    """
    Creates a new list of ``steps`` colors from ``start`` to ``end``.

    Both endpoints are included. ``steps <= 0`` gives an empty list and
    ``steps == 1`` gives ``[start]``.
    """
    return append_gradient([], start, end, steps, interpolation)


def append_gradient(appending: MutableSequence[float], start: float, end: float, steps: int,
                    interpolation: Interpolation = linear) -> MutableSequence[float]:
    """
    Appends ``steps`` colors from ``start`` to ``end`` (both included).

    Returns:
        ``appending``, for chaining.
    """
    if steps <= 0:
        return appending
    if steps == 1:
        appending.append(start)
        return appending
    append_partial_gradient(appending, start, end, steps - 1, interpolation)
    appending.append(end)
    return appending


def append_gradient_chain(appending: MutableSequence[float], steps: int,
                          chain: Sequence[float],
                          interpolation: Interpolation = linear) -> MutableSequence[float]:
    """
    Appends ``steps`` colors that pass through every color in ``chain``.

    The chain is split into equal segments; the last color of the chain is
    always the last color appended. An empty chain appends nothing and a
    single-color chain appends only that color.
    """
    if steps <= 0 or not chain:
        return appending
    if steps == 1 or len(chain) == 1:
        appending.append(chain[0])
        return appending
    splits = len(chain) - 1
    step = 1.0 / steps
    change = 0.0
    for _ in range(steps - 1):
        splint = min(max(interpolation(change) * splits, 0.0), splits - _SPLIT_EPSILON)
        idx = int(splint)
        appending.append(limit_to_gamut(
            lerp_float_colors(chain[idx], chain[idx + 1], splint - idx)))
        change += step
    appending.append(chain[splits])
    return appending


def append_partial_gradient(appending: MutableSequence[float], start: float, end: float,
                            steps: int,
                            interpolation: Interpolation = linear) -> MutableSequence[float]:
    """
    Appends ``steps`` colors from ``start`` toward, but not including, ``end``.

    Useful for joining gradients without repeating the shared color.
    """
    if steps <= 0:
        return appending
    if steps == 1:
        appending.append(start)
        return appending
    step = 1.0 / steps
    change = 0.0
    for _ in range(steps):
        appending.append(limit_to_gamut(lerp_float_colors(start, end, interpolation(change))))
        change += step
    return appending
