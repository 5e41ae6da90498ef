# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

IPT_HQ Color Tools
==================
Encoding, decoding and editing of colors packed into the IPT_HQ space.

IPT_HQ is a variant of Ebner and Fairchild's IPT space tuned for 8-bit
storage: RGB is linearised with a plain square (gamma 2.0) instead of the
sRGB curve, taken to an LMS cone space, shaped with an exponent of 0.43
and rotated into

* **I** (intensity): lightness, 0 is black and 1 is white;
* **P** (protan): green (low) to red (high), 0.5 is neutral;
* **T** (tritan): blue (low) to yellow (high), 0.5 is neutral.

Each channel is stored in one byte of a packed float together with a
7-bit alpha (see ``tinct_floatcolors``). Because P and T share a square,
many (I, P, T) combinations fall outside the RGB gamut; ``in_gamut`` and
``limit_to_gamut`` deal with those.

The module has two layers:

1. Scalar functions working on a single packed ``float``. These are the
   building blocks used by the palettes and gradient tools.
2. ``IPTHQEngine``, a static class with Numba kernels that apply the
   same codec to whole arrays of packed colors.

Design Notes:
- All scalar math runs in float64. Channel bytes therefore agree with a
  float32 reference to within one step.
- Internal repacking after a chroma change rounds to the nearest byte so
  that an unchanged channel keeps its exact value.
- ``set_strict_ieee(True)`` swaps the batch kernels to ``fastmath=False``
  builds, which is useful when comparing against the scalar path.

References:
    - Ebner, F., Fairchild, M. D. (1998). "Development and Testing of a
      Color Space (IPT) with Improved Hue Uniformity".
"""

import functools
import math
from typing import Any, Callable, Dict, Final, Optional, Tuple, TypeAlias

import numpy as np
import numpy.typing
from numba import njit

from tinct_floatcolors import (
    float_to_raw_int_bits,
    int_bits_to_float,
    packed_to_bits,
    bits_to_packed,
    hsl_to_rgba8888,
    rgba8888_from_hex,
)

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",
    "ArrayBits",

    # --- Constants ---
    "FORWARD_EXPONENT",
    "REVERSE_EXPONENT",
    "GAMUT_ATTEMPTS",

    # --- Configuration ---
    "set_strict_ieee",

    # --- Packing / Conversion ---
    "ipt",
    "from_rgba8888",
    "from_rgba",
    "from_hex",
    "to_rgba8888",
    "to_rgba",
    "to_hex",

    # --- Channel Access ---
    "red", "green", "blue", "alpha",
    "red_int", "green_int", "blue_int", "alpha_int",
    "intensity", "protan", "tritan",
    "hue", "saturation", "lightness",
    "describe",

    # --- Editing ---
    "float_get_hsl",
    "to_edited_float",
    "lighten", "darken",
    "protan_up", "protan_down",
    "tritan_up", "tritan_down",
    "blot", "fade",
    "dullen", "enrich",
    "inverse_lightness",
    "differentiate_lightness",
    "offset_lightness",
    "lessen_change",
    "random_edit",
    "edit_ipt",

    # --- Gamut ---
    "in_gamut",
    "limit_to_gamut",
    "random_color",

    # --- Batch Engine ---
    "handle_packed",
    "IPTHQEngine",
]

# =============================================================================
# 1. CONSTANTS & CONFIGURATION
# =============================================================================

ArrayFloat: TypeAlias = np.typing.NDArray[np.floating]
ArrayBits: TypeAlias = np.typing.NDArray[np.uint32]

FORWARD_EXPONENT: Final[float] = 0.43
"""Power applied to LMS when encoding."""

REVERSE_EXPONENT: Final[float] = 2.3256
"""Power applied to LMS when decoding (close to 1 / 0.43)."""

GAMUT_ATTEMPTS: Final[int] = 32
"""Number of chroma reduction steps tried by ``limit_to_gamut``."""

_MASK64: Final[int] = 0xFFFFFFFFFFFFFFFF
_ALPHA_BITS: Final[int] = 0xFE000000
_INV_254: Final[float] = 1.0 / 254.0
_INV_2_22: Final[float] = 2.0 ** -22

_STRICT_IEEE: bool = False

def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 batch kernels.

    Only ``IPTHQEngine`` is affected; scalar functions are plain Python.

    Args:
        enabled: If True, use ``fastmath=False`` kernels.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)


# =============================================================================
# 2. SCALAR TRANSFORM PRIMITIVES
# =============================================================================

def _unpack(decoded: int) -> Tuple[float, float, float]:
    """Bits -> (i in 0..1, p in -1..1, t in -1..1)."""
    return (
        (decoded & 0xFF) / 255.0,
        (((decoded >> 8) & 0xFF) - 127.5) / 127.5,
        (((decoded >> 16) & 0xFF) - 127.5) / 127.5,
    )


def _reverse_transform(component: float) -> float:
    return math.copysign(abs(component) ** REVERSE_EXPONENT, component)


def _linear_rgb(i: float, p: float, t: float) -> Tuple[float, float, float]:
    """Unclamped linear RGB for centred IPT coordinates."""
    l = _reverse_transform(i + 0.097569 * p + 0.205226 * t)
    m = _reverse_transform(i - 0.11388 * p + 0.133217 * t)
    s = _reverse_transform(i + 0.032615 * p - 0.67689 * t)
    return (
        5.432622 * l - 4.67910 * m + 0.246257 * s,
        -1.10517 * l + 2.311198 * m - 0.20588 * s,
        0.028104 * l - 0.19466 * m + 1.166325 * s,
    )


def _gamma_rgb(i: float, p: float, t: float) -> Tuple[float, float, float]:
    """Display RGB in 0..1 for centred IPT coordinates."""
    r, g, b = _linear_rgb(i, p, t)
    return (
        math.sqrt(min(max(r, 0.0), 1.0)),
        math.sqrt(min(max(g, 0.0), 1.0)),
        math.sqrt(min(max(b, 0.0), 1.0)),
    )


def _encode_bits(r: float, g: float, b: float, alpha_bits: int) -> int:
    """Display RGB (0..1) plus ready-made alpha bits -> packed bits."""
    r *= r
    g *= g
    b *= b
    l = (0.313921 * r + 0.639468 * g + 0.0465970 * b) ** FORWARD_EXPONENT
    m = (0.151693 * r + 0.748209 * g + 0.1000044 * b) ** FORWARD_EXPONENT
    s = (0.017753 * r + 0.109468 * g + 0.8729690 * b) ** FORWARD_EXPONENT
    i_byte = min(max(int((0.4000 * l + 0.4000 * m + 0.2000 * s) * 255.999), 0), 255)
    p_byte = min(max(int((2.2275 * l - 2.4255 * m + 0.1980 * s + 0.5) * 255.999), 0), 255)
    t_byte = min(max(int((0.4028 * l + 0.1786 * m - 0.5814 * s + 0.5) * 255.999), 0), 255)
    return (alpha_bits & _ALPHA_BITS) | (t_byte << 16) | (p_byte << 8) | i_byte


def _rgb_in_range(r: float, g: float, b: float) -> bool:
    return 0.0 <= r <= 1.0 and 0.0 <= g <= 1.0 and 0.0 <= b <= 1.0


def _byte(value: float) -> int:
    return min(max(int(value * 255.0 + 0.5), 0), 255)


def _quantize(c: float) -> float:
    """Snaps a centred chroma value to the nearest storable byte."""
    return (_byte(c * 0.5 + 0.5) - 127.5) / 127.5


def _shrink_chroma(i: float, p: float, t: float) -> Tuple[float, float]:
    """
    Pulls centred (p, t) toward neutral until (i, p, t) decodes in gamut.

    Tries ``GAMUT_ATTEMPTS`` evenly spaced fractions of the original chroma,
    ending at neutral. Candidates are checked after snapping to bytes, so
    the packed result is the one that was tested.
    """
    p2, t2 = _quantize(p), _quantize(t)
    for attempt in range(GAMUT_ATTEMPTS - 1, -1, -1):
        if _rgb_in_range(*_linear_rgb(i, p2, t2)):
            break
        progress = attempt / GAMUT_ATTEMPTS
        p2 = _quantize(p * progress)
        t2 = _quantize(t * progress)
    return p2, t2


def _repack(i: float, p: float, t: float, alpha_bits: int) -> float:
    """Centred (i, p, t) -> packed float, rounding each channel."""
    return int_bits_to_float(
        (alpha_bits & _ALPHA_BITS)
        | (_byte(t * 0.5 + 0.5) << 16)
        | (_byte(p * 0.5 + 0.5) << 8)
        | _byte(i)
    )


def _alpha_bits(a: float) -> int:
    return (int(a * 255.0) << 24) & _ALPHA_BITS


def _hsl_parts(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """(hue, chroma, lightness) from display RGB, matching ``hue``/``lightness``."""
    if g < b:
        x, y, z, w = b, g, -1.0, 2.0 / 3.0
    else:
        x, y, z, w = g, b, 0.0, -1.0 / 3.0
    if r < x:
        z = w
        w = r
    else:
        w = x
        x = r
    d = x - min(w, y)
    return (
        abs(z + (w - y) / (6.0 * d + 1e-10)),
        d,
        x * (1.0 - 0.5 * d / (x + 1e-10)),
    )


# =============================================================================
# 3. PACKING & CONVERSION
# =============================================================================

def ipt(intens: float, protan: float, tritan: float, alpha: float) -> float:
    """
    Packs IPT_HQ channels (each 0..1) into a packed float.

    Values are truncated and masked, so out-of-range inputs wrap instead of
    raising. Protan and tritan are neutral at 0.5.
    """
    return int_bits_to_float(
        ((int(alpha * 255) << 24) & _ALPHA_BITS)
        | ((int(tritan * 255) << 16) & 0xFF0000)
        | ((int(protan * 255) << 8) & 0xFF00)
        | (int(intens * 255) & 0xFF)
    )


def from_rgba8888(rgba: int) -> float:
    """Converts an RGBA8888 int (``0xRRGGBBAA``) to a packed IPT_HQ float."""
    return int_bits_to_float(_encode_bits(
        ((rgba >> 24) & 0xFF) / 255.0,
        ((rgba >> 16) & 0xFF) / 255.0,
        ((rgba >> 8) & 0xFF) / 255.0,
        (rgba & 0xFE) << 24,
    ))


def from_rgba(r: float, g: float, b: float, a: float) -> float:
    """Converts RGBA channels (each 0..1) to a packed IPT_HQ float."""
    return int_bits_to_float(_encode_bits(r, g, b, _alpha_bits(a)))


def from_hex(code: str) -> float:
    """Converts ``RRGGBBAA`` / ``#RRGGBB`` text to a packed IPT_HQ float."""
    return from_rgba8888(rgba8888_from_hex(code))


def to_rgba8888(packed: float) -> int:
    """
    Converts a packed IPT_HQ float to an RGBA8888 int.

    The low alpha bit is copied from the high one, so opaque stays 0xFF.
    """
    decoded = float_to_raw_int_bits(packed)
    r, g, b = _gamma_rgb(*_unpack(decoded))
    return (
        (int(r * 255.999) << 24)
        | (int(g * 255.999) << 16)
        | (int(b * 255.999) << 8)
        | ((decoded & _ALPHA_BITS) >> 24)
        | (decoded >> 31)
    )


def to_rgba(packed: float) -> Tuple[float, float, float, float]:
    """Returns the ``(r, g, b, a)`` channels of a packed color, each 0..1."""
    decoded = float_to_raw_int_bits(packed)
    r, g, b = _gamma_rgb(*_unpack(decoded))
    return r, g, b, ((decoded & _ALPHA_BITS) >> 24) * _INV_254


def to_hex(packed: float) -> str:
    """Returns the decoded color as an ``RRGGBBAA`` string."""
    return f"{to_rgba8888(packed):08X}"


# =============================================================================
# 4. CHANNEL ACCESS
# =============================================================================

def red(packed: float) -> float:
    return _gamma_rgb(*_unpack(float_to_raw_int_bits(packed)))[0]

def green(packed: float) -> float:
    return _gamma_rgb(*_unpack(float_to_raw_int_bits(packed)))[1]

def blue(packed: float) -> float:
    return _gamma_rgb(*_unpack(float_to_raw_int_bits(packed)))[2]

def alpha(packed: float) -> float:
    """Opacity from 0 to 1 (seven bits of precision)."""
    return ((float_to_raw_int_bits(packed) & _ALPHA_BITS) >> 24) * _INV_254

def red_int(packed: float) -> int:
    return int(red(packed) * 255.999)

def green_int(packed: float) -> int:
    return int(green(packed) * 255.999)

def blue_int(packed: float) -> int:
    return int(blue(packed) * 255.999)

def alpha_int(packed: float) -> int:
    """Alpha as an even int from 0 to 254."""
    return (float_to_raw_int_bits(packed) & _ALPHA_BITS) >> 24

def intensity(packed: float) -> float:
    """The I channel, 0 (black) to 1 (white)."""
    return (float_to_raw_int_bits(packed) & 0xFF) / 255.0

def protan(packed: float) -> float:
    """The P channel, 0 (green) to 1 (red), 0.5 neutral."""
    return ((float_to_raw_int_bits(packed) >> 8) & 0xFF) / 255.0

def tritan(packed: float) -> float:
    """The T channel, 0 (blue) to 1 (yellow), 0.5 neutral."""
    return ((float_to_raw_int_bits(packed) >> 16) & 0xFF) / 255.0


def hue(packed: float) -> float:
    """
    HSL-style hue of the decoded color, 0 to 1 (red, yellow, green, ...).

    Reds sit near both ends of the range.
    """
    return _hsl_parts(*_gamma_rgb(*_unpack(float_to_raw_int_bits(packed))))[0]


def saturation(packed: float) -> float:
    """
    Chroma of the decoded RGB color (max - min), 0 to 1.

    Colors with intensity within 0.005 of black or white report 0.
    """
    decoded = float_to_raw_int_bits(packed)
    i, p, t = _unpack(decoded)
    if abs(i - 0.5) > 0.495:
        return 0.0
    return _hsl_parts(*_gamma_rgb(i, p, t))[1]


def lightness(packed: float) -> float:
    """HSL-style lightness of the decoded color, 0 to 1."""
    return _hsl_parts(*_gamma_rgb(*_unpack(float_to_raw_int_bits(packed))))[2]


def describe(packed: float) -> Dict[str, Any]:
    """Collects everything known about a packed color, for display or tests."""
    return {
        "rgba8888": to_hex(packed),
        "intensity": intensity(packed),
        "protan": protan(packed),
        "tritan": tritan(packed),
        "alpha": alpha(packed),
        "hue": hue(packed),
        "saturation": saturation(packed),
        "lightness": lightness(packed),
        "bits": f"{float_to_raw_int_bits(packed):08X}",
    }


# =============================================================================
# 5. EDITING
# =============================================================================

def float_get_hsl(hue: float, saturation: float, lightness: float, opacity: float) -> float:
    """
    Builds a packed IPT_HQ color from HSL-style hue, saturation and lightness.

    Lightness at or below 0.001 gives black with the requested opacity.
    """
    if lightness <= 0.001:
        return int_bits_to_float(_alpha_bits(opacity) | 0x7F7F00)
    return from_rgba8888(hsl_to_rgba8888(hue, saturation, lightness, opacity))


def to_edited_float(basis: float, hue: float, saturation: float,
                    light: float, opacity: float) -> float:
    """
    Shifts a color in HSL terms and returns the edited packed color.

    ``hue`` is added and wraps; ``saturation`` is added to the HSL
    saturation; ``light`` and ``opacity`` are added to intensity and alpha.
    All results are clamped. A resulting intensity at or below 0.001 gives
    black.
    """
    e = float_to_raw_int_bits(basis)
    i = min(max(light + (e & 0xFF) / 255.0, 0.0), 1.0)
    opacity = min(max(opacity + ((e >> 24) & 0xFE) * _INV_254, 0.0), 1.0)
    if i <= 0.001:
        return int_bits_to_float(_alpha_bits(opacity) | 0x808000)
    p = (((e >> 7) & 0x1FE) - 0xFF) / 255.0
    t = (((e >> 15) & 0x1FE) - 0xFF) / 255.0
    r, g, b = _gamma_rgb(i, p, t)
    h, _, lum = _hsl_parts(r, g, b)
    x = max(r, g, b)
    hue += h + 1.0
    saturation += (x - lum) / (min(lum, 1.0 - lum) + 1e-10)
    return from_rgba8888(hsl_to_rgba8888(
        hue - math.floor(hue), min(max(saturation, 0.0), 1.0), lum, opacity))


def lighten(start: float, change: float) -> float:
    """Moves intensity ``change`` of the way toward white; other channels kept."""
    s = float_to_raw_int_bits(start)
    i = s & 0xFF
    return int_bits_to_float((int(i + (0xFF - i) * change) & 0xFF) | (s & 0xFEFFFF00))


def darken(start: float, change: float) -> float:
    """Moves intensity ``change`` of the way toward black; other channels kept."""
    s = float_to_raw_int_bits(start)
    i = s & 0xFF
    return int_bits_to_float((int(i * (1.0 - change)) & 0xFF) | (s & 0xFEFFFF00))


def protan_up(start: float, change: float) -> float:
    """Moves protan toward its maximum (redder)."""
    s = float_to_raw_int_bits(start)
    p = (s >> 8) & 0xFF
    return int_bits_to_float(((int(p + (0xFF - p) * change) << 8) & 0xFF00) | (s & 0xFEFF00FF))


def protan_down(start: float, change: float) -> float:
    """Moves protan toward its minimum (greener)."""
    s = float_to_raw_int_bits(start)
    p = (s >> 8) & 0xFF
    return int_bits_to_float(((int(p * (1.0 - change)) & 0xFF) << 8) | (s & 0xFEFF00FF))


def tritan_up(start: float, change: float) -> float:
    """Moves tritan toward its maximum (yellower)."""
    s = float_to_raw_int_bits(start)
    t = (s >> 16) & 0xFF
    return int_bits_to_float(((int(t + (0xFF - t) * change) << 16) & 0xFF0000) | (s & 0xFE00FFFF))


def tritan_down(start: float, change: float) -> float:
    """Moves tritan toward its minimum (bluer)."""
    s = float_to_raw_int_bits(start)
    t = (s >> 16) & 0xFF
    return int_bits_to_float(((int(t * (1.0 - change)) & 0xFF) << 16) | (s & 0xFE00FFFF))


def blot(start: float, change: float) -> float:
    """Moves alpha toward fully opaque."""
    s = float_to_raw_int_bits(start)
    opacity = (s >> 24) & 0xFE
    return int_bits_to_float(((int(opacity + (0xFE - opacity) * change) & 0xFE) << 24) | (s & 0x00FFFFFF))


def fade(start: float, change: float) -> float:
    """Moves alpha toward fully transparent."""
    s = float_to_raw_int_bits(start)
    opacity = (s >> 24) & 0xFE
    return int_bits_to_float(((int(opacity * (1.0 - change)) & 0xFE) << 24) | (s & 0x00FFFFFF))


def dullen(start: float, change: float) -> float:
    """Scales protan and tritan toward neutral by ``change`` (0 keeps, 1 grays)."""
    s = float_to_raw_int_bits(start)
    _, p, t = _unpack(s)
    keep = 1.0 - change
    return _repack((s & 0xFF) / 255.0, p * keep, t * keep, s)


def enrich(start: float, change: float) -> float:
    """Scales protan and tritan away from neutral, then limits to the gamut."""
    s = float_to_raw_int_bits(start)
    i, p, t = _unpack(s)
    grow = 1.0 + change
    p = min(max(p * grow, -1.0), 1.0)
    t = min(max(t * grow, -1.0), 1.0)
    return _repack(i, *_shrink_chroma(i, p, t), s)


def inverse_lightness(main_color: float, contrasting_color: float) -> float:
    """
    Gives ``main_color`` an intensity on the far side of ``contrasting_color``.

    If the two already differ strongly in chroma, ``main_color`` is returned
    unchanged.
    """
    bits = float_to_raw_int_bits(main_color)
    contrast_bits = float_to_raw_int_bits(contrasting_color)
    i = bits & 0xFF
    p = (bits >> 8) & 0xFF
    t = (bits >> 16) & 0xFF
    ci = contrast_bits & 0xFF
    cp = (contrast_bits >> 8) & 0xFF
    ct = (contrast_bits >> 16) & 0xFF
    if (p - cp) * (p - cp) + (t - ct) * (t - ct) >= 0x10000:
        return main_color
    new_i = i * (0.45 / 255.0) + 0.55 if ci < 128 else 0.5 - i * (0.45 / 255.0)
    return int_bits_to_float((bits & 0xFEFFFF00) | (int(new_i * 255) & 0xFF))


def differentiate_lightness(main_color: float, contrasting_color: float) -> float:
    """
    Averages the intensity of ``main_color`` with the opposite intensity of
    ``contrasting_color``, then limits to the gamut.
    """
    main = float_to_raw_int_bits(main_color)
    contrast = float_to_raw_int_bits(contrasting_color)
    return limit_to_gamut(int_bits_to_float(
        (main & 0xFEFFFF00) | ((((contrast + 128) & 0xFF) + (main & 0xFF)) >> 1)))


def offset_lightness(main_color: float) -> float:
    """Averages a color's intensity with its own opposite, pushing it toward mid."""
    decoded = float_to_raw_int_bits(main_color)
    return limit_to_gamut(int_bits_to_float(
        (decoded & 0xFEFFFF00) | ((((decoded + 128) & 0xFF) + (decoded & 0xFF)) >> 1)))


def lessen_change(color: float, fraction: float) -> float:
    """
    Moves I, P and T toward the middle (0x80) keeping only ``fraction`` of
    the distance. Alpha is unchanged.
    """
    e = float_to_raw_int_bits(color)
    ie, pe, te = e & 0xFF, (e >> 8) & 0xFF, (e >> 16) & 0xFF
    return int_bits_to_float(
        (int(0x80 + fraction * (ie - 0x80)) & 0xFF)
        | ((int(0x80 + fraction * (pe - 0x80)) & 0xFF) << 8)
        | ((int(0x80 + fraction * (te - 0x80)) & 0xFF) << 16)
        | (e & _ALPHA_BITS)
    )


def random_edit(color: float, seed: int, variance: float) -> float:
    """
    Nudges a color by a pseudo-random offset of at most ``variance`` in IPT.

    The same ``seed`` always gives the same edit. Up to 50 candidates are
    tried; if none lands in gamut the color comes back unchanged.
    """
    decoded = float_to_raw_int_bits(color)
    i, p, t = _unpack(decoded)
    limit = variance * variance
    seed &= _MASK64
    for _ in range(50):
        x = ((((seed * 0xD1B54A32D192ED03) & _MASK64) >> 41) - 4194303.5) * _INV_2_22 * variance
        y = ((((seed * 0xABC98388FB8FAC03) & _MASK64) >> 41) - 4194303.5) * _INV_2_22 * variance
        z = ((((seed * 0x8CB92BA72F3D8DD7) & _MASK64) >> 41) - 4194303.5) * _INV_2_22 * variance
        seed = (seed + 0x9E3779B97F4A7C15) & _MASK64
        if x * x + y * y + z * z > limit:
            continue
        x += i
        y = (p + y) * 0.5 + 0.5
        z = (t + z) * 0.5 + 0.5
        if in_gamut(x, y, z):
            return int_bits_to_float(
                (decoded & _ALPHA_BITS)
                | ((int(z * 255.5) << 16) & 0xFF0000)
                | ((int(y * 255.5) << 8) & 0xFF00)
                | (int(x * 255.5) & 0xFF)
            )
    return color


def edit_ipt(encoded: float,
             add_i: float = 0.0, add_p: float = 0.0, add_t: float = 0.0, add_alpha: float = 0.0,
             mul_i: float = 1.0, mul_p: float = 1.0, mul_t: float = 1.0, mul_alpha: float = 1.0) -> float:
    """
    Multiplies then adds to each channel and limits the result to the gamut.

    Protan and tritan are edited in their centred form (-1..1), so
    ``mul_p=0`` removes all red/green. Intensity and alpha use 0..1.
    """
    decoded = float_to_raw_int_bits(encoded)
    i, p, t = _unpack(decoded)
    a = (decoded >> 25) / 127.0
    i = min(max(i * mul_i + add_i, 0.0), 1.0)
    p = min(max(p * mul_p + add_p, -1.0), 1.0)
    t = min(max(t * mul_t + add_t, -1.0), 1.0)
    a = min(max(a * mul_alpha + add_alpha, 0.0), 1.0)
    return _repack(i, *_shrink_chroma(i, p, t), (int(a * 127.0 + 0.5) << 25))


# =============================================================================
# 6. GAMUT
# =============================================================================

def in_gamut(packed: float, p: Optional[float] = None, t: Optional[float] = None) -> bool:
    """
    Checks whether a color decodes to RGB without clamping.

    Call either with one packed float, or with ``(i, p, t)`` channels where
    protan and tritan are in 0..1 (0.5 neutral).
    """
    if p is None and t is None:
        return _rgb_in_range(*_linear_rgb(*_unpack(float_to_raw_int_bits(packed))))
    if p is None or t is None:
        raise TypeError("in_gamut expects either one packed color or all of (i, p, t)")
    return _rgb_in_range(*_linear_rgb(packed, (p - 0.5) * 2.0, (t - 0.5) * 2.0))


def limit_to_gamut(packed: float, p: Optional[float] = None, t: Optional[float] = None,
                   a: float = 1.0) -> float:
    """
    Returns the closest in-gamut color that keeps intensity and hue.

    Call either with one packed float, or with ``(i, p, t[, a])`` channels
    in 0..1. Chroma is reduced step by step until the color fits; an
    in-gamut packed input comes back unchanged.
    """
    if p is None and t is None:
        decoded = float_to_raw_int_bits(packed)
        i, pc, tc = _unpack(decoded)
        if _rgb_in_range(*_linear_rgb(i, pc, tc)):
            return packed
        return _repack(i, *_shrink_chroma(i, pc, tc), decoded)
    if p is None or t is None:
        raise TypeError("limit_to_gamut expects either one packed color or (i, p, t[, a])")
    i = min(max(packed, 0.0), 1.0)
    pc = min(max((p - 0.5) * 2.0, -1.0), 1.0)
    tc = min(max((t - 0.5) * 2.0, -1.0), 1.0)
    a = min(max(a, 0.0), 1.0)
    return _repack(i, *_shrink_chroma(i, pc, tc), _alpha_bits(a))


def random_color(rng: Optional[np.random.Generator] = None) -> float:
    """
    Draws a uniformly random opaque in-gamut color by rejection sampling.

    Args:
        rng: NumPy generator; a fresh ``default_rng()`` when omitted.
    """
    if rng is None:
        rng = np.random.default_rng()
    while True:
        i, p, t = rng.random(3)
        packed = ipt(float(i), float(p), float(t), 1.0)
        if in_gamut(packed):
            return packed


# =============================================================================
# 7. LOW-LEVEL BATCH KERNELS (Numba Optimized)
# =============================================================================
# Kernels take contiguous 1-D uint32 bit arrays. Each is compiled twice:
# once with fastmath and once strict (see set_strict_ieee).

def _decode_rgba_impl(bits: ArrayBits) -> ArrayFloat:
    """Packed bits -> (N, 4) display RGBA in 0..1."""
    n = bits.shape[0]
    out = np.empty((n, 4), dtype=np.float64)
    for k in range(n):
        d = np.int64(bits[k])
        i = (d & 0xFF) / 255.0
        p = (((d >> 8) & 0xFF) - 127.5) / 127.5
        t = (((d >> 16) & 0xFF) - 127.5) / 127.5
        x = i + 0.097569 * p + 0.205226 * t
        l = abs(x) ** 2.3256
        if x < 0.0:
            l = -l
        x = i - 0.11388 * p + 0.133217 * t
        m = abs(x) ** 2.3256
        if x < 0.0:
            m = -m
        x = i + 0.032615 * p - 0.67689 * t
        s = abs(x) ** 2.3256
        if x < 0.0:
            s = -s
        out[k, 0] = math.sqrt(min(max(5.432622 * l - 4.67910 * m + 0.246257 * s, 0.0), 1.0))
        out[k, 1] = math.sqrt(min(max(-1.10517 * l + 2.311198 * m - 0.20588 * s, 0.0), 1.0))
        out[k, 2] = math.sqrt(min(max(0.028104 * l - 0.19466 * m + 1.166325 * s, 0.0), 1.0))
        out[k, 3] = ((d >> 24) & 0xFE) / 254.0
    return out


def _encode_rgb_impl(rgb: ArrayFloat, alpha_bits: ArrayBits) -> ArrayBits:
    """(N, 3) display RGB + alpha bits -> packed bits."""
    n = rgb.shape[0]
    out = np.empty(n, dtype=np.uint32)
    for k in range(n):
        r = rgb[k, 0] * rgb[k, 0]
        g = rgb[k, 1] * rgb[k, 1]
        b = rgb[k, 2] * rgb[k, 2]
        l = (0.313921 * r + 0.639468 * g + 0.0465970 * b) ** 0.43
        m = (0.151693 * r + 0.748209 * g + 0.1000044 * b) ** 0.43
        s = (0.017753 * r + 0.109468 * g + 0.8729690 * b) ** 0.43
        ib = min(max(int((0.4 * l + 0.4 * m + 0.2 * s) * 255.999), 0), 255)
        pb = min(max(int((2.2275 * l - 2.4255 * m + 0.1980 * s + 0.5) * 255.999), 0), 255)
        tb = min(max(int((0.4028 * l + 0.1786 * m - 0.5814 * s + 0.5) * 255.999), 0), 255)
        out[k] = (np.int64(alpha_bits[k]) & 0xFE000000) | (tb << 16) | (pb << 8) | ib
    return out


def _limit_impl(bits: ArrayBits, check_only: bool) -> Tuple[ArrayBits, np.ndarray]:
    """Chroma reduction per color; also reports which inputs were in gamut."""
    n = bits.shape[0]
    out = np.empty(n, dtype=np.uint32)
    ok = np.empty(n, dtype=np.bool_)
    for k in range(n):
        d = np.int64(bits[k])
        i = (d & 0xFF) / 255.0
        p = (((d >> 8) & 0xFF) - 127.5) / 127.5
        t = (((d >> 16) & 0xFF) - 127.5) / 127.5
        p2 = p
        t2 = t
        first = True
        for attempt in range(31, -1, -1):
            x = i + 0.097569 * p2 + 0.205226 * t2
            l = abs(x) ** 2.3256
            if x < 0.0:
                l = -l
            x = i - 0.11388 * p2 + 0.133217 * t2
            m = abs(x) ** 2.3256
            if x < 0.0:
                m = -m
            x = i + 0.032615 * p2 - 0.67689 * t2
            s = abs(x) ** 2.3256
            if x < 0.0:
                s = -s
            r = 5.432622 * l - 4.67910 * m + 0.246257 * s
            g = -1.10517 * l + 2.311198 * m - 0.20588 * s
            b = 0.028104 * l - 0.19466 * m + 1.166325 * s
            if r >= 0.0 and r <= 1.0 and g >= 0.0 and g <= 1.0 and b >= 0.0 and b <= 1.0:
                break
            first = False
            if check_only:
                break
            pb = min(max(int((p * (attempt / 32.0) * 0.5 + 0.5) * 255.0 + 0.5), 0), 255)
            tb = min(max(int((t * (attempt / 32.0) * 0.5 + 0.5) * 255.0 + 0.5), 0), 255)
            p2 = (pb - 127.5) / 127.5
            t2 = (tb - 127.5) / 127.5
        ok[k] = first
        if first or check_only:
            out[k] = bits[k]
        else:
            pb = min(max(int((p2 * 0.5 + 0.5) * 255.0 + 0.5), 0), 255)
            tb = min(max(int((t2 * 0.5 + 0.5) * 255.0 + 0.5), 0), 255)
            out[k] = (d & 0xFE0000FF) | (tb << 16) | (pb << 8)
    return out, ok


def _hsl_impl(rgb: ArrayFloat) -> ArrayFloat:
    """(N, >=3) display RGB -> (N, 3) hue, chroma, lightness."""
    n = rgb.shape[0]
    out = np.empty((n, 3), dtype=np.float64)
    for k in range(n):
        r = rgb[k, 0]
        g = rgb[k, 1]
        b = rgb[k, 2]
        if g < b:
            x = b
            y = g
            z = -1.0
            w = 2.0 / 3.0
        else:
            x = g
            y = b
            z = 0.0
            w = -1.0 / 3.0
        if r < x:
            z = w
            w = r
        else:
            w = x
            x = r
        d = x - min(w, y)
        out[k, 0] = abs(z + (w - y) / (6.0 * d + 1e-10))
        out[k, 1] = d
        out[k, 2] = x * (1.0 - 0.5 * d / (x + 1e-10))
    return out


_decode_rgba_fast = njit(cache=True, fastmath=True)(_decode_rgba_impl)
_encode_rgb_fast = njit(cache=True, fastmath=True)(_encode_rgb_impl)
_limit_fast = njit(cache=True, fastmath=True)(_limit_impl)
_hsl_fast = njit(cache=True, fastmath=True)(_hsl_impl)

# --- Strict IEEE 754 kernel variants (fastmath=False) ---
_decode_rgba_strict = njit(fastmath=False)(_decode_rgba_impl)
_encode_rgb_strict = njit(fastmath=False)(_encode_rgb_impl)
_limit_strict = njit(fastmath=False)(_limit_impl)
_hsl_strict = njit(fastmath=False)(_hsl_impl)


# --- Kernel dispatchers ---

def _decode_rgba(bits: ArrayBits) -> ArrayFloat:
    if _STRICT_IEEE:
        return _decode_rgba_strict(bits)
    return _decode_rgba_fast(bits)

def _encode_rgb(rgb: ArrayFloat, alpha_bits: ArrayBits) -> ArrayBits:
    if _STRICT_IEEE:
        return _encode_rgb_strict(rgb, alpha_bits)
    return _encode_rgb_fast(rgb, alpha_bits)

def _limit(bits: ArrayBits, check_only: bool) -> Tuple[ArrayBits, np.ndarray]:
    if _STRICT_IEEE:
        return _limit_strict(bits, check_only)
    return _limit_fast(bits, check_only)

def _hsl(rgb: ArrayFloat) -> ArrayFloat:
    if _STRICT_IEEE:
        return _hsl_strict(rgb)
    return _hsl_fast(rgb)


# =============================================================================
# 8. SHAPE HANDLING
# =============================================================================

def handle_packed(func: Callable[..., np.ndarray]) -> Callable[..., np.ndarray]:
    """
    Decorator that flattens packed-color input to a contiguous 1-D batch.

    The wrapped function receives ``uint32`` bits of shape (N,) and returns
    an array whose first axis is N. The result is reshaped to the input
    shape (plus any trailing axes the function adds); a scalar input gives
    a scalar or 1-D result.
    """
    @functools.wraps(func)
    def wrapper(packed: Any, *args: Any, **kwargs: Any) -> np.ndarray:
        arr = np.asarray(packed, dtype=np.float32)
        bits = packed_to_bits(arr.ravel())
        res = func(bits, *args, **kwargs)
        return res.reshape(arr.shape + res.shape[1:])
    return wrapper


def _rgba_input(rgba: Any, width: int) -> Tuple[np.ndarray, Tuple[int, ...]]:
    arr = np.asarray(rgba)
    if arr.ndim == 0 or arr.shape[-1] != width:
        raise ValueError(f"Expected last dimension size {width}, got shape {arr.shape}")
    return np.ascontiguousarray(arr.reshape(-1, width)), arr.shape[:-1]


# =============================================================================
# 9. BATCH ENGINE
# =============================================================================

class IPTHQEngine:
    """Static utility class applying the IPT_HQ codec to arrays.

    Packed colors travel as ``float32`` arrays (the same bits the scalar
    functions use). Channel arrays use float64 with the channel on the last
    axis.
    """

    @staticmethod
    def from_rgba8888(rgba: Any) -> np.ndarray:
        """Array of ``0xRRGGBBAA`` ints -> ``float32`` packed colors."""
        ints = np.asarray(rgba, dtype=np.int64)
        flat = np.ascontiguousarray(ints.ravel())
        rgb = np.empty((flat.shape[0], 3), dtype=np.float64)
        rgb[:, 0] = ((flat >> 24) & 0xFF) / 255.0
        rgb[:, 1] = ((flat >> 16) & 0xFF) / 255.0
        rgb[:, 2] = ((flat >> 8) & 0xFF) / 255.0
        alpha_bits = ((flat & 0xFE) << 24).astype(np.uint32)
        return bits_to_packed(_encode_rgb(rgb, alpha_bits)).reshape(ints.shape)

    @staticmethod
    def from_rgba(rgba: Any) -> np.ndarray:
        """(..., 4) RGBA floats in 0..1 -> packed colors of shape (...)."""
        flat, lead = _rgba_input(rgba, 4)
        flat = flat.astype(np.float64)
        alpha_bits = ((flat[:, 3] * 255.0).astype(np.int64) << 24).astype(np.uint32) & np.uint32(0xFE000000)
        rgb = np.ascontiguousarray(flat[:, :3])
        return bits_to_packed(_encode_rgb(rgb, alpha_bits)).reshape(lead)

    @staticmethod
    @handle_packed
    def to_rgba(bits: ArrayBits) -> np.ndarray:
        """Packed colors -> (..., 4) display RGBA floats in 0..1."""
        return _decode_rgba(bits)

    @staticmethod
    @handle_packed
    def to_rgba8888(bits: ArrayBits) -> np.ndarray:
        """Packed colors -> ``uint32`` RGBA8888 ints."""
        rgba = _decode_rgba(bits)
        chans = (rgba[:, :3] * 255.999).astype(np.uint32)
        alpha_bits = (bits & np.uint32(0xFE000000)) >> np.uint32(24)
        return ((chans[:, 0] << np.uint32(24)) | (chans[:, 1] << np.uint32(16))
                | (chans[:, 2] << np.uint32(8)) | alpha_bits | (bits >> np.uint32(31)))

    @staticmethod
    @handle_packed
    def decode(bits: ArrayBits) -> np.ndarray:
        """Packed colors -> (..., 4) intensity, protan, tritan, alpha in 0..1."""
        out = np.empty((bits.shape[0], 4), dtype=np.float64)
        out[:, 0] = (bits & 0xFF) / 255.0
        out[:, 1] = ((bits >> 8) & 0xFF) / 255.0
        out[:, 2] = ((bits >> 16) & 0xFF) / 255.0
        out[:, 3] = ((bits >> 24) & 0xFE) / 254.0
        return out

    @staticmethod
    def encode(ipta: Any) -> np.ndarray:
        """(..., 4) intensity, protan, tritan, alpha in 0..1 -> packed colors.

        Same truncating rules as the scalar ``ipt``.
        """
        flat, lead = _rgba_input(ipta, 4)
        chans = (np.asarray(flat, dtype=np.float64) * 255.0).astype(np.int64)
        bits = ((chans[:, 3] << 24) & 0xFE000000) | ((chans[:, 2] << 16) & 0xFF0000) \
            | ((chans[:, 1] << 8) & 0xFF00) | (chans[:, 0] & 0xFF)
        return bits_to_packed(bits).reshape(lead)

    @staticmethod
    @handle_packed
    def in_gamut(bits: ArrayBits) -> np.ndarray:
        """Boolean array: True where the color decodes without clamping."""
        return _limit(bits, True)[1]

    @staticmethod
    @handle_packed
    def limit_to_gamut(bits: ArrayBits) -> np.ndarray:
        """Packed colors with out-of-gamut chroma pulled toward neutral."""
        return _limit(bits, False)[0].view(np.float32)

    @staticmethod
    @handle_packed
    def hsl(bits: ArrayBits) -> np.ndarray:
        """Packed colors -> (..., 3) hue, saturation, lightness.

        Saturation follows the scalar ``saturation`` (zero next to black and
        white).
        """
        res = _hsl(_decode_rgba(bits))
        near_extreme = np.abs((bits & 0xFF) / 255.0 - 0.5) > 0.495
        res[near_extreme, 1] = 0.0
        return res


# =============================================================================
# Validation Block
# =============================================================================
if __name__ == "__main__":
    print("--- Tinct IPT_HQ Color Tools Validation ---")

    print("1. Primary colors...")
    for name, code in (("white", 0xFFFFFFFF), ("red", 0xFF0000FF), ("blue", 0x0000FFFF)):
        c = from_rgba8888(code)
        print(f"   {name:6s} {describe(c)}")

    print("2. Batch vs scalar...")
    codes = np.array([0xFF7F00FF, 0x00FF00FF, 0x808080FF, 0x520FE0FF], dtype=np.int64)
    batch = IPTHQEngine.from_rgba8888(codes)
    scalar = np.array([from_rgba8888(int(c)) for c in codes], dtype=np.float32)
    print(f"   identical bits: {np.array_equal(packed_to_bits(batch), packed_to_bits(scalar))}")

    print("3. Gamut limiting...")
    wild = ipt(0.5, 1.0, 0.0, 1.0)
    print(f"   in_gamut(wild) = {in_gamut(wild)}, "
          f"after limit = {in_gamut(limit_to_gamut(wild))}")
