# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Packed Float Utilities
======================
Bit-level helpers shared by the IPT_HQ codec, the palettes and the
gradient tools.

A packed color is an ordinary Python ``float`` whose single-precision bit
pattern carries four 8-bit channels::

    bits  0- 7   channel 0   (intensity in IPT_HQ)
    bits  8-15   channel 1   (protan)
    bits 16-23   channel 2   (tritan)
    bits 25-31   alpha       (bit 24 always cleared)

Clearing bit 24 keeps the exponent below 0xFF, so no packed color is ever
NaN or infinite and it survives a float32 -> float64 -> float32 trip
unchanged. The functions here only move bytes around; they know nothing
about what the channels mean.
"""

import math
from typing import Final, Sequence, Tuple

import numpy as np

__all__ = [
    # --- Constants ---
    "ALPHA_MASK",
    "CHANNEL_MASK",
    # --- Bit Reinterpretation ---
    "float_to_raw_int_bits",
    "int_bits_to_float",
    "packed_to_bits",
    "bits_to_packed",
    # --- Channel Interpolation ---
    "lerp_float_colors",
    "lerp_float_colors_blended",
    "mix",
    # --- HSL / Hex Helpers ---
    "hsl_to_rgba8888",
    "rgba8888_to_hsl",
    "rgba8888_from_hex",
]

# =============================================================================
# 1. CONSTANTS
# =============================================================================

ALPHA_MASK: Final[int] = 0xFE000000
"""Alpha bits of a packed color; the lowest alpha bit is never set."""

CHANNEL_MASK: Final[int] = 0x00FFFFFF
"""The three 8-bit color channels of a packed color."""

_U32: Final[int] = 0xFFFFFFFF


# =============================================================================
# 2. BIT REINTERPRETATION
# =============================================================================

def float_to_raw_int_bits(value: float) -> int:
    """Returns the unsigned 32-bit pattern of ``value`` as a float32."""
    return int(np.float32(value).view(np.uint32))


def int_bits_to_float(bits: int) -> float:
    """Reinterprets the low 32 bits of ``bits`` as a float32 value."""
    return float(np.uint32(bits & _U32).view(np.float32))


def packed_to_bits(packed: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Vectorised ``float_to_raw_int_bits``.

    Args:
        packed: Any array-like of packed colors.

    Returns:
        A contiguous ``uint32`` array with the same shape.
    """
    return np.ascontiguousarray(np.asarray(packed, dtype=np.float32)).view(np.uint32)


def bits_to_packed(bits: Sequence[int] | np.ndarray) -> np.ndarray:
    """Vectorised ``int_bits_to_float``; returns a ``float32`` array."""
    arr = np.asarray(bits, dtype=np.int64) & _U32
    return np.ascontiguousarray(arr.astype(np.uint32)).view(np.float32)


# =============================================================================
# 3. CHANNEL INTERPOLATION
# =============================================================================

def lerp_float_colors(start: float, end: float, change: float) -> float:
    """
    Interpolates each byte of two packed colors.

    The channels are treated as unsigned bytes, so this is independent of
    the color space the bytes encode. Alpha stays even.

    Args:
        start: Packed color returned when ``change`` is 0.
        end: Packed color returned when ``change`` is 1.
        change: Interpolation amount, normally between 0 and 1.
    """
    s = float_to_raw_int_bits(start)
    e = float_to_raw_int_bits(end)
    c0, c1, c2, a0 = s & 0xFF, (s >> 8) & 0xFF, (s >> 16) & 0xFF, (s >> 24) & 0xFE
    d0, d1, d2, a1 = e & 0xFF, (e >> 8) & 0xFF, (e >> 16) & 0xFF, (e >> 24) & 0xFE
    return int_bits_to_float(
        (int(c0 + change * (d0 - c0)) & 0xFF)
        | ((int(c1 + change * (d1 - c1)) & 0xFF) << 8)
        | ((int(c2 + change * (d2 - c2)) & 0xFF) << 16)
        | ((int(a0 + change * (a1 - a0)) & 0xFE) << 24)
    )


def lerp_float_colors_blended(start: float, end: float, change: float) -> float:
    """
    Like ``lerp_float_colors`` but keeps the alpha of ``start``.

    ``change`` is scaled by the alpha of ``end``, so blending toward a fully
    transparent color has no effect.
    """
    s = float_to_raw_int_bits(start)
    e = float_to_raw_int_bits(end)
    c0, c1, c2 = s & 0xFF, (s >> 8) & 0xFF, (s >> 16) & 0xFF
    d0, d1, d2 = e & 0xFF, (e >> 8) & 0xFF, (e >> 16) & 0xFF
    change *= ((e >> 25) & 0x7F) / 127.0
    return int_bits_to_float(
        (int(c0 + change * (d0 - c0)) & 0xFF)
        | ((int(c1 + change * (d1 - c1)) & 0xFF) << 8)
        | ((int(c2 + change * (d2 - c2)) & 0xFF) << 16)
        | (s & ALPHA_MASK)
    )


def mix(*colors: float) -> float:
    """
    Mixes any number of packed colors with equal weight.

    Each color after the first is lerped in by ``1 / (i + 1)``, so the
    result is an even blend. An empty call returns ``0.0``.
    """
    if not colors:
        return 0.0
    result = colors[0]
    for i in range(1, len(colors)):
        result = lerp_float_colors(result, colors[i], 1.0 / (i + 1))
    return result


# =============================================================================
# 4. HSL / HEX HELPERS
# =============================================================================

def _hue_ramp(h: float) -> float:
    h -= math.floor(h)
    return min(max(abs(h * 6.0 - 3.0) - 1.0, 0.0), 1.0)


def hsl_to_rgba8888(h: float, s: float, l: float, a: float = 1.0) -> int:
    """
    Converts hue, saturation, lightness and alpha (all 0..1) to RGBA8888.

    Hue wraps around; the alpha byte is rounded down to an even value.
    """
    x = _hue_ramp(h)
    y = _hue_ramp(h + 2.0 / 3.0)
    z = _hue_ramp(h + 1.0 / 3.0)
    v = l + s * min(l, 1.0 - l)
    d = 2.0 * (1.0 - l / (v + 1e-10))
    v *= 255.0
    r = int(v * (1.0 + d * (x - 1.0))) & 0xFF
    g = int(v * (1.0 + d * (y - 1.0))) & 0xFF
    b = int(v * (1.0 + d * (z - 1.0))) & 0xFF
    alpha = (int(a * 127.0) << 1) & 0xFE
    return (r << 24) | (g << 16) | (b << 8) | alpha


def rgba8888_to_hsl(rgba: int) -> Tuple[float, float, float, float]:
    """
    Converts an RGBA8888 int to ``(hue, saturation, lightness, alpha)``.

    Hue, saturation and lightness use the HSL model, each between 0 and 1.
    Grays report a hue and saturation of 0.
    """
    r = ((rgba >> 24) & 0xFF) / 255.0
    g = ((rgba >> 16) & 0xFF) / 255.0
    b = ((rgba >> 8) & 0xFF) / 255.0
    a = (rgba & 0xFF) / 255.0
    hi = max(r, g, b)
    lo = min(r, g, b)
    delta = hi - lo
    lightness = (hi + lo) * 0.5
    if delta < 1e-6:
        return 0.0, 0.0, lightness, a
    inv = 1.0 / (6.0 * delta)
    if hi == r:
        hue = (g - b) * inv
    elif hi == g:
        hue = 1.0 / 3.0 + (b - r) * inv
    else:
        hue = 2.0 / 3.0 + (r - g) * inv
    hue -= math.floor(hue)
    saturation = delta / (1.0 - abs(hi + lo - 1.0))
    return hue, min(saturation, 1.0), lightness, a


def rgba8888_from_hex(text: str) -> int:
    """
    Parses ``RRGGBBAA`` or ``RRGGBB`` (optionally prefixed by ``#`` or ``0x``).

    Six-digit codes are treated as opaque.

    Raises:
        ValueError: If ``text`` is not a 6 or 8 digit hexadecimal code.
    """
    code = text.strip()
    if code.startswith("#"):
        code = code[1:]
    elif code[:2].lower() == "0x":
        code = code[2:]
    if len(code) not in (6, 8) or not all(ch in "0123456789abcdefABCDEF" for ch in code):
        raise ValueError(f"Expected a 6 or 8 digit hex color code, got {text!r}")
    value = int(code, 16)
    if len(code) == 6:
        value = (value << 8) | 0xFF
    return value


if __name__ == "__main__":
    print("--- Tinct packed float utilities ---")
    bits = 0xFE7F7F80
    packed = int_bits_to_float(bits)
    print(f"   0x{bits:08X} -> {packed!r} -> 0x{float_to_raw_int_bits(packed):08X}")
    print(f"   finite: {math.isfinite(packed)}")
    print(f"   mix of three: 0x{float_to_raw_int_bits(mix(packed, 0.0, packed)):08X}")
