"""Tests for tinct_floatcolors: bit reinterpretation, byte lerps and HSL helpers."""

import math

import numpy as np
import pytest

from tinct_floatcolors import (
    ALPHA_MASK,
    bits_to_packed,
    float_to_raw_int_bits,
    hsl_to_rgba8888,
    int_bits_to_float,
    lerp_float_colors,
    lerp_float_colors_blended,
    mix,
    packed_to_bits,
    rgba8888_from_hex,
    rgba8888_to_hsl,
)


class TestBits:
    def test_roundtrip_bits(self):
        for bits in (0x00000000, 0x007F7F00, 0xFE7F80FF, 0x02010203):
            assert float_to_raw_int_bits(int_bits_to_float(bits)) == bits

    def test_masked_bits_are_finite(self):
        # Alpha never sets the lowest exponent bit, so no NaN/inf is possible.
        packed = int_bits_to_float(ALPHA_MASK | 0x00FFFFFF)
        assert math.isfinite(packed)

    def test_zero(self):
        assert float_to_raw_int_bits(0.0) == 0
        assert int_bits_to_float(0) == 0.0

    def test_array_views(self):
        bits = np.array([0x00000000, 0xFE7F7F80, 0x12345678], dtype=np.uint32)
        packed = bits_to_packed(bits)
        assert packed.dtype == np.float32
        assert np.array_equal(packed_to_bits(packed), bits)

    def test_array_matches_scalar(self):
        packed = bits_to_packed([0xFE7F7F80, 0x02808040])
        assert float_to_raw_int_bits(float(packed[0])) == 0xFE7F7F80
        assert float_to_raw_int_bits(float(packed[1])) == 0x02808040

    def test_array_keeps_shape(self):
        bits = np.zeros((2, 3), dtype=np.uint32)
        assert packed_to_bits(bits_to_packed(bits)).shape == (2, 3)


class TestLerp:
    a = int_bits_to_float(0xFE000000)
    b = int_bits_to_float(0xFEFFFFFF)

    def test_endpoints(self):
        assert float_to_raw_int_bits(lerp_float_colors(self.a, self.b, 0.0)) == 0xFE000000
        assert float_to_raw_int_bits(lerp_float_colors(self.a, self.b, 1.0)) == 0xFEFFFFFF

    def test_midpoint_per_byte(self):
        mid = float_to_raw_int_bits(lerp_float_colors(self.a, self.b, 0.5))
        assert mid & 0xFF == 127
        assert (mid >> 8) & 0xFF == 127
        assert (mid >> 16) & 0xFF == 127
        assert mid & ALPHA_MASK == 0xFE000000

    def test_alpha_stays_even(self):
        start = int_bits_to_float(0x00000000)
        end = int_bits_to_float(0xFE000000)
        bits = float_to_raw_int_bits(lerp_float_colors(start, end, 0.3))
        assert (bits >> 24) & 1 == 0

    def test_blended_keeps_start_alpha(self):
        start = int_bits_to_float(0x80102030)
        end = int_bits_to_float(0xFE0000FF)
        bits = float_to_raw_int_bits(lerp_float_colors_blended(start, end, 1.0))
        assert bits & ALPHA_MASK == 0x80000000
        assert bits & 0xFF == 0xFF

    def test_blended_transparent_end_is_noop(self):
        start = int_bits_to_float(0xFE102030)
        end = int_bits_to_float(0x00FFFFFF)
        assert lerp_float_colors_blended(start, end, 1.0) == start


class TestMix:
    def test_empty(self):
        assert mix() == 0.0

    def test_single(self):
        c = int_bits_to_float(0xFE405060)
        assert mix(c) == c

    def test_even_blend(self):
        black = int_bits_to_float(0xFE000000)
        white = int_bits_to_float(0xFE0000FE)
        bits = float_to_raw_int_bits(mix(black, white))
        assert bits & 0xFF == 127

    def test_repeated_word_weights(self):
        lo = int_bits_to_float(0xFE000000)
        hi = int_bits_to_float(0xFE0000F0)
        one_third = float_to_raw_int_bits(mix(lo, hi, hi)) & 0xFF
        assert abs(one_third - 160) <= 1


class TestHsl:
    def test_primary_red(self):
        assert hsl_to_rgba8888(0.0, 1.0, 0.5) >> 8 == 0xFF0000

    def test_primary_green(self):
        assert hsl_to_rgba8888(1.0 / 3.0, 1.0, 0.5) >> 8 == 0x00FF00

    def test_primary_blue(self):
        assert hsl_to_rgba8888(2.0 / 3.0, 1.0, 0.5) >> 8 == 0x0000FF

    def test_gray_ignores_hue(self):
        assert hsl_to_rgba8888(0.3, 0.0, 0.5) >> 8 == hsl_to_rgba8888(0.8, 0.0, 0.5) >> 8

    def test_alpha_even(self):
        assert hsl_to_rgba8888(0.0, 1.0, 0.5, 1.0) & 0xFF == 0xFE
        assert hsl_to_rgba8888(0.0, 1.0, 0.5, 0.0) & 0xFF == 0

    def test_hue_wraps(self):
        assert hsl_to_rgba8888(1.25, 1.0, 0.5) == hsl_to_rgba8888(0.25, 1.0, 0.5)

    def test_to_hsl_primaries(self):
        h, s, l, a = rgba8888_to_hsl(0x0000FFFF)
        assert h == pytest.approx(2.0 / 3.0)
        assert s == pytest.approx(1.0)
        assert l == pytest.approx(0.5)
        assert a == pytest.approx(1.0)

    def test_to_hsl_gray(self):
        h, s, l, _ = rgba8888_to_hsl(0x808080FF)
        assert (h, s) == (0.0, 0.0)
        assert l == pytest.approx(128 / 255)

    def test_hsl_roundtrip_close(self):
        rgba = hsl_to_rgba8888(0.58, 0.6, 0.4)
        h, s, l, _ = rgba8888_to_hsl(rgba)
        assert h == pytest.approx(0.58, abs=0.01)
        assert s == pytest.approx(0.6, abs=0.02)
        assert l == pytest.approx(0.4, abs=0.01)


class TestHex:
    def test_eight_digits(self):
        assert rgba8888_from_hex("FF000080") == 0xFF000080

    def test_six_digits_opaque(self):
        assert rgba8888_from_hex("#00ff00") == 0x00FF00FF

    def test_0x_prefix(self):
        assert rgba8888_from_hex("0x12345678") == 0x12345678

    def test_whitespace(self):
        assert rgba8888_from_hex("  ABCDEF ") == 0xABCDEFFF

    @pytest.mark.parametrize("bad", ["", "#fff", "12345", "GG0000", "#1234567890"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            rgba8888_from_hex(bad)
