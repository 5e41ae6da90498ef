# -*- coding: utf-8 -*-
"""Shared fixtures for the Tinct test suite."""

import pytest

import tinct_colortools
from palettes import PALETTE, SIMPLE_PALETTE
from tinct_registry import KnownColors

# One byte of IPT_HQ precision plus float64-vs-float32 slack.
BYTE_TOLERANCE = 1.5 / 255.0


def channel_close(actual: float, expected: float, tol: float = BYTE_TOLERANCE) -> bool:
    return abs(actual - expected) <= tol


@pytest.fixture
def palette():
    return PALETTE


@pytest.fixture
def simple_palette():
    return SIMPLE_PALETTE


@pytest.fixture
def registry():
    """A fresh registry holding only the default colors."""
    return KnownColors()


@pytest.fixture
def strict_ieee():
    """Switches the batch kernels to strict IEEE mode for one test."""
    tinct_colortools.set_strict_ieee(True)
    yield
    tinct_colortools.set_strict_ieee(False)
