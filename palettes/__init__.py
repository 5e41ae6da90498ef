# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Ready-made palettes of named IPT_HQ colors.

``PALETTE`` holds the CSS/X11 named colors with Title Case names
(``"Alice Blue"``) and UPPER_CASE constants (``PALETTE.ALICE_BLUE``).
``SIMPLE_PALETTE`` holds fifty one-word colors (``"cobalt"``) and parses
descriptions such as ``"light rich orange"``.
"""

from typing import Final

from palettes.palette import (
    DATA_DIR_ENV,
    GRAYSCALE_SATURATION,
    TRANSPARENT,
    NamedPalette,
    PaletteEntry,
    PaletteFormatError,
    load_palette,
    read_palette_entries,
)
from palettes.simple import SIMPLE_ALIASES, SimplePalette

__all__ = [
    "DATA_DIR_ENV",
    "GRAYSCALE_SATURATION",
    "TRANSPARENT",
    "NamedPalette",
    "PaletteEntry",
    "PaletteFormatError",
    "SimplePalette",
    "SIMPLE_ALIASES",
    "load_palette",
    "read_palette_entries",
    "PALETTE",
    "SIMPLE_PALETTE",
]

PALETTE: Final[NamedPalette] = load_palette("named_colors.tsv")
SIMPLE_PALETTE: Final[SimplePalette] = load_palette("simple_colors.tsv", SimplePalette)
