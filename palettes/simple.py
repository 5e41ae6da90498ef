# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Simple Palette & Color Descriptions
===================================
A small palette of one-word color names (lowercase, e.g. ``"red"``,
``"cobalt"``) that can be combined into descriptions::

    "light rich orange"     ->  a lighter, more saturated orange
    "darker gray cyan"      ->  an even mix of gray and cyan, darkened twice
    "pale red pink pink"    ->  one part red to two parts pink, paled

Color words are mixed evenly (repeat a word to weight it). Adjectives
change lightness and saturation, and take ``-er``, ``-est`` and ``-most``
to apply two, three or four times:

=========  ===========================
light      lighter
dark       darker
rich       more saturated
dull       less saturated
bright     lighter and more saturated
pale       lighter and less saturated
deep       darker and more saturated
weak       darker and less saturated
=========  ===========================

Unknown words count as ``transparent``. ``best_match`` runs the other way,
finding a description whose color is close to a given one.
"""

import itertools
import math
import re
from typing import Final, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from tinct_colortools import (
    alpha_int,
    darken,
    dullen,
    enrich,
    intensity,
    lighten,
    limit_to_gamut,
    protan,
    tritan,
)
from tinct_floatcolors import mix
from palettes.palette import NamedPalette, PaletteEntry

__all__ = [
    "SIMPLE_ALIASES",
    "LIGHTNESS_STEP",
    "SimplePalette",
]

SIMPLE_ALIASES: Final[Mapping[str, str]] = {
    "grey": "gray",
    "gold": "saffron",
    "puce": "mauve",
    "sand": "tan",
    "skin": "peach",
    "coral": "salmon",
    "azure": "sky",
    "ocean": "teal",
    "sapphire": "cobalt",
}
"""Extra words accepted in descriptions, mapped to their palette color."""

LIGHTNESS_STEP: Final[float] = 0.15

_TERM_SPLIT: Final[re.Pattern] = re.compile(r"[^a-zA-Z]+")


class _Adjective(NamedTuple):
    first: str
    probe: int
    probe_char: str
    levels: Mapping[int, int]          # word length -> level 1..4
    lightness: float                   # per level
    saturation: Tuple[float, ...]      # added at each level, cumulative


_STANDARD_LEVELS: Final[Mapping[int, int]] = {4: 1, 6: 2, 7: 3, 8: 4}
_SAT_UP: Final[Tuple[float, ...]] = (0.1, 0.15, 0.2, 0.25)
_SAT_DOWN: Final[Tuple[float, ...]] = (-0.1, -0.15, -0.2, -0.25)
_NO_SAT: Final[Tuple[float, ...]] = (0.0, 0.0, 0.0, 0.0)

# Checked in order; the first rule whose first letter and probe letter match
# decides whether a word is an adjective.
_ADJECTIVES: Final[Tuple[_Adjective, ...]] = (
    _Adjective("l", 2, "g", {5: 1, 7: 2, 8: 3, 9: 4}, LIGHTNESS_STEP, _NO_SAT),       # light
    _Adjective("b", 3, "g", {6: 1, 8: 2, 9: 3, 10: 4}, LIGHTNESS_STEP,
               (0.1, 0.1, 0.2, 0.25)),                                              # bright
    _Adjective("p", 2, "l", {4: 1, 5: 2, 6: 3, 7: 4, 8: 4}, LIGHTNESS_STEP, _SAT_DOWN),  # pale
    _Adjective("w", 3, "k", _STANDARD_LEVELS, -LIGHTNESS_STEP, _SAT_DOWN),          # weak
    _Adjective("r", 1, "i", _STANDARD_LEVELS, 0.0, _SAT_UP),                        # rich
    _Adjective("d", 1, "a", _STANDARD_LEVELS, -LIGHTNESS_STEP, _NO_SAT),            # dark
    _Adjective("d", 1, "u", _STANDARD_LEVELS, 0.0, _SAT_DOWN),                      # dull
    _Adjective("d", 3, "p", _STANDARD_LEVELS, -LIGHTNESS_STEP, _SAT_UP),            # deep
)


def _adjective_effect(term: str) -> Optional[Tuple[float, float]]:
    """(lightness, saturation) change for an adjective, or None for a color word."""
    for adj in _ADJECTIVES:
        if term[0] == adj.first and len(term) > adj.probe and term[adj.probe] == adj.probe_char:
            level = adj.levels.get(len(term))
            if level is None:
                return None
            return adj.lightness * level, math.fsum(adj.saturation[:level])
    return None


def _apply_adjustments(color: float, light: float, sat: float) -> float:
    if light > 0.0:
        color = lighten(color, light)
    elif light < 0.0:
        color = darken(color, -light)
    if sat > 0.0:
        return enrich(color, sat)
    if sat < 0.0:
        return limit_to_gamut(dullen(color, -sat))
    return limit_to_gamut(color)


def _build_combined_adjectives() -> Tuple[str, ...]:
    light_words = ("darkmost ", "darkest ", "darker ", "dark ", "",
                   "light ", "lighter ", "lightest ", "lightmost ")
    sat_words = ("dullmost ", "dullest ", "duller ", "dull ", "",
                 "rich ", "richer ", "richest ", "richmost ")
    combined = [light_words[lit] + sat_words[sat] for sat in range(9) for lit in range(9)]
    # Equal-magnitude pairs collapse into a single adjective.
    for n, (weak, pale, deep, bright) in enumerate((
            ("weakmost ", "palemost ", "deepmost ", "brightmost "),
            ("weakest ", "palest ", "deepest ", "brightest "),
            ("weaker ", "paler ", "deeper ", "brighter "),
            ("weak ", "pale ", "deep ", "bright "))):
        combined[n * 9 + n] = weak
        combined[n * 9 + 8 - n] = pale
        combined[(8 - n) * 9 + n] = deep
        combined[(8 - n) * 9 + 8 - n] = bright
    combined[4 * 9 + 4] = ""
    return tuple(combined)


_COMBINED_ADJECTIVES: Final[Tuple[str, ...]] = _build_combined_adjectives()
"""Index ``saturation_level * 9 + lightness_level`` (levels -4..4 shifted by 4)."""


class SimplePalette(NamedPalette):
    """
    Palette of simple color words that understands short descriptions.

    Aliases such as ``"grey"`` resolve through ``named``, ``get`` and
    descriptions but are not part of ``names``.
    """

    __slots__ = ()

    def __init__(
        self,
        entries: Sequence[PaletteEntry],
        aliases: Optional[Mapping[str, str]] = None,
        source: str = "<memory>",
        **kwargs: float,
    ) -> None:
        super().__init__(entries, SIMPLE_ALIASES if aliases is None else aliases, source, **kwargs)

    # -- descriptions ------------------------------------------------------
    def parse_description(self, description: str) -> float:
        """
        Turns a description like ``"lighter dull green blue"`` into a color.

        Words are separated by anything that is not an ASCII letter. All
        color words are mixed evenly, adjectives are summed, and the result
        is lightened/darkened, then enriched/dulled and limited to the gamut.
        A description without color words gives the palette default.
        """
        light = 0.0
        sat = 0.0
        mixing: List[float] = []
        for term in _TERM_SPLIT.split(description):
            if not term:
                continue
            effect = _adjective_effect(term)
            if effect is None:
                mixing.append(self.get(term))
            else:
                light += effect[0]
                sat += effect[1]
        if not mixing:
            return self.default
        return _apply_adjustments(mix(*mixing), light, sat)

    def best_match(self, color: float, mix_count: int = 1) -> str:
        """
        Finds a description whose parsed color is close to ``color``.

        Tries every combination of ``mix_count`` opaque palette colors with
        every lightness and saturation adjective (81 pairs), comparing in
        IPT_HQ. Cost grows as ``len(palette) ** mix_count``; keep
        ``mix_count`` at 1 or 2.

        Returns:
            A description accepted by ``parse_description``.
        """
        mix_count = max(1, int(mix_count))
        names = [n for n in self.names_by_hue if alpha_int(self.named[n]) >= 128]
        if not names:
            raise ValueError(f"{self.source}: no opaque colors to match against")
        colors = [self.named[n] for n in names]
        target = (intensity(color), protan(color), tritan(color))

        best = math.inf
        best_combo: Tuple[int, ...] = (0,) * mix_count
        best_adj = 4 * 9 + 4
        for combo in itertools.product(range(len(colors)), repeat=mix_count):
            base = mix(*(colors[k] for k in combo))
            for idx_s in range(-4, 5):
                amount = idx_s * (abs(idx_s) + 3) * 0.025
                for idx_i in range(-4, 5):
                    result = base
                    if idx_i > 0:
                        result = lighten(result, LIGHTNESS_STEP * idx_i)
                    elif idx_i < 0:
                        result = darken(result, -LIGHTNESS_STEP * idx_i)
                    if idx_s > 0:
                        result = enrich(result, amount)
                    elif idx_s < 0:
                        result = limit_to_gamut(dullen(result, -amount))
                    else:
                        result = limit_to_gamut(result)
                    d_i = intensity(result) - target[0]
                    d_p = protan(result) - target[1]
                    d_t = tritan(result) - target[2]
                    dist = d_i * d_i + d_p * d_p + d_t * d_t
                    if dist < best:
                        best = dist
                        best_combo = combo
                        best_adj = (idx_s + 4) * 9 + idx_i + 4
        return _COMBINED_ADJECTIVES[best_adj] + " ".join(names[k] for k in best_combo)
