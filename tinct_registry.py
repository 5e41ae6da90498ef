# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Registry
==============
A minimal name -> color registry of the kind UI toolkits keep for markup
such as ``[RED]``, plus the two routines that sync it with IPT_HQ.

``edit_known_colors`` rewrites each registered color so that its r, g and
b fields carry IPT_HQ intensity, protan and tritan instead of RGB. A
renderer whose shader expects IPT_HQ input can then keep using the same
color names. ``append_to_known_colors`` adds every entry of a palette in
that same IPT-in-RGB-fields form.

Any mutable mapping from ``str`` to ``Color`` satisfies ``ColorRegistry``;
``KnownColors`` is the thread-safe implementation used by default.
"""

import contextlib
import logging
import threading
from typing import (
    ContextManager,
    Dict,
    Final,
    ItemsView,
    Iterator,
    KeysView,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from tinct_colortools import alpha, from_rgba, intensity, protan, to_rgba, tritan

__all__ = [
    "Color",
    "ColorRegistry",
    "KnownColors",
    "DEFAULT_KNOWN_COLORS",
    "KNOWN_COLORS",
    "from_color",
    "to_color",
    "edit_known_colors",
    "append_to_known_colors",
]

log = logging.getLogger(__name__)


# =============================================================================
# 1. COLOR RECORD
# =============================================================================

def _clamp(v: float) -> float:
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


class Color:
    """
    Mutable RGBA color with float channels clamped to 0..1.

    The fields are named r, g, b, a, but after ``edit_known_colors`` they
    hold intensity, protan, tritan and alpha.
    """

    __slots__ = ("r", "g", "b", "a")

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0, a: float = 1.0) -> None:
        self.r = _clamp(r)
        self.g = _clamp(g)
        self.b = _clamp(b)
        self.a = _clamp(a)

    @classmethod
    def from_rgba8888(cls, rgba: int) -> "Color":
        """Builds a color from ``0xRRGGBBAA``."""
        return cls(
            ((rgba >> 24) & 0xFF) / 255.0,
            ((rgba >> 16) & 0xFF) / 255.0,
            ((rgba >> 8) & 0xFF) / 255.0,
            (rgba & 0xFF) / 255.0,
        )

    def set(self, r: float, g: float, b: float, a: float) -> "Color":
        """Assigns all four channels (clamped) and returns ``self``."""
        self.r = _clamp(r)
        self.g = _clamp(g)
        self.b = _clamp(b)
        self.a = _clamp(a)
        return self

    def to_rgba8888(self) -> int:
        return (
            (int(self.r * 255.0 + 0.5) << 24)
            | (int(self.g * 255.0 + 0.5) << 16)
            | (int(self.b * 255.0 + 0.5) << 8)
            | int(self.a * 255.0 + 0.5)
        )

    def copy(self) -> "Color":
        return Color(self.r, self.g, self.b, self.a)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.r, self.g, self.b, self.a

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"Color(r={self.r:.4f}, g={self.g:.4f}, b={self.b:.4f}, a={self.a:.4f})"


def from_color(color: Color) -> float:
    """Encodes an RGBA ``Color`` as a packed IPT_HQ float."""
    return from_rgba(color.r, color.g, color.b, color.a)


def to_color(packed: float) -> Color:
    """Decodes a packed IPT_HQ float into a new RGBA ``Color``."""
    return Color(*to_rgba(packed))


# =============================================================================
# 2. REGISTRY INTERFACE
# =============================================================================

@runtime_checkable
class ColorRegistry(Protocol):
    """
    Minimal interface a color registry must satisfy.

    __getitem__(name) -> Color
    __setitem__(name, color)
    __contains__(name) -> bool
    items() -> iterable of (name, Color)

    ``dict[str, Color]`` and ``KnownColors`` both qualify.
    """
    def __getitem__(self, name: str) -> Color: ...
    def __setitem__(self, name: str, color: Color) -> None: ...
    def __contains__(self, name: object) -> bool: ...
    def items(self) -> ItemsView[str, Color]: ...


DEFAULT_KNOWN_COLORS: Final[Mapping[str, int]] = {
    "CLEAR": 0x00000000,
    "BLACK": 0x000000FF,
    "WHITE": 0xFFFFFFFF,
    "LIGHT_GRAY": 0xBFBFBFFF,
    "GRAY": 0x7F7F7FFF,
    "DARK_GRAY": 0x3F3F3FFF,
    "BLUE": 0x0000FFFF,
    "NAVY": 0x00007FFF,
    "ROYAL": 0x4169E1FF,
    "SLATE": 0x708090FF,
    "SKY": 0x87CEEBFF,
    "CYAN": 0x00FFFFFF,
    "TEAL": 0x007F7FFF,
    "GREEN": 0x00FF00FF,
    "CHARTREUSE": 0x7FFF00FF,
    "LIME": 0x32CD32FF,
    "FOREST": 0x228B22FF,
    "OLIVE": 0x6B8E23FF,
    "YELLOW": 0xFFFF00FF,
    "GOLD": 0xFFD700FF,
    "GOLDENROD": 0xDAA520FF,
    "ORANGE": 0xFFA500FF,
    "BROWN": 0x8B4513FF,
    "TAN": 0xD2B48CFF,
    "FIREBRICK": 0xB22222FF,
    "RED": 0xFF0000FF,
    "SCARLET": 0xFF341CFF,
    "CORAL": 0xFF7F50FF,
    "SALMON": 0xFA8072FF,
    "PINK": 0xFF69B4FF,
    "MAGENTA": 0xFF00FFFF,
    "PURPLE": 0xA020F0FF,
    "VIOLET": 0xEE82EEFF,
    "MAROON": 0xB03060FF,
}
"""Names and RGBA8888 codes a fresh ``KnownColors`` starts with."""


class KnownColors:
    """
    Thread-safe name -> ``Color`` registry.

    Every access takes the same re-entrant lock. ``keys``, ``items`` and
    iteration work on a snapshot, so they never see a half-applied write.
    ``lock`` can be held across several calls to make them atomic; the
    sync routines below hold it for their whole pass.
    """

    __slots__ = ("_colors", "_lock")

    def __init__(self, colors: Optional[Mapping[str, Color]] = None) -> None:
        self._lock = threading.RLock()
        self._colors: Dict[str, Color] = {}
        if colors is None:
            self.reset()
        else:
            self._colors.update(colors)

    @property
    def lock(self) -> ContextManager[bool]:
        return self._lock

    # -- read interface ----------------------------------------------------
    def __getitem__(self, name: str) -> Color:
        with self._lock:
            return self._colors[name]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._colors

    def __len__(self) -> int:
        with self._lock:
            return len(self._colors)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def get(self, name: str, default: Optional[Color] = None) -> Optional[Color]:
        with self._lock:
            return self._colors.get(name, default)

    def snapshot(self) -> Dict[str, Color]:
        """A copy of the current name -> ``Color`` mapping."""
        with self._lock:
            return dict(self._colors)

    def keys(self) -> KeysView[str]:
        return self.snapshot().keys()

    def items(self) -> ItemsView[str, Color]:
        return self.snapshot().items()

    # -- write interface ---------------------------------------------------
    def __setitem__(self, name: str, color: Color) -> None:
        if not isinstance(color, Color):
            raise TypeError(f"KnownColors stores Color objects, got {type(color).__name__}")
        with self._lock:
            self._colors[name] = color

    def __delitem__(self, name: str) -> None:
        with self._lock:
            del self._colors[name]

    def reset(self) -> None:
        """Drops every entry and restores ``DEFAULT_KNOWN_COLORS``."""
        with self._lock:
            self._colors.clear()
            for name, rgba in DEFAULT_KNOWN_COLORS.items():
                self._colors[name] = Color.from_rgba8888(rgba)

    # -- display -----------------------------------------------------------
    def __repr__(self) -> str:
        return f"KnownColors(n={len(self)})"


KNOWN_COLORS: Final[KnownColors] = KnownColors()
"""Process-wide registry used when no registry is passed explicitly."""


# =============================================================================
# 3. SYNC ROUTINES
# =============================================================================

def _held(registry: ColorRegistry) -> ContextManager[object]:
    if isinstance(registry, KnownColors):
        return registry.lock
    return contextlib.nullcontext()


def edit_known_colors(registry: Optional[ColorRegistry] = None) -> int:
    """
    Converts every color in ``registry`` to IPT_HQ stored in RGB fields.

    Each entry is replaced by a new ``Color(I, P, T, A)`` built from the
    IPT_HQ encoding of its RGBA value; the old ``Color`` objects are left
    untouched. Running this twice converts twice, so call it once.

    Args:
        registry: Target registry; defaults to ``KNOWN_COLORS``.

    Returns:
        Number of colors converted.
    """
    if registry is None:
        registry = KNOWN_COLORS
    with _held(registry):
        snapshot = list(registry.items())
        for name, color in snapshot:
            packed = from_color(color)
            registry[name] = Color(intensity(packed), protan(packed), tritan(packed), color.a)
    log.debug("edit_known_colors: converted %d colors", len(snapshot))
    return len(snapshot)


def append_to_known_colors(palette: Mapping[str, float],
                           registry: Optional[ColorRegistry] = None) -> int:
    """
    Puts one ``Color(I, P, T, A)`` per palette name into ``registry``.

    Existing entries with the same name are replaced. Palette colors are
    packed IPT_HQ floats, so no conversion beyond unpacking is needed.

    Args:
        palette: Name -> packed color mapping, e.g. ``PALETTE.named``.
        registry: Target registry; defaults to ``KNOWN_COLORS``.

    Returns:
        Number of colors written.
    """
    if registry is None:
        registry = KNOWN_COLORS
    count = 0
    with _held(registry):
        for name, packed in palette.items():
            registry[name] = Color(intensity(packed), protan(packed), tritan(packed), alpha(packed))
            count += 1
    log.debug("append_to_known_colors: wrote %d colors", count)
    return count
