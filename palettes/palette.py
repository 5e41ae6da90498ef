# -*- coding: utf-8 -*-
"""
Tinct: Named colors packed into perceptual IPT_HQ floats
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Named Palettes
==============
An immutable, name-keyed set of packed IPT_HQ colors plus the orderings
that color pickers and description parsers need.

A palette is read once from a tab-separated data file::

    # comment
    ALICE_BLUE<TAB>F0F8FFFF<TAB>Alice Blue

Each line gives an UPPER_CASE constant, an RGBA8888 code and a display
name. The RGBA code is converted with ``from_rgba8888`` and never changes
afterwards. Names and constants must be unique; two names may still share
a color.

Views
-----
``named``               read-only name -> packed color (plus aliases)
``colors``              packed colors in declaration order
``names``               names sorted alphabetically
``names_by_hue``        transparent first, then grays by intensity, then
                        chromatic colors by hue and intensity
``colors_by_hue``       colors in the ``names_by_hue`` order
``names_by_lightness``  names sorted by intensity, darkest first

Data files are looked up by name in ``$TINCT_DATA_DIR`` first and then in
the package's own ``data`` directory; an explicit path always wins.
"""

import functools
import logging
import os
import threading
import warnings
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import (
    Any,
    Dict,
    Final,
    Iterable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

import numpy as np
from scipy.spatial import cKDTree

from tinct_colortools import (
    alpha_int,
    from_rgba8888,
    hue,
    intensity,
    protan,
    saturation,
    tritan,
)
from tinct_floatcolors import rgba8888_from_hex
from tinct_registry import ColorRegistry, append_to_known_colors, edit_known_colors

__all__ = [
    "TRANSPARENT",
    "GRAYSCALE_SATURATION",
    "DATA_DIR_ENV",
    "PaletteEntry",
    "PaletteFormatError",
    "NamedPalette",
    "read_palette_entries",
    "load_palette",
]

log = logging.getLogger(__name__)

TRANSPARENT: Final[float] = from_rgba8888(0x00000000)
"""Fully transparent black; the default returned for unknown names."""

GRAYSCALE_SATURATION: Final[float] = 2.0 ** -6
"""Colors at or below this saturation sort with the grays."""

DATA_DIR_ENV: Final[str] = "TINCT_DATA_DIR"

_FIELDS: Final[int] = 3

P = TypeVar("P", bound="NamedPalette")


class PaletteFormatError(ValueError):
    """A palette data file is malformed or defines a name twice."""


class PaletteEntry(NamedTuple):
    """One named color as declared in a data file."""
    name: str
    constant: str
    rgba8888: int
    packed: float

    @classmethod
    def from_rgba8888(cls, name: str, constant: str, rgba8888: int) -> "PaletteEntry":
        return cls(name, constant, rgba8888, from_rgba8888(rgba8888))


# =============================================================================
# 1. DATA FILES
# =============================================================================

def _env_data_dir() -> Optional[Path]:
    v = os.environ.get(DATA_DIR_ENV)
    if v:
        return Path(os.path.expanduser(v)).resolve()
    return None


def _read_source(source: Union[str, os.PathLike]) -> Tuple[str, str]:
    """Returns ``(text, label)`` for a file name or path."""
    path = Path(source)
    # Only a path with a directory part is taken literally; bare names never
    # resolve against the working directory.
    if path.is_absolute() or os.path.dirname(os.fspath(source)):
        if not path.is_file():
            raise FileNotFoundError(f"Palette data file not found: {source}")
        return path.read_text(encoding="utf-8"), str(path)
    env_dir = _env_data_dir()
    if env_dir is not None and (env_dir / path.name).is_file():
        found = env_dir / path.name
        log.debug("Palette %s resolved from %s", path.name, DATA_DIR_ENV)
        return found.read_text(encoding="utf-8"), str(found)
    packaged = resources.files(__package__) / "data" / path.name
    if not packaged.is_file():
        raise FileNotFoundError(f"Palette data file not found: {source}")
    return packaged.read_text(encoding="utf-8"), f"{__package__}/data/{path.name}"


def _parse_lines(lines: Iterable[str], label: str) -> List[PaletteEntry]:
    entries: List[PaletteEntry] = []
    seen_names: Dict[str, int] = {}
    seen_constants: Dict[str, int] = {}
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        fields = line.split("\t")
        if len(fields) != _FIELDS:
            raise PaletteFormatError(
                f"{label}:{lineno}: expected {_FIELDS} tab-separated fields, got {len(fields)}"
            )
        constant, code, name = (f.strip() for f in fields)
        if not constant.isidentifier() or constant != constant.upper():
            raise PaletteFormatError(f"{label}:{lineno}: invalid constant name {constant!r}")
        if not name:
            raise PaletteFormatError(f"{label}:{lineno}: empty color name")
        try:
            rgba = rgba8888_from_hex(code)
        except ValueError as e:
            raise PaletteFormatError(f"{label}:{lineno}: {e}") from e
        if name in seen_names:
            raise PaletteFormatError(
                f"{label}:{lineno}: duplicate name {name!r} (first on line {seen_names[name]})"
            )
        if constant in seen_constants:
            raise PaletteFormatError(
                f"{label}:{lineno}: duplicate constant {constant!r} "
                f"(first on line {seen_constants[constant]})"
            )
        if rgba & 1 and (rgba & 0xFF) != 0xFF:
            warnings.warn(
                f"{label}:{lineno}: alpha 0x{rgba & 0xFF:02X} of {name!r} is odd; "
                "packed colors keep only 7 alpha bits.",
                UserWarning,
                stacklevel=3,
            )
        seen_names[name] = lineno
        seen_constants[constant] = lineno
        entries.append(PaletteEntry.from_rgba8888(name, constant, rgba))
    return entries


def read_palette_entries(source: Union[str, os.PathLike]) -> Tuple[PaletteEntry, ...]:
    """
    Reads and validates a palette data file.

    Args:
        source: A path, or a bare file name looked up in the data
            directories.

    Raises:
        FileNotFoundError: If the file cannot be found.
        PaletteFormatError: On malformed lines or duplicate names/constants.
    """
    text, label = _read_source(source)
    entries = _parse_lines(text.splitlines(), label)
    log.debug("Loaded %d palette entries from %s", len(entries), label)
    return tuple(entries)


# =============================================================================
# 2. PALETTE
# =============================================================================

def _hue_key(packed: float) -> Tuple[int, float, float]:
    if alpha_int(packed) < 128:
        return 0, 0.0, intensity(packed)
    if saturation(packed) <= GRAYSCALE_SATURATION:
        return 1, 0.0, intensity(packed)
    return 2, hue(packed), intensity(packed)


class NamedPalette:
    """
    Immutable collection of named packed IPT_HQ colors.

    Lookups are by exact name (case and spacing matter). Constants are
    available as attributes, e.g. ``palette.ALICE_BLUE``.

    Args:
        entries: Colors in declaration order.
        aliases: Extra names that resolve through ``named``/``get`` to an
            existing entry but are not listed in ``names``.
        source: Label used in ``repr`` and log messages.
        default: Value ``get`` returns for unknown names.
    """

    __slots__ = (
        "source",
        "default",
        "_entries",
        "_named",
        "_constants",
        "_names",
        "_names_by_hue",
        "_names_by_lightness",
        "_colors_by_hue",
        "_tree",
        "_tree_names",
        "_lock",
    )

    def __init__(
        self,
        entries: Iterable[PaletteEntry],
        aliases: Optional[Mapping[str, str]] = None,
        source: str = "<memory>",
        default: float = TRANSPARENT,
    ) -> None:
        self.source = source
        self.default = default
        self._entries: Tuple[PaletteEntry, ...] = tuple(entries)
        self._lock = threading.RLock()
        self._tree: Optional[cKDTree] = None
        self._tree_names: Tuple[str, ...] = ()

        named: Dict[str, float] = {}
        constants: Dict[str, float] = {}
        for entry in self._entries:
            if entry.name in named:
                raise PaletteFormatError(f"{source}: duplicate name {entry.name!r}")
            if entry.constant in constants:
                raise PaletteFormatError(f"{source}: duplicate constant {entry.constant!r}")
            named[entry.name] = entry.packed
            constants[entry.constant] = entry.packed

        names = list(named)
        for alias, target in (aliases or {}).items():
            if alias in named:
                raise PaletteFormatError(f"{source}: alias {alias!r} shadows a color name")
            if target not in named:
                raise KeyError(f"{source}: alias {alias!r} points to unknown color {target!r}")
            named[alias] = named[target]

        self._named: Mapping[str, float] = MappingProxyType(named)
        self._constants: Mapping[str, float] = MappingProxyType(constants)
        self._names: Tuple[str, ...] = tuple(sorted(names))
        self._names_by_hue: Tuple[str, ...] = tuple(sorted(self._names, key=lambda n: _hue_key(named[n])))
        self._names_by_lightness: Tuple[str, ...] = tuple(sorted(self._names, key=lambda n: intensity(named[n])))
        self._colors_by_hue: Tuple[float, ...] = tuple(named[n] for n in self._names_by_hue)

    @classmethod
    def from_file(cls: Type[P], source: Union[str, os.PathLike], **kwargs: Any) -> P:
        """Builds a palette from a data file (see ``read_palette_entries``)."""
        return cls(read_palette_entries(source), source=os.fspath(source), **kwargs)

    # -- lookup ------------------------------------------------------------
    def get(self, name: str, default: Optional[float] = None) -> float:
        """
        Packed color for ``name``, or ``default`` when unknown.

        Without an explicit default the palette's ``default`` (transparent)
        is returned, so this never raises.
        """
        found = self._named.get(name)
        if found is not None:
            return found
        return self.default if default is None else default

    def __getitem__(self, name: str) -> float:
        try:
            return self._named[name]
        except KeyError:
            raise KeyError(f"No color named {name!r} in {self.source}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._named

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (entry.name for entry in self._entries)

    def __getattr__(self, attr: str) -> float:
        if attr.startswith("_"):
            raise AttributeError(attr)
        try:
            return self._constants[attr]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!s} has no color constant {attr!r}"
            ) from None

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._constants))

    # -- views -------------------------------------------------------------
    @property
    def named(self) -> Mapping[str, float]:
        """Read-only name -> packed color mapping, aliases included."""
        return self._named

    @property
    def constants(self) -> Mapping[str, float]:
        """Read-only CONSTANT -> packed color mapping."""
        return self._constants

    @property
    def colors(self) -> Tuple[float, ...]:
        """Packed colors in declaration order."""
        return tuple(entry.packed for entry in self._entries)

    @property
    def names(self) -> Tuple[str, ...]:
        """Color names in alphabetical order (no aliases)."""
        return self._names

    @property
    def names_by_hue(self) -> Tuple[str, ...]:
        return self._names_by_hue

    @property
    def colors_by_hue(self) -> Tuple[float, ...]:
        return self._colors_by_hue

    @property
    def names_by_lightness(self) -> Tuple[str, ...]:
        return self._names_by_lightness

    def entries(self) -> Tuple[PaletteEntry, ...]:
        """Declared entries, in order."""
        return self._entries

    # -- search ------------------------------------------------------------
    def _ensure_tree(self) -> cKDTree:
        with self._lock:
            if self._tree is None:
                opaque = [e for e in self._entries if alpha_int(e.packed) > 0]
                if not opaque:
                    raise ValueError(f"{self.source}: palette has no visible colors to search")
                pts = np.array(
                    [(intensity(e.packed), protan(e.packed), tritan(e.packed)) for e in opaque],
                    dtype=np.float64,
                )
                self._tree = cKDTree(pts)
                self._tree_names = tuple(e.name for e in opaque)
            return self._tree

    def nearest(self, packed: float, threshold: Optional[float] = None) -> Tuple[Optional[str], float]:
        """
        Finds the visible palette color closest to ``packed`` in IPT_HQ.

        Distance is Euclidean over intensity, protan and tritan (each 0..1).

        Returns:
            ``(name, distance)``; the name is None when ``threshold`` is given
            and no color lies within it.
        """
        tree = self._ensure_tree()
        dist, idx = tree.query([intensity(packed), protan(packed), tritan(packed)])
        dist = float(dist)
        if threshold is not None and dist > threshold:
            return None, dist
        return self._tree_names[int(idx)], dist

    # -- registry sync -----------------------------------------------------
    def append_to_known_colors(self, registry: Optional[ColorRegistry] = None) -> int:
        """Adds every name (aliases included) to a color registry; see ``tinct_registry``."""
        return append_to_known_colors(self._named, registry)

    @staticmethod
    def edit_known_colors(registry: Optional[ColorRegistry] = None) -> int:
        """Converts a registry's RGBA colors to IPT_HQ; see ``tinct_registry``."""
        return edit_known_colors(registry)

    # -- display -----------------------------------------------------------
    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source!r}, colors={len(self._entries)})"


@functools.lru_cache(maxsize=None)
def _cached_palette(source: str, cls: Type[NamedPalette]) -> NamedPalette:
    return cls.from_file(source)


def load_palette(source: Union[str, os.PathLike], cls: Type[P] = NamedPalette) -> P:  # type: ignore[assignment]
    """
    Loads a palette once per (source, class) and returns the cached instance.

    Palettes are immutable, so sharing one instance is safe.
    """
    return _cached_palette(os.fspath(source), cls)  # type: ignore[return-value]
