"""
Colour ramps used to render index values.

The ColorBrewer palettes are listed low → high.  The thematic keys
(``vegetation``, ``water``, ``moisture``) are the ones the index catalogue
refers to; each resolves to one of the named palettes.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


@dataclass(frozen=True)
class ColorRamp:
    key: str
    colors: tuple[str, ...]


_PALETTES: dict[str, tuple[str, ...]] = {
    "RdYlGn": ("#a50026", "#d73027", "#f46d43", "#fdae61", "#fee08b", "#ffffbf",
               "#d9ef8b", "#a6d96a", "#66bd63", "#1a9850", "#006837"),
    "Blues": ("#f7fbff", "#deebf7", "#c6dbef", "#9ecae1", "#6baed6", "#4292c6",
              "#2171b5", "#08519c", "#08306b"),
    "YlGn": ("#ffffe5", "#f7fcb9", "#d9f0a3", "#addd8e", "#78c679", "#41ab5d",
             "#238443", "#006837", "#004529"),
    "BrBG": ("#543005", "#8c510a", "#bf812d", "#dfc27d", "#f6e8c3", "#f5f5f5",
             "#c7eae5", "#80cdc1", "#35978f", "#01665e", "#003c30"),
    "Spectral": ("#5e4fa2", "#3288bd", "#66c2a5", "#abdda4", "#e6f598", "#ffffbf",
                 "#fee08b", "#fdae61", "#f46d43", "#d53e4f", "#9e0142"),
    "RdBu": ("#67001f", "#b2182b", "#d6604d", "#f4a582", "#fddbc7", "#f7f7f7",
             "#d1e5f0", "#92c5de", "#4393c3", "#2166ac", "#053061"),
}

# Thematic key → palette name
THEMATIC_RAMPS: dict[str, str] = {
    "vegetation": "RdYlGn",
    "water": "Blues",
    "moisture": "BrBG",
}

DEFAULT_RAMP = "RdYlGn"


class RampCatalog:
    def __init__(self, ramps: list[ColorRamp]):
        self._ramps: Mapping[str, ColorRamp] = MappingProxyType({r.key: r for r in ramps})

    def __contains__(self, key: object) -> bool:
        return key in self._ramps

    def __iter__(self) -> Iterator[ColorRamp]:
        return iter(self._ramps.values())

    def get(self, key: str) -> ColorRamp | None:
        return self._ramps.get(key)


def _build() -> RampCatalog:
    ramps = [ColorRamp(key, colors) for key, colors in _PALETTES.items()]
    ramps += [ColorRamp(key, _PALETTES[palette]) for key, palette in THEMATIC_RAMPS.items()]
    return RampCatalog(ramps)


COLOR_RAMPS = _build()
