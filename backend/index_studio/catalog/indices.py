"""
Predefined spectral index catalogue.

Formulas are written against the Sentinel-2 band ids of
``index_studio.catalog.bands``.  Each entry is checked when the catalogue is
built:

* the formula must validate with no errors,
* ``bands_used`` must be registry ids and match the bands the formula
  actually references,
* the colour ramp key must exist.

A failing entry is a configuration bug and raises ``ValueError`` at import.

MSAVI is usually written with ``^2``; ``^`` is not part of the formula
grammar, so the square is spelled out as a product.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Mapping

from index_studio.catalog.bands import BAND_REGISTRY, BandRegistry
from index_studio.catalog.ramps import COLOR_RAMPS, RampCatalog
from index_studio.core.errors import Failure
from index_studio.core.expression import validate
from index_studio.core.layers import Layer, LayerKind, LayerSpec, LayerStack


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    description: str
    formula: str
    bands_used: tuple[str, ...]
    value_range: tuple[float, float]
    color_ramp: str


class IndexCatalog:
    def __init__(self, definitions: list[IndexDefinition], bands: BandRegistry, ramps: RampCatalog):
        entries: dict[str, IndexDefinition] = {}
        for d in definitions:
            self._check(d, bands, ramps)
            key = d.name.upper()
            if key in entries:
                raise ValueError(f"Duplicate index name: {d.name}")
            entries[key] = d
        self._entries: Mapping[str, IndexDefinition] = MappingProxyType(entries)

    @staticmethod
    def _check(d: IndexDefinition, bands: BandRegistry, ramps: RampCatalog) -> None:
        missing = [b for b in d.bands_used if b not in bands]
        if missing:
            raise ValueError(f"{d.name}: bands not in registry: {missing}")
        result = validate(d.formula, bands.ids())
        if not result.is_valid:
            raise ValueError(f"{d.name}: invalid formula: {[e.message for e in result.errors]}")
        if set(result.used_bands) != set(d.bands_used):
            raise ValueError(
                f"{d.name}: bands_used {list(d.bands_used)} do not match formula bands "
                f"{list(result.used_bands)}"
            )
        if d.color_ramp not in ramps:
            raise ValueError(f"{d.name}: unknown colour ramp {d.color_ramp}")
        lo, hi = d.value_range
        if lo >= hi:
            raise ValueError(f"{d.name}: empty value range {d.value_range}")

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> IndexDefinition | None:
        return self._entries.get(name.upper())

    def list_indices(self) -> list[IndexDefinition]:
        return list(self._entries.values())

    def names(self) -> list[str]:
        return [d.name for d in self._entries.values()]

    def instantiate_layer(
        self,
        name: str,
        stack: LayerStack,
        on: date | None = None,
    ) -> Layer | Failure:
        """Add a layer for catalogue entry *name* to *stack*.

        The layer is named ``"<INDEX> - <YYYY-MM-DD>"`` and takes the entry's
        formula and colour ramp.
        """
        d = self.get(name)
        if d is None:
            return Failure.unknown_index(name, self.names())
        on = on or date.today()
        return stack.add_layer(LayerSpec(
            name=f"{d.name} - {on.isoformat()}",
            kind=LayerKind.INDEX,
            formula=d.formula,
            color_ramp=d.color_ramp,
        ))


# ---------------------------------------------------------------------------
# Catalogue entries
# ---------------------------------------------------------------------------

_DEFINITIONS: list[IndexDefinition] = []


def _register(name: str, description: str, formula: str, bands: list[str],
              value_range: tuple[float, float], color_ramp: str) -> None:
    _DEFINITIONS.append(IndexDefinition(name, description, formula, tuple(bands), value_range, color_ramp))


_register("NDVI",  "Normalized Difference Vegetation Index",
          "(B8 - B4) / (B8 + B4)", ["B8", "B4"], (-1.0, 1.0), "vegetation")

_register("NDWI",  "Normalized Difference Water Index",
          "(B3 - B8) / (B3 + B8)", ["B3", "B8"], (-1.0, 1.0), "water")

_register("MSAVI", "Modified Soil-Adjusted Vegetation Index",
          "(2 * B8 + 1 - sqrt((2 * B8 + 1) * (2 * B8 + 1) - 8 * (B8 - B4))) / 2",
          ["B8", "B4"], (-1.0, 1.0), "vegetation")

_register("SAVI",  "Soil-Adjusted Vegetation Index",
          "((B8 - B4) / (B8 + B4 + 0.5)) * 1.5", ["B8", "B4"], (-1.0, 1.0), "vegetation")

_register("EVI",   "Enhanced Vegetation Index",
          "2.5 * ((B8 - B4) / (B8 + 6 * B4 - 7.5 * B2 + 1))", ["B8", "B4", "B2"], (-1.0, 1.0), "vegetation")

_register("NDMI",  "Normalized Difference Moisture Index",
          "(B8 - B11) / (B8 + B11)", ["B8", "B11"], (-1.0, 1.0), "moisture")


INDEX_CATALOGUE = IndexCatalog(_DEFINITIONS, BAND_REGISTRY, COLOR_RAMPS)
