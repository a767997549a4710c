"""
Sentinel-2 MSI band registry.

Band ids follow the ESA naming used in band-math formulas (``B1`` … ``B12``,
plus the narrow-NIR ``B8A``).  The registry is built once at import time and
handed to the validator, the layer stack and the index catalogue; nothing
mutates it afterwards.

Note that ``B10`` (SWIR cirrus) is listed for completeness even though the
L2A product does not ship it as a surface-reflectance asset.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


@dataclass(frozen=True)
class Band:
    id: str
    name: str
    wavelength_nm: float
    resolution_m: float
    display_color: str   # hex, e.g. "#DC2626"


class BandRegistry:
    """Read-only, ordered lookup of bands by id."""

    def __init__(self, bands: list[Band]):
        by_id: dict[str, Band] = {}
        for band in bands:
            if band.id in by_id:
                raise ValueError(f"Duplicate band id: {band.id}")
            by_id[band.id] = band
        self._bands: Mapping[str, Band] = MappingProxyType(by_id)

    def __contains__(self, band_id: object) -> bool:
        return band_id in self._bands

    def __iter__(self) -> Iterator[Band]:
        return iter(self._bands.values())

    def __len__(self) -> int:
        return len(self._bands)

    def get(self, band_id: str) -> Band | None:
        return self._bands.get(band_id)

    def ids(self) -> frozenset[str]:
        return frozenset(self._bands)


# ---------------------------------------------------------------------------
# Sentinel-2 bands (display order)
# ---------------------------------------------------------------------------

SENTINEL2_BANDS: list[Band] = [
    Band("B1",  "Coastal aerosol", 443,  60, "#6B46C1"),
    Band("B2",  "Blue",            490,  10, "#2563EB"),
    Band("B3",  "Green",           560,  10, "#16A34A"),
    Band("B4",  "Red",             665,  10, "#DC2626"),
    Band("B5",  "Red Edge 1",      705,  20, "#EA580C"),
    Band("B6",  "Red Edge 2",      740,  20, "#D97706"),
    Band("B7",  "Red Edge 3",      783,  20, "#CA8A04"),
    Band("B8",  "NIR",             842,  10, "#B91C1C"),
    Band("B8A", "Narrow NIR",      865,  20, "#991B1B"),
    Band("B9",  "Water vapour",    945,  60, "#1E40AF"),
    Band("B10", "SWIR - Cirrus",   1375, 60, "#7C3AED"),
    Band("B11", "SWIR 1",          1610, 20, "#A21CAF"),
    Band("B12", "SWIR 2",          2190, 20, "#BE185D"),
]

BAND_REGISTRY = BandRegistry(SENTINEL2_BANDS)
