"""
Ordered layer stack for one analysis session.

The stack knows nothing about users: callers check permissions before
calling any mutating method.  Every mutator returns either the affected
``Layer`` or a ``Failure`` value.

An instance is not safe to share between concurrent writers; the session
store keeps one stack per session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from index_studio.catalog.bands import BandRegistry
from index_studio.catalog.ramps import RampCatalog
from index_studio.core.errors import Failure
from index_studio.core.expression import validate

logger = logging.getLogger(__name__)


class LayerKind(str, Enum):
    RASTER = "raster"
    INDEX = "index"


@dataclass(frozen=True)
class LayerSpec:
    name: str
    kind: LayerKind = LayerKind.INDEX
    formula: str | None = None
    color_ramp: str | None = None
    visible: bool = True


@dataclass
class Layer:
    id: int
    name: str
    kind: LayerKind
    visible: bool = True
    formula: str | None = None
    color_ramp: str | None = None


class LayerStack:
    def __init__(self, bands: BandRegistry, ramps: RampCatalog | None = None, first_id: int = 1):
        self._bands = bands
        self._ramps = ramps
        self._layers: list[Layer] = []
        self._next_id = first_id

    def __len__(self) -> int:
        return len(self._layers)

    def _find(self, layer_id: int) -> int | None:
        for pos, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return pos
        return None

    def add_layer(self, spec: LayerSpec) -> Layer | Failure:
        """Validate *spec* and append it to the top of the stack."""
        name = (spec.name or "").strip()
        if not name:
            return Failure.invalid_spec("Layer name is required")
        try:
            kind = LayerKind(spec.kind)
        except ValueError:
            return Failure.invalid_spec(f"Unknown layer kind: {spec.kind!r}")
        if kind is LayerKind.INDEX and spec.formula is None:
            return Failure.invalid_spec("Index layers require a formula")
        if spec.color_ramp is not None and self._ramps is not None and spec.color_ramp not in self._ramps:
            return Failure.invalid_spec(f"Unknown colour ramp: {spec.color_ramp}")

        # Raster layers may carry a formula too (e.g. a band composite); it
        # is held to the same rules.
        if spec.formula is not None:
            result = validate(spec.formula, self._bands.ids())
            if not result.is_valid:
                logger.info("Rejected layer %r: %s", name, [e.code.value for e in result.errors])
                return Failure.invalid_formula(result.errors)

        layer = Layer(
            id=self._next_id,
            name=name,
            kind=kind,
            visible=spec.visible,
            formula=spec.formula,
            color_ramp=spec.color_ramp,
        )
        self._next_id += 1
        self._layers.append(layer)
        logger.info("Added layer %d (%s, %s)", layer.id, layer.name, kind.value)
        return replace(layer)

    def toggle_visibility(self, layer_id: int) -> Layer | Failure:
        pos = self._find(layer_id)
        if pos is None:
            return Failure.layer_not_found(layer_id)
        layer = self._layers[pos]
        layer.visible = not layer.visible
        logger.info("Layer %d visible=%s", layer_id, layer.visible)
        return replace(layer)

    def remove_layer(self, layer_id: int) -> None | Failure:
        """Drop the layer; a second call for the same id reports LAYER_NOT_FOUND."""
        pos = self._find(layer_id)
        if pos is None:
            return Failure.layer_not_found(layer_id)
        del self._layers[pos]
        logger.info("Removed layer %d", layer_id)
        return None

    def list_layers(self) -> list[Layer]:
        """Bottom-to-top snapshot; later mutations do not show through it."""
        return [replace(layer) for layer in self._layers]
