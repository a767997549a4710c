"""
Two-band formula generators used by the index builder.

Each operation turns a pair of band ids into a formula string; ``custom``
passes a user-written formula through untouched.  Generated formulas still
go through the validator before a layer is created from them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from index_studio.core.errors import Failure
from index_studio.core.layers import LayerKind, LayerSpec


class OperationKind(str, Enum):
    NORMALIZED_DIFFERENCE = "normalized_difference"
    RATIO = "ratio"
    DIFFERENCE = "difference"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Operation:
    kind: OperationKind
    label: str
    description: str
    template: Callable[[str, str], str] | None = None

    def formula(self, band_a: str, band_b: str, custom_formula: str | None = None) -> str:
        if self.template is None:
            return custom_formula or ""
        return self.template(band_a, band_b)


OPERATIONS: dict[OperationKind, Operation] = {
    op.kind: op
    for op in (
        Operation(
            OperationKind.NORMALIZED_DIFFERENCE,
            "Normalized difference",
            "Standard form for normalized indices",
            lambda a, b: f"({a} - {b}) / ({a} + {b})",
        ),
        Operation(
            OperationKind.RATIO,
            "Simple ratio",
            "Plain division between bands",
            lambda a, b: f"{a} / {b}",
        ),
        Operation(
            OperationKind.DIFFERENCE,
            "Difference",
            "Plain subtraction between bands",
            lambda a, b: f"{a} - {b}",
        ),
        Operation(
            OperationKind.CUSTOM,
            "Custom formula",
            "Write your own formula",
        ),
    )
}


def build_formula(
    kind: OperationKind,
    band_a: str,
    band_b: str,
    custom_formula: str | None = None,
) -> str:
    return OPERATIONS[OperationKind(kind)].formula(band_a, band_b, custom_formula)


def build_index_spec(
    name: str,
    kind: OperationKind,
    band_a: str,
    band_b: str,
    custom_formula: str | None = None,
    color_ramp: str | None = None,
) -> LayerSpec | Failure:
    """Turn the builder form into a ``LayerSpec``.

    Name and both bands are required for every operation, including
    ``custom``.  Formula validity is left to ``LayerStack.add_layer``.
    """
    if not (name or "").strip() or not band_a or not band_b:
        return Failure.invalid_spec("Name and both bands are required")
    try:
        kind = OperationKind(kind)
    except ValueError:
        return Failure.invalid_spec(f"Unknown operation: {kind!r}")
    if kind is OperationKind.CUSTOM and custom_formula is None:
        return Failure.invalid_spec("Custom operation requires a formula")
    return LayerSpec(
        name=name,
        kind=LayerKind.INDEX,
        formula=build_formula(kind, band_a, band_b, custom_formula),
        color_ramp=color_ramp,
    )
