"""
Tests for backend/index_studio/core/operations.py

Coverage:
  - generator output for each operation
  - every generated formula over registry bands passes validation
  - custom operation is an identity on the supplied formula
  - build_index_spec required-field checks
"""
from __future__ import annotations

from index_studio.catalog.bands import BAND_REGISTRY
from index_studio.core.errors import Failure, FailureCode
from index_studio.core.expression import validate
from index_studio.core.layers import LayerKind, LayerSpec
from index_studio.core.operations import (
    OPERATIONS,
    OperationKind,
    build_formula,
    build_index_spec,
)


class TestGenerators:
    def test_normalized_difference(self):
        assert build_formula(OperationKind.NORMALIZED_DIFFERENCE, "B8", "B4") == "(B8 - B4) / (B8 + B4)"

    def test_ratio(self):
        assert build_formula(OperationKind.RATIO, "B8", "B4") == "B8 / B4"

    def test_difference(self):
        assert build_formula(OperationKind.DIFFERENCE, "B8", "B4") == "B8 - B4"

    def test_custom_returns_supplied_formula(self):
        formula = "(B8 - B4) * 2"
        assert build_formula(OperationKind.CUSTOM, "B1", "B2", formula) == formula

    def test_accepts_string_kind(self):
        assert build_formula("ratio", "B3", "B8") == "B3 / B8"

    def test_every_operation_has_label_and_description(self):
        assert set(OPERATIONS) == set(OperationKind)
        for op in OPERATIONS.values():
            assert op.label and op.description


class TestGeneratedFormulasValidate:
    def test_all_band_pairs_validate(self):
        ids = BAND_REGISTRY.ids()
        generated = [k for k in OperationKind if k is not OperationKind.CUSTOM]
        for kind in generated:
            for a in ids:
                for b in ids:
                    result = validate(build_formula(kind, a, b), ids)
                    assert result.is_valid, (kind, a, b, result.errors)


class TestBuildIndexSpec:
    def test_builds_index_spec(self):
        spec = build_index_spec("My NDVI", OperationKind.NORMALIZED_DIFFERENCE, "B8", "B4", color_ramp="RdYlGn")
        assert isinstance(spec, LayerSpec)
        assert spec.kind is LayerKind.INDEX
        assert spec.formula == "(B8 - B4) / (B8 + B4)"
        assert spec.color_ramp == "RdYlGn"

    def test_missing_name(self):
        spec = build_index_spec("  ", OperationKind.RATIO, "B8", "B4")
        assert isinstance(spec, Failure)
        assert spec.code is FailureCode.INVALID_SPEC

    def test_missing_band(self):
        spec = build_index_spec("x", OperationKind.RATIO, "B8", "")
        assert isinstance(spec, Failure)
        assert spec.code is FailureCode.INVALID_SPEC

    def test_custom_still_requires_bands(self):
        spec = build_index_spec("x", OperationKind.CUSTOM, "", "", custom_formula="B8 / B4")
        assert isinstance(spec, Failure)

    def test_custom_without_formula(self):
        spec = build_index_spec("x", OperationKind.CUSTOM, "B8", "B4")
        assert isinstance(spec, Failure)
        assert spec.code is FailureCode.INVALID_SPEC

    def test_unknown_operation(self):
        spec = build_index_spec("x", "power", "B8", "B4")
        assert isinstance(spec, Failure)
        assert spec.code is FailureCode.INVALID_SPEC
