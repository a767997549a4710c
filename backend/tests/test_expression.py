"""
Tests for backend/index_studio/core/expression.py

Coverage:
  - empty / whitespace formulas short-circuit with EMPTY_FORMULA only
  - ILLEGAL_CHARACTER, UNKNOWN_BAND, UNBALANCED_PARENTHESES are cumulative
  - UNKNOWN_BAND aggregates and de-duplicates tokens
  - used_bands holds only known bands, de-duplicated, even for invalid formulas
  - band token grammar (B8A, B12)
"""
from __future__ import annotations

import pytest

from index_studio.catalog.bands import BAND_REGISTRY
from index_studio.core.errors import FormulaErrorCode
from index_studio.core.expression import band_tokens, validate

NDVI = "(B8 - B4) / (B8 + B4)"


# ---------------------------------------------------------------------------
# Empty formulas
# ---------------------------------------------------------------------------

class TestEmptyFormula:
    @pytest.mark.parametrize("formula", ["", "   ", "\t\n", None])
    def test_empty_reports_only_empty_formula(self, formula):
        result = validate(formula, {"B4", "B8"})
        assert result.is_valid is False
        assert result.codes() == [FormulaErrorCode.EMPTY_FORMULA]
        assert result.used_bands == ()


# ---------------------------------------------------------------------------
# Valid formulas
# ---------------------------------------------------------------------------

class TestValidFormulas:
    def test_ndvi(self):
        result = validate(NDVI, {"B4", "B8"})
        assert result.is_valid is True
        assert result.errors == ()
        assert set(result.used_bands) == {"B4", "B8"}

    def test_used_bands_deduplicated_in_first_use_order(self):
        result = validate(NDVI, {"B4", "B8"})
        assert result.used_bands == ("B8", "B4")

    def test_narrow_nir_token(self):
        result = validate("(B8A - B4) / (B8A + B4)", BAND_REGISTRY.ids())
        assert result.is_valid
        assert result.used_bands == ("B8A", "B4")

    def test_decimals_and_function_names_allowed(self):
        result = validate("sqrt(B8 * 2.5) - 0.5", {"B8"})
        assert result.is_valid

    def test_constant_only_formula_is_valid(self):
        assert validate("1 + 2", set()).is_valid


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

class TestIllegalCharacter:
    @pytest.mark.parametrize("formula", ["@@", "#", "$%&", "^"])
    def test_only_illegal_characters(self, formula):
        result = validate(formula, BAND_REGISTRY.ids())
        assert result.is_valid is False
        assert FormulaErrorCode.ILLEGAL_CHARACTER in result.codes()

    def test_power_operator_rejected(self):
        result = validate("B8^2", {"B8"})
        err = result.error(FormulaErrorCode.ILLEGAL_CHARACTER)
        assert err is not None
        assert err.tokens == ("^",)
        assert result.used_bands == ("B8",)

    def test_each_illegal_character_listed_once(self):
        err = validate("B8 ; B4 ; B3", {"B3", "B4", "B8"}).error(FormulaErrorCode.ILLEGAL_CHARACTER)
        assert err.tokens == (";",)


class TestUnknownBand:
    def test_single_aggregated_error(self):
        result = validate("B99 + B98 - B4", {"B4"})
        unknown = [e for e in result.errors if e.code is FormulaErrorCode.UNKNOWN_BAND]
        assert len(unknown) == 1
        assert unknown[0].tokens == ("B99", "B98")

    def test_repeated_unknown_token_listed_once(self):
        err = validate("B99 * B99 / B99", {"B4"}).error(FormulaErrorCode.UNKNOWN_BAND)
        assert err.tokens == ("B99",)

    def test_band_outside_allowed_subset(self):
        # B11 is a registry band but not part of the allowed selection
        result = validate("(B8 - B11) / (B8 + B11)", {"B4", "B8"})
        assert result.error(FormulaErrorCode.UNKNOWN_BAND).tokens == ("B11",)
        assert result.used_bands == ("B8",)


class TestUnbalancedParentheses:
    @pytest.mark.parametrize("formula", ["(B8 - B4", "B8 - B4)", "((B8)"])
    def test_count_mismatch(self, formula):
        result = validate(formula, {"B4", "B8"})
        assert FormulaErrorCode.UNBALANCED_PARENTHESES in result.codes()

    def test_only_counts_are_compared(self):
        # ")(" has one of each; nesting order is not checked
        result = validate(")B8(", {"B8"})
        assert FormulaErrorCode.UNBALANCED_PARENTHESES not in result.codes()
        assert result.is_valid

    def test_reported_alongside_other_errors(self):
        result = validate("(B8 - B99 @", {"B8"})
        assert result.codes() == [
            FormulaErrorCode.ILLEGAL_CHARACTER,
            FormulaErrorCode.UNKNOWN_BAND,
            FormulaErrorCode.UNBALANCED_PARENTHESES,
        ]


# ---------------------------------------------------------------------------
# Cumulative reporting
# ---------------------------------------------------------------------------

class TestCumulativeErrors:
    def test_unknown_band_and_unbalanced(self):
        result = validate("(B8 - B99) / (B8 + B4", {"B4", "B8"})
        assert result.is_valid is False
        assert FormulaErrorCode.UNBALANCED_PARENTHESES in result.codes()
        assert result.error(FormulaErrorCode.UNKNOWN_BAND).tokens == ("B99",)
        assert set(result.used_bands) == {"B4", "B8"}

    def test_at_most_one_error_per_rule(self):
        result = validate("((B99 @ B98 # B97", {"B4"})
        assert len(result.codes()) == len(set(result.codes()))

    def test_messages_are_present(self):
        result = validate("(B99 @", {"B4"})
        assert all(e.message for e in result.errors)


class TestBandTokens:
    def test_tokens_in_order(self):
        assert band_tokens("B12 + B8A - B12 * B1") == ["B12", "B8A", "B1"]

    def test_no_tokens(self):
        assert band_tokens("1 + 2") == []

    def test_non_ascii_digits_are_not_band_tokens(self):
        assert band_tokens("B\u0668 - B4") == ["B4"]

    def test_non_ascii_digit_is_only_an_illegal_character(self):
        result = validate("B\u0668 - B4", {"B4", "B8"})
        assert result.codes() == [FormulaErrorCode.ILLEGAL_CHARACTER]
        assert result.error(FormulaErrorCode.ILLEGAL_CHARACTER).tokens == ("\u0668",)
        assert result.used_bands == ("B4",)
