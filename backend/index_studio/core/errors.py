"""
Outcome values shared by the validator, the layer stack and the index
catalogue.  None of these are exceptions: core operations hand them back
to the caller, and the routers decide how to present them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FormulaErrorCode(str, Enum):
    EMPTY_FORMULA = "empty_formula"
    ILLEGAL_CHARACTER = "illegal_character"
    UNKNOWN_BAND = "unknown_band"
    UNBALANCED_PARENTHESES = "unbalanced_parentheses"


class FailureCode(str, Enum):
    INVALID_FORMULA = "invalid_formula"
    INVALID_SPEC = "invalid_spec"
    LAYER_NOT_FOUND = "layer_not_found"
    UNKNOWN_INDEX = "unknown_index"


@dataclass(frozen=True)
class FormulaError:
    """One failed validation rule.

    ``tokens`` carries the offending input: the unknown band ids for
    UNKNOWN_BAND, the rejected characters for ILLEGAL_CHARACTER.
    """
    code: FormulaErrorCode
    message: str
    tokens: tuple[str, ...] = ()


@dataclass(frozen=True)
class Failure:
    code: FailureCode
    message: str
    errors: tuple[FormulaError, ...] = ()
    valid_names: tuple[str, ...] = ()

    @classmethod
    def invalid_formula(cls, errors) -> "Failure":
        return cls(
            FailureCode.INVALID_FORMULA,
            "Formula failed validation",
            errors=tuple(errors),
        )

    @classmethod
    def invalid_spec(cls, message: str) -> "Failure":
        return cls(FailureCode.INVALID_SPEC, message)

    @classmethod
    def layer_not_found(cls, layer_id: int) -> "Failure":
        return cls(FailureCode.LAYER_NOT_FOUND, f"Layer {layer_id} not found")

    @classmethod
    def unknown_index(cls, name: str, valid_names) -> "Failure":
        return cls(
            FailureCode.UNKNOWN_INDEX,
            f"Unknown index '{name}'",
            valid_names=tuple(valid_names),
        )


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[FormulaError, ...] = ()
    used_bands: tuple[str, ...] = field(default_factory=tuple)

    def codes(self) -> list[FormulaErrorCode]:
        return [e.code for e in self.errors]

    def error(self, code: FormulaErrorCode) -> FormulaError | None:
        for e in self.errors:
            if e.code is code:
                return e
        return None
