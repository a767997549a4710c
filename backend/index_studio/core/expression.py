"""
Band-math formula validation.

Formulas are stored and handed to the renderer as opaque strings; they are
never evaluated here.  Validation is a flat scan:

1. empty formula            → EMPTY_FORMULA (nothing else is checked)
2. characters outside       → ILLEGAL_CHARACTER
   letters, digits, ``+ - * / ( ) .`` and whitespace
3. band tokens (``B`` + digits + optional letter, e.g. ``B8A``) that are
   not in the allowed set  → one aggregated UNKNOWN_BAND
4. ``(`` count != ``)`` count → UNBALANCED_PARENTHESES

Rules 2-4 are independent; every rule that fails contributes one error so
the caller can show the whole list at once.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from index_studio.core.errors import FormulaError, FormulaErrorCode, ValidationResult

logger = logging.getLogger(__name__)

BAND_TOKEN_RE = re.compile(r"B[0-9]+[A-Z]?")
_ILLEGAL_CHAR_RE = re.compile(r"[^A-Za-z0-9+\-*/().\s]")


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def band_tokens(formula: str) -> list[str]:
    """Return the distinct band tokens in *formula*, in order of first use."""
    return _unique(BAND_TOKEN_RE.findall(formula))


def validate(formula: str | None, allowed_bands: Iterable[str]) -> ValidationResult:
    """Check *formula* against the grammar and the *allowed_bands* ids.

    Always returns a result; malformed input is reported through
    ``ValidationResult.errors``.
    """
    formula = formula or ""
    if not formula.strip():
        return ValidationResult(
            is_valid=False,
            errors=(FormulaError(FormulaErrorCode.EMPTY_FORMULA, "Formula cannot be empty"),),
        )

    allowed = set(allowed_bands)
    errors: list[FormulaError] = []

    illegal = _unique(_ILLEGAL_CHAR_RE.findall(formula))
    if illegal:
        errors.append(FormulaError(
            FormulaErrorCode.ILLEGAL_CHARACTER,
            "Formula contains characters that are not allowed: " + " ".join(illegal),
            tokens=tuple(illegal),
        ))

    tokens = band_tokens(formula)
    unknown = [t for t in tokens if t not in allowed]
    if unknown:
        errors.append(FormulaError(
            FormulaErrorCode.UNKNOWN_BAND,
            "Unknown bands: " + ", ".join(unknown),
            tokens=tuple(unknown),
        ))

    if formula.count("(") != formula.count(")"):
        errors.append(FormulaError(
            FormulaErrorCode.UNBALANCED_PARENTHESES,
            "Unbalanced parentheses",
        ))

    result = ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        used_bands=tuple(t for t in tokens if t in allowed),
    )
    logger.debug("Validated %r: %s", formula, [e.code.value for e in errors] or "ok")
    return result
