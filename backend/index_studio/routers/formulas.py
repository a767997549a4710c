"""
Formula endpoints.

- GET  /formulas/operations  — the two-band operations offered by the builder
- POST /formulas/validate    — run the validator, return the full error list
- POST /formulas/generate    — preview the formula an operation produces
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from index_studio.catalog.bands import BandRegistry
from index_studio.core.expression import validate
from index_studio.core.operations import OPERATIONS, build_formula
from index_studio.dependencies import get_bands
from index_studio.schemas import (
    GenerateRead,
    GenerateRequest,
    OperationRead,
    ValidationRead,
    ValidationRequest,
)

router = APIRouter(prefix="/formulas", tags=["formulas"])


@router.get("/operations", response_model=list[OperationRead])
async def list_operations():
    return [OperationRead.model_validate(op) for op in OPERATIONS.values()]


@router.post("/validate", response_model=ValidationRead)
async def validate_formula(body: ValidationRequest, bands: BandRegistry = Depends(get_bands)):
    """Validation never fails the request; problems come back in ``errors``."""
    allowed = bands.ids()
    if body.allowed_bands is not None:
        # Only registry bands can be allowed, whatever the caller sends.
        allowed = allowed & set(body.allowed_bands)
    return ValidationRead.model_validate(validate(body.formula, allowed))


@router.post("/generate", response_model=GenerateRead)
async def generate_formula(body: GenerateRequest, bands: BandRegistry = Depends(get_bands)):
    formula = build_formula(body.operation, body.band_a, body.band_b, body.custom_formula)
    return GenerateRead(
        formula=formula,
        validation=ValidationRead.model_validate(validate(formula, bands.ids())),
    )
