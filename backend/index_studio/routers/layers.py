"""
Layer stack endpoints for the current session.

Every route requires ``create_analysis``.  Core failures map to:

- INVALID_SPEC / INVALID_FORMULA → 422 with the validator's error list
- LAYER_NOT_FOUND / UNKNOWN_INDEX → 404 (UNKNOWN_INDEX lists valid names)
"""
from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from index_studio.catalog.indices import IndexCatalog
from index_studio.core.access import Permission
from index_studio.core.errors import Failure, FailureCode
from index_studio.core.layers import Layer, LayerSpec
from index_studio.core.operations import build_index_spec
from index_studio.dependencies import get_index_catalogue, require_permission
from index_studio.schemas import FormulaErrorRead, LayerCreate, LayerFromOperation, LayerRead
from index_studio.sessions import Session

router = APIRouter(prefix="/layers", tags=["layers"])

_can_edit = require_permission(Permission.CREATE_ANALYSIS)

_FAILURE_STATUS = {
    FailureCode.INVALID_SPEC: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureCode.INVALID_FORMULA: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureCode.LAYER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureCode.UNKNOWN_INDEX: status.HTTP_404_NOT_FOUND,
}


def _raise_for(failure: Failure) -> NoReturn:
    detail: dict = {"code": failure.code.value, "message": failure.message}
    if failure.errors:
        detail["errors"] = [
            FormulaErrorRead.model_validate(e).model_dump(mode="json") for e in failure.errors
        ]
    if failure.valid_names:
        detail["valid_names"] = list(failure.valid_names)
    raise HTTPException(status_code=_FAILURE_STATUS[failure.code], detail=detail)


def _layer_or_raise(result: Layer | Failure) -> LayerRead:
    if isinstance(result, Failure):
        _raise_for(result)
    return LayerRead.model_validate(result)


@router.get("", response_model=list[LayerRead])
async def list_layers(session: Session = Depends(_can_edit)):
    """Return the session's layers, bottom to top."""
    return [LayerRead.model_validate(layer) for layer in session.stack.list_layers()]


@router.post("", response_model=LayerRead, status_code=status.HTTP_201_CREATED)
async def create_layer(body: LayerCreate, session: Session = Depends(_can_edit)):
    spec = LayerSpec(
        name=body.name,
        kind=body.kind,
        formula=body.formula,
        color_ramp=body.color_ramp,
        visible=body.visible,
    )
    return _layer_or_raise(session.stack.add_layer(spec))


@router.post("/from-index/{index_name}", response_model=LayerRead, status_code=status.HTTP_201_CREATED)
async def create_layer_from_index(
    index_name: str,
    session: Session = Depends(_can_edit),
    catalogue: IndexCatalog = Depends(get_index_catalogue),
):
    """Add a predefined index (e.g. NDVI) as a new layer dated today."""
    return _layer_or_raise(catalogue.instantiate_layer(index_name, session.stack))


@router.post("/from-operation", response_model=LayerRead, status_code=status.HTTP_201_CREATED)
async def create_layer_from_operation(body: LayerFromOperation, session: Session = Depends(_can_edit)):
    """Index builder: two bands + an operation (or a custom formula)."""
    spec = build_index_spec(
        name=body.name,
        kind=body.operation,
        band_a=body.band_a,
        band_b=body.band_b,
        custom_formula=body.custom_formula,
        color_ramp=body.color_ramp,
    )
    if isinstance(spec, Failure):
        _raise_for(spec)
    return _layer_or_raise(session.stack.add_layer(spec))


@router.post("/{layer_id}/toggle", response_model=LayerRead)
async def toggle_layer(layer_id: int, session: Session = Depends(_can_edit)):
    return _layer_or_raise(session.stack.toggle_visibility(layer_id))


@router.delete("/{layer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_layer(layer_id: int, session: Session = Depends(_can_edit)):
    failure = session.stack.remove_layer(layer_id)
    if failure is not None:
        _raise_for(failure)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
