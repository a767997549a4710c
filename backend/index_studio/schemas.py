from __future__ import annotations

from pydantic import BaseModel, Field

from index_studio.core.errors import FormulaErrorCode
from index_studio.core.layers import LayerKind
from index_studio.core.operations import OperationKind


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

class BandRead(BaseModel):
    id: str
    name: str
    wavelength_nm: float
    resolution_m: float
    display_color: str

    model_config = {"from_attributes": True}


class ColorRampRead(BaseModel):
    key: str
    colors: list[str]

    model_config = {"from_attributes": True}


class IndexDefinitionRead(BaseModel):
    name: str
    description: str
    formula: str
    bands_used: list[str]
    value_range: tuple[float, float]
    color_ramp: str

    model_config = {"from_attributes": True}


class OperationRead(BaseModel):
    kind: OperationKind
    label: str
    description: str

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

class FormulaErrorRead(BaseModel):
    code: FormulaErrorCode
    message: str
    tokens: list[str] = []

    model_config = {"from_attributes": True}


class ValidationRequest(BaseModel):
    formula: str
    allowed_bands: list[str] | None = Field(
        None,
        description="Subset of registry band ids to allow; defaults to the whole registry",
    )


class ValidationRead(BaseModel):
    is_valid: bool
    errors: list[FormulaErrorRead]
    used_bands: list[str]

    model_config = {"from_attributes": True}


class GenerateRequest(BaseModel):
    operation: OperationKind
    band_a: str
    band_b: str
    custom_formula: str | None = None


class GenerateRead(BaseModel):
    formula: str
    validation: ValidationRead


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

class LayerCreate(BaseModel):
    """Raw layer spec.  Field checks are left to the layer stack."""
    name: str = ""
    kind: LayerKind = LayerKind.INDEX
    formula: str | None = None
    color_ramp: str | None = None
    visible: bool = True


class LayerFromOperation(BaseModel):
    name: str = ""
    operation: OperationKind = OperationKind.NORMALIZED_DIFFERENCE
    band_a: str = ""
    band_b: str = ""
    custom_formula: str | None = None
    color_ramp: str | None = None


class LayerRead(BaseModel):
    id: int
    name: str
    kind: LayerKind
    visible: bool
    formula: str | None
    color_ramp: str | None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Auth / navigation
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    role: str
    role_name: str | None
    permissions: list[str]


class LoginRead(BaseModel):
    token: str
    user: UserRead


class RoleRead(BaseModel):
    name: str
    display_name: str
    permissions: list[str]


class SectionRead(BaseModel):
    id: str
    label: str
    permission: str | None


class SectionAccessRead(BaseModel):
    """``granted=False`` is the "access restricted" state, not an error."""
    section: str
    granted: bool
    message: str
