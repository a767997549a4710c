from fastapi import APIRouter, Depends

from index_studio.catalog.bands import BandRegistry
from index_studio.catalog.indices import IndexCatalog
from index_studio.catalog.ramps import RampCatalog
from index_studio.dependencies import get_bands, get_index_catalogue, get_ramps
from index_studio.schemas import BandRead, ColorRampRead, IndexDefinitionRead

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/bands", response_model=list[BandRead])
async def list_bands(bands: BandRegistry = Depends(get_bands)):
    """Return the band registry in display order."""
    return [BandRead.model_validate(b) for b in bands]


@router.get("/color-ramps", response_model=list[ColorRampRead])
async def list_color_ramps(ramps: RampCatalog = Depends(get_ramps)):
    return [ColorRampRead.model_validate(r) for r in ramps]


@router.get("/indices", response_model=list[IndexDefinitionRead])
async def list_indices(catalogue: IndexCatalog = Depends(get_index_catalogue)):
    """Return the predefined indices in catalogue order."""
    return [IndexDefinitionRead.model_validate(d) for d in catalogue.list_indices()]
