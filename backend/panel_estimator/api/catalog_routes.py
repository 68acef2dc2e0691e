"""Catalog API routes — panel types and component lookup."""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from panel_estimator.api.deps import get_catalog_provider
from panel_estimator.models.estimation_schema import ComponentCatalogEntry
from panel_estimator.services.catalog_provider import CatalogProvider

router = APIRouter(prefix="/api", tags=["Catalog"])
logger = logging.getLogger("panel-estimator-catalog")


@router.get("/panel-types")
async def list_panel_types(
    provider: CatalogProvider = Depends(get_catalog_provider),
) -> List[Dict[str, Any]]:
    return await provider.list_panel_types()


@router.get("/components", response_model=List[ComponentCatalogEntry])
async def list_components(
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    provider: CatalogProvider = Depends(get_catalog_provider),
):
    """Catalog components, optionally filtered by category and/or brand."""
    entries = await provider.list_components(category=category, brand=brand)
    logger.debug(f"Component lookup category={category} brand={brand}: {len(entries)} rows")
    return entries
