"""Estimation API route — panel configuration in, BOM and cost breakdown out."""
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query

from panel_estimator.api.deps import get_catalog_provider
from panel_estimator.models.estimation_schema import EstimateResult
from panel_estimator.services.catalog_provider import CatalogProvider
from panel_estimator.services.estimation_service import estimate

router = APIRouter(prefix="/api", tags=["Estimation"])


@router.post("/generate-estimation", response_model=EstimateResult)
async def generate_estimation(
    payload: Dict[str, Any] = Body(...),
    strategy: Literal["standard", "rules"] = Query("standard"),
    profit_margin: Optional[float] = Query(None, alias="profitMargin", ge=0),
    tax_percentage: Optional[float] = Query(None, alias="taxPercentage", ge=0),
    provider: CatalogProvider = Depends(get_catalog_provider),
):
    """
    Expand and price a panel configuration.

    The body is validated by the estimation service itself so that
    configuration errors surface as InvalidPanelConfiguration (422) with the
    same payload shape whether the caller is HTTP or in-process.
    """
    return await estimate(
        payload,
        provider=provider,
        strategy=strategy,
        profit_margin=profit_margin,
        tax_percentage=tax_percentage,
    )
