"""Quotation API routes — create, fetch, status transitions."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from panel_estimator.api.deps import get_catalog_provider
from panel_estimator.db import get_db
from panel_estimator.models.quotation_schema import (
    QuotationCreate,
    QuotationOut,
    QuotationStatusUpdate,
)
from panel_estimator.services import quotation_service
from panel_estimator.services.catalog_provider import CatalogProvider

router = APIRouter(prefix="/api/quotations", tags=["Quotations"])
logger = logging.getLogger("panel-estimator-api")


@router.post("", response_model=QuotationOut, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    body: QuotationCreate,
    strategy: Literal["standard", "rules"] = Query("standard"),
    db: AsyncSession = Depends(get_db),
    provider: CatalogProvider = Depends(get_catalog_provider),
):
    try:
        quotation = await quotation_service.create_quotation(db, body, provider=provider, strategy=strategy)
    except IntegrityError:
        logger.warning("Quotation number collision persisted after retries")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Quotation number already issued, please retry",
        )
    return quotation_service.to_quotation_out(quotation)


@router.get("/{quotation_id}", response_model=QuotationOut)
async def get_quotation(quotation_id: int, db: AsyncSession = Depends(get_db)):
    quotation = await quotation_service.get_quotation(db, quotation_id)
    if quotation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quotation not found")
    return quotation_service.to_quotation_out(quotation)


@router.put("/{quotation_id}/status", response_model=QuotationOut)
async def update_quotation_status(
    quotation_id: int,
    body: QuotationStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    quotation = await quotation_service.update_status(db, quotation_id, body.status)
    if quotation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quotation not found")
    return quotation_service.to_quotation_out(quotation)
