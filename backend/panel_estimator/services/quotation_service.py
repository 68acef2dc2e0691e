"""
Quotation persistence — turns an estimate into a numbered quotation with its
line items, and reads it back with a breakdown consistent with those items.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from panel_estimator.models.estimation_schema import BOMLineItem, EstimateResult
from panel_estimator.models.orm_models import Quotation, QuotationItem
from panel_estimator.models.quotation_schema import (
    QuotationCreate,
    QuotationItemOut,
    QuotationOut,
    QuotationStatus,
)
from panel_estimator.services.amount_in_words import amount_in_words
from panel_estimator.services.catalog_provider import CatalogProvider
from panel_estimator.services.costing_engine import CostingEngine
from panel_estimator.services.estimation_service import estimate
from panel_estimator.services.quotation_numbering import next_quotation_number, year_pattern

logger = logging.getLogger("panel-estimator-db")

# Further numbers tried when an insert collides with a concurrently issued one
NUMBER_COLLISION_RETRIES = 3


async def issue_quotation_number(session: AsyncSession, year: Optional[int] = None) -> str:
    """Next free number for *year* (default: current UTC year)."""
    year = year or datetime.now(timezone.utc).year
    result = await session.execute(
        select(Quotation.quotation_number)
        .where(Quotation.quotation_number.like(year_pattern(year)))
        .order_by(Quotation.id.desc())
        .limit(1)
    )
    return next_quotation_number(result.scalar_one_or_none(), year)


def _item_row(item: BOMLineItem) -> QuotationItem:
    return QuotationItem(
        component_code=item.component_code,
        component_name=item.name,
        category=item.category,
        brand=item.brand,
        specifications=item.specifications,
        quantity=item.quantity,
        unit_price=item.unit_price,
        total_price=item.total_price,
        unit=item.unit,
    )


def _quotation_row(number: str, request: QuotationCreate, result: EstimateResult) -> Quotation:
    cfg = request.configuration
    costs = result.cost_breakdown
    return Quotation(
        quotation_number=number,
        customer_name=request.customer.customer_name,
        customer_address=request.customer.customer_address,
        customer_phone=request.customer.customer_phone,
        customer_email=request.customer.customer_email,
        gst_number=request.customer.gst_number,
        panel_type=cfg.panel_type.value,
        panel_size=cfg.panel_size,
        busbar_type=cfg.busbar_type.value,
        brand_preference=cfg.brand_preference,
        incoming_supply=request.incoming_supply,
        ip_rating=cfg.ip_rating,
        number_of_feeders=cfg.feeder_count,
        motor_count=cfg.motor_count,
        special_requirements=request.special_requirements,
        total_material_cost=costs.material_cost,
        total_production_cost=costs.production_cost,
        profit_margin=costs.profit_margin,
        gst_percentage=costs.tax_percentage,
        final_amount=costs.final_amount,
        status="draft",
        items=[_item_row(i) for i in result.bom_items],
    )


async def save_quotation(
    session: AsyncSession,
    request: QuotationCreate,
    result: EstimateResult,
    year: Optional[int] = None,
) -> Quotation:
    """
    Persist *result* as a new draft quotation. Flushes, does not commit.

    Each insert runs in a savepoint. When a concurrent writer has already
    taken the number, the following number is tried, up to
    NUMBER_COLLISION_RETRIES times; after that the IntegrityError propagates.
    """
    year = year or datetime.now(timezone.utc).year
    number = await issue_quotation_number(session, year)

    for attempt in range(NUMBER_COLLISION_RETRIES + 1):
        quotation = _quotation_row(number, request, result)
        try:
            async with session.begin_nested():
                session.add(quotation)
        except IntegrityError:
            if attempt == NUMBER_COLLISION_RETRIES:
                raise
            logger.warning(f"Quotation number {number} already taken, retrying")
            number = next_quotation_number(number, year)
            continue
        break

    logger.info(f"Quotation {number} saved with {len(result.bom_items)} items")
    return quotation


async def create_quotation(
    session: AsyncSession,
    request: QuotationCreate,
    provider: Optional[CatalogProvider] = None,
    strategy: str = "standard",
    year: Optional[int] = None,
) -> Quotation:
    """Estimate the requested panel and persist it as a quotation."""
    result = await estimate(
        request.configuration,
        provider=provider,
        strategy=strategy,
        profit_margin=request.profit_margin,
        tax_percentage=request.tax_percentage,
    )
    return await save_quotation(session, request, result, year=year)


async def get_quotation(session: AsyncSession, quotation_id: int) -> Optional[Quotation]:
    result = await session.execute(
        select(Quotation)
        .where(Quotation.id == quotation_id)
        .options(selectinload(Quotation.items))
    )
    return result.scalar_one_or_none()


async def update_status(
    session: AsyncSession, quotation_id: int, status: QuotationStatus
) -> Optional[Quotation]:
    quotation = await get_quotation(session, quotation_id)
    if quotation is None:
        return None
    quotation.status = status
    await session.flush()
    logger.info(f"Quotation {quotation.quotation_number} marked {status}")
    return quotation


def to_quotation_out(quotation: Quotation) -> QuotationOut:
    """Response model; the breakdown is re-derived from the stored items."""
    lines = [
        BOMLineItem(
            component_code=i.component_code,
            name=i.component_name,
            category=i.category or "",
            brand=i.brand or "",
            specifications=i.specifications or "",
            quantity=i.quantity,
            unit_price=i.unit_price,
            unit=i.unit or "Pcs",
        )
        for i in quotation.items
    ]
    breakdown = CostingEngine().rollup(
        lines,
        profit_margin=quotation.profit_margin,
        tax_percentage=quotation.gst_percentage,
    )
    return QuotationOut(
        id=quotation.id,
        quotation_number=quotation.quotation_number,
        customer_name=quotation.customer_name,
        customer_address=quotation.customer_address,
        customer_phone=quotation.customer_phone,
        customer_email=quotation.customer_email,
        gst_number=quotation.gst_number,
        panel_type=quotation.panel_type,
        panel_size=quotation.panel_size,
        busbar_type=quotation.busbar_type,
        brand_preference=quotation.brand_preference,
        incoming_supply=quotation.incoming_supply,
        ip_rating=quotation.ip_rating,
        number_of_feeders=quotation.number_of_feeders,
        motor_count=quotation.motor_count,
        special_requirements=quotation.special_requirements,
        status=quotation.status,
        created_at=quotation.created_at,
        cost_breakdown=breakdown,
        amount_in_words=amount_in_words(breakdown.final_amount),
        items=[
            QuotationItemOut(
                component_code=i.component_code,
                name=i.component_name,
                category=i.category,
                brand=i.brand,
                specifications=i.specifications,
                quantity=i.quantity,
                unit_price=i.unit_price,
                total_price=i.total_price,
                unit=i.unit or "Pcs",
            )
            for i in quotation.items
        ],
    )
