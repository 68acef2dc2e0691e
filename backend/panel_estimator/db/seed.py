"""
Catalog seeding — writes the price book, default panel types and default BOM
rules into the catalog tables. Idempotent: existing rows (matched by code) are
left untouched, so prices edited in the database survive a restart.
"""
import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from panel_estimator.models.orm_models import BomRule, Component, PanelType
from panel_estimator.services.price_book import (
    DEFAULT_BOM_RULES,
    DEFAULT_PANEL_TYPES,
    PRICE_BOOK,
)

logger = logging.getLogger("panel-estimator-db")


async def seed_catalog(session: AsyncSession) -> Dict[str, int]:
    """Insert missing catalog rows. Returns counts of rows added per table."""
    added = {"components": 0, "panel_types": 0, "bom_rules": 0}

    existing_codes = set((await session.execute(select(Component.component_code))).scalars().all())
    for entry in PRICE_BOOK.values():
        if entry.code in existing_codes:
            continue
        session.add(Component(
            component_code=entry.code,
            name=entry.name,
            category=entry.category,
            brand=entry.brand,
            specifications=entry.specifications,
            unit_price=entry.unit_price,
            stock_unit=entry.stock_unit,
        ))
        added["components"] += 1

    existing_panels = set((await session.execute(select(PanelType.panel_code))).scalars().all())
    for pt in DEFAULT_PANEL_TYPES:
        if pt["panel_code"] in existing_panels:
            continue
        session.add(PanelType(**pt))
        added["panel_types"] += 1

    await session.flush()

    component_ids = dict((await session.execute(select(Component.component_code, Component.id))).all())
    panel_ids = dict((await session.execute(select(PanelType.panel_code, PanelType.id))).all())
    existing_rules = set((await session.execute(select(BomRule.panel_type_id, BomRule.component_id))).all())

    for rule in DEFAULT_BOM_RULES:
        key = (panel_ids.get(rule.panel_type), component_ids.get(rule.component_code))
        if None in key:
            logger.warning(
                "Seed rule skipped, unknown panel type or component",
                extra={"component_code": rule.component_code},
            )
            continue
        if key in existing_rules:
            continue
        session.add(BomRule(
            panel_type_id=key[0],
            component_id=key[1],
            quantity_rule=str(rule.quantity_rule),
            default_quantity=rule.base_quantity,
            is_mandatory=rule.mandatory,
        ))
        added["bom_rules"] += 1

    await session.flush()
    logger.info(f"Catalog seeded: {added}")
    return added
