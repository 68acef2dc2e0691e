"""
Catalog Providers — read-only component and rule lookups for the BOM engine.

Two interchangeable implementations:

  StaticCatalogProvider    in-process, backed by the price book. Used where no
                           catalog database is configured, and in tests.
  DatabaseCatalogProvider  async SQLAlchemy session over the components,
                           panel_types and bom_rules tables.

A lookup for an unknown code returns None rather than raising; the caller
decides whether the missing component is mandatory.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from panel_estimator.models.estimation_schema import BOMRule, ComponentCatalogEntry
from panel_estimator.models.orm_models import BomRule, Component, PanelType
from panel_estimator.services.price_book import (
    DEFAULT_BOM_RULES,
    DEFAULT_PANEL_TYPES,
    PRICE_BOOK,
)

logger = logging.getLogger("panel-estimator-catalog")


class CatalogProvider(Protocol):
    async def get_component_by_code(self, code: str) -> Optional[ComponentCatalogEntry]: ...

    async def get_rules_for_panel_type(self, panel_type: str) -> List[BOMRule]: ...

    async def list_components(
        self, category: Optional[str] = None, brand: Optional[str] = None
    ) -> List[ComponentCatalogEntry]: ...

    async def list_panel_types(self) -> List[Dict[str, Any]]: ...


class StaticCatalogProvider:
    """Price-book backed provider. Tables can be injected for testing."""

    def __init__(
        self,
        components: Optional[Dict[str, ComponentCatalogEntry]] = None,
        rules: Optional[List[BOMRule]] = None,
        panel_types: Optional[List[Dict[str, Any]]] = None,
    ):
        self._components = dict(PRICE_BOOK if components is None else components)
        self._rules = list(DEFAULT_BOM_RULES if rules is None else rules)
        self._panel_types = list(DEFAULT_PANEL_TYPES if panel_types is None else panel_types)

    async def get_component_by_code(self, code: str) -> Optional[ComponentCatalogEntry]:
        return self._components.get(code)

    async def get_rules_for_panel_type(self, panel_type: str) -> List[BOMRule]:
        return [r for r in self._rules if r.panel_type == str(panel_type)]

    async def list_components(self, category=None, brand=None) -> List[ComponentCatalogEntry]:
        entries = sorted(self._components.values(), key=lambda e: (e.category, e.name))
        if category:
            entries = [e for e in entries if e.category == category]
        if brand:
            entries = [e for e in entries if e.brand == brand]
        return entries

    async def list_panel_types(self) -> List[Dict[str, Any]]:
        return [{"id": i, **pt} for i, pt in enumerate(self._panel_types, start=1)]


def _entry_from_row(row: Component) -> Optional[ComponentCatalogEntry]:
    """Catalog entry for *row*, or None when the stored row is not a valid entry."""
    try:
        return ComponentCatalogEntry(
            code=row.component_code,
            name=row.name,
            category=row.category,
            brand=row.brand or "Standard",
            specifications=row.specifications or "",
            unit_price=float(row.unit_price),
            stock_unit=row.stock_unit or "Pcs",
        )
    except ValidationError as e:
        logger.warning(
            f"Catalog row {row.component_code} is invalid and was skipped: "
            f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}",
            extra={"component_code": row.component_code},
        )
        return None


class DatabaseCatalogProvider:
    """
    Catalog lookups over an AsyncSession.

    An AsyncSession cannot run concurrent statements, so lookups are
    serialized through a lock; callers may still fan out with gather.
    Results are memoized for the lifetime of the provider (one request).
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._lock = asyncio.Lock()
        self._cache: Dict[str, Optional[ComponentCatalogEntry]] = {}

    async def get_component_by_code(self, code: str) -> Optional[ComponentCatalogEntry]:
        async with self._lock:
            if code in self._cache:
                return self._cache[code]
            result = await self.session.execute(
                select(Component).where(Component.component_code == code)
            )
            row = result.scalar_one_or_none()
            entry = _entry_from_row(row) if row else None
            self._cache[code] = entry
            return entry

    async def get_rules_for_panel_type(self, panel_type: str) -> List[BOMRule]:
        async with self._lock:
            result = await self.session.execute(
                select(BomRule)
                .join(PanelType, BomRule.panel_type_id == PanelType.id)
                .where(PanelType.panel_code == str(panel_type))
                .options(selectinload(BomRule.component))
                .order_by(BomRule.id)
            )
            rows = result.scalars().all()
        return [
            BOMRule(
                panel_type=str(panel_type),
                component_code=row.component.component_code,
                quantity_rule=row.quantity_rule,
                base_quantity=row.default_quantity,
                mandatory=row.is_mandatory,
            )
            for row in rows
        ]

    async def list_components(self, category=None, brand=None) -> List[ComponentCatalogEntry]:
        stmt = select(Component).order_by(Component.category, Component.name)
        if category:
            stmt = stmt.where(Component.category == category)
        if brand:
            stmt = stmt.where(Component.brand == brand)
        async with self._lock:
            result = await self.session.execute(stmt)
            rows = result.scalars().all()
        entries = (_entry_from_row(r) for r in rows)
        return [e for e in entries if e is not None]

    async def list_panel_types(self) -> List[Dict[str, Any]]:
        async with self._lock:
            result = await self.session.execute(select(PanelType).order_by(PanelType.id))
            rows = result.scalars().all()
        return [
            {
                "id": r.id,
                "panel_code": r.panel_code,
                "name": r.name,
                "description": r.description,
                "base_wiring_cost": float(r.base_wiring_cost or 0),
                "base_fabrication_cost": float(r.base_fabrication_cost or 0),
                "base_labor_cost": float(r.base_labor_cost or 0),
                "profit_margin": float(r.profit_margin or 0),
            }
            for r in rows
        ]
