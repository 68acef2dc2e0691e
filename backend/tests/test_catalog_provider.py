"""
test_catalog_provider.py — Static and database catalog providers, and seeding.

Tests cover:
  - StaticCatalogProvider: lookups, not-found as None, filters, panel types
  - seed_catalog: writes the whole price book, idempotent on re-run
  - DatabaseCatalogProvider: lookups, rules join, filters, panel types
  - Invalid stored rows treated as missing (omitted, or mandatory abort)
  - Catalog-backed and catalog-free estimation give identical results

Database tests run against in-memory SQLite (sqlite+aiosqlite).
"""

import asyncio

import pytest
from sqlalchemy import select

from panel_estimator.models.orm_models import BomRule, Component, PanelType
from panel_estimator.services.catalog_provider import (
    DatabaseCatalogProvider,
    StaticCatalogProvider,
)
from panel_estimator.services.errors import MandatoryLookupError
from panel_estimator.services.estimation_service import estimate
from panel_estimator.services.price_book import DEFAULT_BOM_RULES, DEFAULT_PANEL_TYPES, PRICE_BOOK
from panel_estimator.db.seed import seed_catalog


class TestStaticProvider:

    def test_lookup(self, static_provider):
        entry = asyncio.run(static_provider.get_component_by_code("MCCB-630"))
        assert entry.unit_price == 8500
        assert entry.specifications == "630A, 415V, 4P, 65kA"

    def test_unknown_code_is_none(self, static_provider):
        assert asyncio.run(static_provider.get_component_by_code("NOPE-1")) is None

    def test_rules_for_mcc(self, static_provider):
        rules = asyncio.run(static_provider.get_rules_for_panel_type("MCC"))
        assert [r.component_code for r in rules] == ["MCCB-100A", "CONT-25A", "OLR-25A", "BUS-630A"]

    def test_rules_for_type_without_rules(self, static_provider):
        assert asyncio.run(static_provider.get_rules_for_panel_type("PLC")) == []

    def test_filter_by_category_and_brand(self, static_provider):
        entries = asyncio.run(static_provider.list_components(category="Wiring", brand="Finolex"))
        assert {e.code for e in entries} == {"WIRE-1.5", "WIRE-2.5", "WIRE-4.0"}

    def test_panel_types(self, static_provider):
        types = asyncio.run(static_provider.list_panel_types())
        assert [t["panel_code"] for t in types] == ["MCC", "PCC", "LT", "VFD", "APFC", "PLC"]
        assert types[0]["id"] == 1

    def test_price_book_covers_rule_components(self):
        for rule in DEFAULT_BOM_RULES:
            assert rule.component_code in PRICE_BOOK


class TestSeeding:

    def test_seed_writes_price_book(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                codes = (await session.execute(select(Component.component_code))).scalars().all()
                panels = (await session.execute(select(PanelType.panel_code))).scalars().all()
                rules = (await session.execute(select(BomRule))).scalars().all()
                return set(codes), panels, rules

        codes, panels, rules = asyncio.run(scenario())
        assert codes == set(PRICE_BOOK)
        assert len(panels) == len(DEFAULT_PANEL_TYPES)
        assert len(rules) == len(DEFAULT_BOM_RULES)

    def test_seed_is_idempotent(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                again = await seed_catalog(session)
                await session.commit()
                count = len((await session.execute(select(Component))).scalars().all())
                return again, count

        again, count = asyncio.run(scenario())
        assert again == {"components": 0, "panel_types": 0, "bom_rules": 0}
        assert count == len(PRICE_BOOK)

    def test_seed_keeps_edited_prices(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                row = (await session.execute(
                    select(Component).where(Component.component_code == "TB-10")
                )).scalar_one()
                row.unit_price = 50.0
                await session.commit()
                await seed_catalog(session)
                entry = await DatabaseCatalogProvider(session).get_component_by_code("TB-10")
                return entry.unit_price

        assert asyncio.run(scenario()) == 50.0


class TestDatabaseProvider:

    def test_lookup_matches_price_book(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                provider = DatabaseCatalogProvider(session)
                return await provider.get_component_by_code("CT-SET"), await provider.get_component_by_code("X")

        entry, missing = asyncio.run(scenario())
        assert entry == PRICE_BOOK["CT-SET"]
        assert missing is None

    def test_rules_join(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                provider = DatabaseCatalogProvider(session)
                return await provider.get_rules_for_panel_type("MCC"), await provider.get_rules_for_panel_type("PCC")

        mcc, pcc = asyncio.run(scenario())
        assert [r.component_code for r in mcc] == ["MCCB-100A", "CONT-25A", "OLR-25A", "BUS-630A"]
        assert [r.base_quantity for r in mcc] == [1, 1, 1, 5]
        assert pcc == []

    def test_legacy_rule_name_accepted(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                rule = (await session.execute(select(BomRule).order_by(BomRule.id))).scalars().first()
                rule.quantity_rule = "per_capacitor"
                await session.commit()
                return await DatabaseCatalogProvider(session).get_rules_for_panel_type("MCC")

        rules = asyncio.run(scenario())
        assert rules[0].quantity_rule == "per_capacitor_bank"

    def test_filters(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                provider = DatabaseCatalogProvider(session)
                return (
                    await provider.list_components(category="Capacitor"),
                    await provider.list_components(brand="Legrand"),
                )

        capacitors, legrand = asyncio.run(scenario())
        assert {e.code for e in capacitors} == {"CAP-15", "CAP-25", "CAP-50", "CAP-25kVAR"}
        assert {e.code for e in legrand} == {"MCB-32", "LAMP-LED", "PB-22"}

    def test_panel_types(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                return await DatabaseCatalogProvider(session).list_panel_types()

        types = asyncio.run(scenario())
        assert types[0]["panel_code"] == "MCC"
        assert types[0]["base_wiring_cost"] == 15000.0


class TestInvalidCatalogRows:
    """A stored row that is not a valid catalog entry behaves like a missing one."""

    @staticmethod
    async def _corrupt(session, code, **columns):
        row = (await session.execute(
            select(Component).where(Component.component_code == code)
        )).scalar_one()
        for name, value in columns.items():
            setattr(row, name, value)
        await session.commit()

    def test_lookup_returns_none(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                await self._corrupt(session, "TB-10", category="Terminal")
                return await DatabaseCatalogProvider(session).get_component_by_code("TB-10")

        assert asyncio.run(scenario()) is None

    def test_optional_line_omitted_from_estimate(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                await self._corrupt(session, "TB-10", category="Terminal")
                return await estimate(
                    {"panelType": "MCC", "feederCount": 1},
                    provider=DatabaseCatalogProvider(session),
                )

        result = asyncio.run(scenario())
        assert result.omitted_components == ["TB-10"]
        assert "TB-10" not in [i.component_code for i in result.bom_items]

    def test_mandatory_line_aborts_estimate(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                await self._corrupt(session, "ENC-800", stock_unit="Crate")
                return await estimate({"panelType": "MCC"}, provider=DatabaseCatalogProvider(session))

        with pytest.raises(MandatoryLookupError) as exc:
            asyncio.run(scenario())
        assert exc.value.component_code == "ENC-800"

    def test_listing_skips_invalid_rows(self, memory_session):
        async def scenario():
            async with memory_session() as session:
                await self._corrupt(session, "PB-22", category="Terminal")
                return await DatabaseCatalogProvider(session).list_components(brand="Legrand")

        assert {e.code for e in asyncio.run(scenario())} == {"MCB-32", "LAMP-LED"}


class TestProviderParity:
    """Catalog-backed and catalog-free estimates must not drift."""

    def test_same_estimate_both_providers(self, memory_session):
        payload = {"panelType": "APFC", "feederCount": 7, "motorCount": 2, "panelSize": "1600x1700x600"}

        async def scenario():
            async with memory_session() as session:
                return await estimate(payload, provider=DatabaseCatalogProvider(session))

        from_db = asyncio.run(scenario())
        from_book = asyncio.run(estimate(payload, provider=StaticCatalogProvider()))
        assert from_db == from_book

    def test_same_rule_estimate_both_providers(self, memory_session):
        payload = {"panelType": "MCC", "feederCount": 3, "motorCount": 3}

        async def scenario():
            async with memory_session() as session:
                return await estimate(payload, provider=DatabaseCatalogProvider(session), strategy="rules")

        assert asyncio.run(scenario()) == asyncio.run(estimate(payload, strategy="rules"))
