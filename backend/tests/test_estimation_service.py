"""
test_estimation_service.py — Tests for the estimate() entry point.

Tests cover:
  - end-to-end result: BOM + breakdown consistent with each other
  - raw camelCase payloads and model instances both accepted
  - validation failures surfaced as InvalidPanelConfiguration
  - mandatory lookup failures surfaced as MandatoryLookupError
  - omitted optional lines reported in omittedComponents
  - idempotence and the "rules" strategy
  - multi-level costs computed once over the concatenated BOM
"""

import asyncio

import pytest

from panel_estimator.models.estimation_schema import EstimateResult, PanelConfiguration
from panel_estimator.services.catalog_provider import StaticCatalogProvider
from panel_estimator.services.costing_engine import CostingEngine
from panel_estimator.services.errors import (
    EstimationError,
    InvalidPanelConfiguration,
    MandatoryLookupError,
)
from panel_estimator.services.estimation_service import estimate
from panel_estimator.services.price_book import PRICE_BOOK

SCENARIO_A = {
    "panelType": "MCC",
    "feederCount": 4,
    "motorCount": 1,
    "panelSize": "800x800x300",
    "busbarType": "copper",
    "ipRating": "IP55",
}


def _run(*args, **kwargs) -> EstimateResult:
    return asyncio.run(estimate(*args, **kwargs))


class TestEndToEnd:

    def test_returns_bom_and_breakdown(self):
        result = _run(SCENARIO_A)
        assert len(result.bom_items) == 13
        assert result.omitted_components == []

    def test_material_cost_matches_line_totals(self):
        result = _run(SCENARIO_A)
        expected = sum(i.quantity * i.unit_price for i in result.bom_items)
        assert result.cost_breakdown.material_cost == round(expected, 2)

    def test_scenario_a_material_cost(self):
        # 18000 + 8500 + 12000 + 2×3200 + 2×850 + 1800 + 2200
        # + 52×45 + 205×85 + 80×85 + 8×280 + 4×320 + 1×450
        result = _run(SCENARIO_A)
        assert result.cost_breakdown.material_cost == 81135.0

    def test_property_chain(self):
        b = _run(SCENARIO_A).cost_breakdown
        assert b.final_amount >= b.total_cost >= b.material_cost >= 0

    def test_accepts_model_instance(self):
        config = PanelConfiguration.model_validate(SCENARIO_A)
        assert _run(config) == _run(SCENARIO_A)

    def test_accepts_snake_case_payload(self):
        payload = {"panel_type": "MCC", "feeder_count": 4, "motor_count": 1}
        assert _run(payload) == _run(SCENARIO_A)

    def test_margin_and_tax_overrides(self):
        b = _run(SCENARIO_A, profit_margin=15, tax_percentage=12).cost_breakdown
        assert b.profit_margin == 15.0
        assert b.tax_percentage == 12.0

    def test_camel_case_output(self):
        dumped = _run(SCENARIO_A).model_dump(by_alias=True)
        assert set(dumped) == {"bomItems", "costBreakdown", "omittedComponents"}
        assert {"componentCode", "unitPrice", "quantity", "unit"} <= set(dumped["bomItems"][0])
        assert "totalPrice" not in dumped["bomItems"][0]


class TestIdempotence:

    def test_repeated_calls_identical(self):
        assert _run(SCENARIO_A) == _run(SCENARIO_A)

    def test_interleaved_calls_identical(self):
        apfc = {"panelType": "APFC", "feederCount": 6, "panelSize": "2100x2900x1000"}
        first = _run(SCENARIO_A)
        _run(apfc)
        assert _run(SCENARIO_A) == first


class TestValidation:

    @pytest.mark.parametrize("payload", [
        {"panelType": "XYZ"},
        {"panelType": "MCC", "feederCount": -1},
        {"panelType": "MCC", "motorCount": -3},
        {"panelType": "custom", "customComponents": []},
        {"panelType": "multi", "panelLevels": []},
        {"panelType": "MCC", "busbarType": "silver"},
        {"panelType": "MCC", "ipRating": "55"},
        {"panelType": "multi", "panelLevels": [{"type": "custom"}]},
        {"feederCount": 2},
    ])
    def test_invalid_payload_rejected(self, payload):
        with pytest.raises(InvalidPanelConfiguration) as exc:
            _run(payload)
        assert exc.value.errors

    def test_invalid_configuration_is_estimation_error(self):
        with pytest.raises(EstimationError):
            _run({"panelType": "XYZ"})

    def test_unknown_strategy_rejected(self):
        with pytest.raises(InvalidPanelConfiguration):
            _run(SCENARIO_A, strategy="fastest")

    def test_negative_margin_rejected(self):
        with pytest.raises(InvalidPanelConfiguration):
            _run(SCENARIO_A, profit_margin=-1)


class TestLookupFailures:

    def test_mandatory_failure_is_distinct(self):
        provider = StaticCatalogProvider(
            components={k: v for k, v in PRICE_BOOK.items() if k != "MCCB-630"}
        )
        with pytest.raises(MandatoryLookupError) as exc:
            _run(SCENARIO_A, provider=provider)
        assert not isinstance(exc.value, InvalidPanelConfiguration)
        assert exc.value.component_code == "MCCB-630"

    def test_optional_failure_reported_and_costed_without_line(self):
        provider = StaticCatalogProvider(
            components={k: v for k, v in PRICE_BOOK.items() if k != "SELECTOR"}
        )
        result = _run(SCENARIO_A, provider=provider)
        assert result.omitted_components == ["SELECTOR"]
        assert result.cost_breakdown.material_cost == 81135.0 - 450.0


class TestStrategies:

    def test_rules_strategy(self):
        result = _run(SCENARIO_A, strategy="rules")
        assert result.bom_items[0].component_code == "MCCB-100A"

    def test_multi_level_costed_once_over_full_bom(self):
        payload = {
            "panelType": "multi",
            "panelLevels": [
                {"type": "MCC", "feederCount": 4, "motorCount": 1},
                {"type": "MCC", "feederCount": 4, "motorCount": 1},
            ],
        }
        multi = _run(payload)
        single = _run(SCENARIO_A)
        assert len(multi.bom_items) == 2 * len(single.bom_items)
        assert multi.cost_breakdown.material_cost == 2 * single.cost_breakdown.material_cost
        expected = CostingEngine().rollup(multi.bom_items)
        assert multi.cost_breakdown == expected
