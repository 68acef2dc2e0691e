"""
Estimation entry point — the one call the API layer, quotation persister and
document renderer depend on.

    estimate(config) → EstimateResult(bom_items, cost_breakdown, omitted_components)

Validates the configuration, expands the BOM (table-driven or rule-driven),
rolls the costs up over the full BOM and returns everything as one immutable
result. Either a complete result is returned or an EstimationError is raised.
"""
import logging
import time
import uuid
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from panel_estimator.models.estimation_schema import EstimateResult, PanelConfiguration
from panel_estimator.services.bom_engine import BOMEngine
from panel_estimator.services.catalog_provider import CatalogProvider, StaticCatalogProvider
from panel_estimator.services.costing_engine import CostingEngine, Number
from panel_estimator.services.errors import InvalidPanelConfiguration

logger = logging.getLogger("panel-estimator-bom")

STRATEGIES = ("standard", "rules")


def parse_configuration(config: Union[PanelConfiguration, Dict[str, Any]]) -> PanelConfiguration:
    """Coerce a raw payload into a PanelConfiguration or raise InvalidPanelConfiguration."""
    if isinstance(config, PanelConfiguration):
        return config
    try:
        return PanelConfiguration.model_validate(config)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        first = errors[0]["msg"] if errors else str(e)
        raise InvalidPanelConfiguration(f"Invalid panel configuration: {first}", errors=errors) from e


async def estimate(
    config: Union[PanelConfiguration, Dict[str, Any]],
    provider: Optional[CatalogProvider] = None,
    strategy: str = "standard",
    profit_margin: Optional[Number] = None,
    tax_percentage: Optional[Number] = None,
) -> EstimateResult:
    if strategy not in STRATEGIES:
        raise InvalidPanelConfiguration(f"Unknown estimation strategy '{strategy}'")
    panel = parse_configuration(config)
    provider = provider or StaticCatalogProvider()

    estimate_id = uuid.uuid4().hex[:12]
    started = time.perf_counter()

    engine = BOMEngine(provider)
    if strategy == "rules":
        expansion = await engine.expand_from_rules_detailed(panel)
    else:
        expansion = await engine.expand_detailed(panel)

    try:
        breakdown = CostingEngine().rollup(
            expansion.items, profit_margin=profit_margin, tax_percentage=tax_percentage
        )
    except ValueError as e:
        raise InvalidPanelConfiguration(str(e)) from e

    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"Estimate {estimate_id}: {panel.panel_type.value} panel, "
        f"{len(expansion.items)} lines, final amount {breakdown.final_amount}",
        extra={"estimate_id": estimate_id, "duration_ms": duration_ms},
    )
    if expansion.omitted_components:
        logger.warning(
            f"Estimate {estimate_id} omitted {len(expansion.omitted_components)} line(s): "
            f"{', '.join(expansion.omitted_components)}",
            extra={"estimate_id": estimate_id},
        )

    return EstimateResult(
        bom_items=expansion.items,
        cost_breakdown=breakdown,
        omitted_components=expansion.omitted_components,
    )
