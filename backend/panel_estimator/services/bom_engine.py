"""
BOM Expansion Engine — turns a panel configuration into an ordered, priced
Bill of Materials.

Expansion happens in two phases:

  1. Selection (pure). Each panel type maps to a selection function that
     returns ``LineSpec`` records: which catalog code, what quantity, and any
     name / spec / brand overrides. No I/O happens here, so the full line
     order is fixed before a single lookup is made.
  2. Pricing (async). Every spec is resolved against the catalog provider
     concurrently; ``asyncio.gather`` returns results in submission order, so
     the BOM order never depends on lookup completion order.

Standard panel line order:
    enclosure → type block (APFC / VFD / PLC) → main incomer → busbar
    → metering (two largest sizes) → outgoing feeders → motor control
    → common components

Missing catalog entries omit their line with a warning, except for lines
flagged mandatory (enclosure, main incomer, mandatory rule lines), which
abort the whole expansion.
"""
import asyncio
import logging
import math
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Union

from panel_estimator import config as cfg
from panel_estimator.models.estimation_schema import (
    BOMLineItem,
    BusbarType,
    PanelConfiguration,
    PanelType,
)
from panel_estimator.services.catalog_provider import CatalogProvider
from panel_estimator.services.errors import MandatoryLookupError
from panel_estimator.services.quantity_rules import resolve_quantity

logger = logging.getLogger("panel-estimator-bom")


# ── Size-keyed selection tables ───────────────────────────────────────────────

ENCLOSURE_BY_SIZE: Dict[str, str] = {
    "600x600x200": "ENC-600",
    "800x800x300": "ENC-800",
    "1000x1000x400": "ENC-1000",
    "1500x1000x400": "ENC-1500",
    "1600x1700x600": "ENC-1600",
    "2100x2900x1000": "ENC-2100",
}
DEFAULT_ENCLOSURE = "ENC-800"

# Copper busbar rating (A) by size; 630A everywhere else
BUSBAR_RATING_BY_SIZE: Dict[str, int] = {
    cfg.LARGE_PANEL_SIZE: 800,
    cfg.LARGEST_PANEL_SIZE: 1000,
}
DEFAULT_BUSBAR_RATING = 630
ALUMINUM_FALLBACK_BUSBAR = "BUS-AL-630"

# Power wiring gauge (sqmm) by size; control wiring is always 1.5
POWER_WIRE_BY_SIZE: Dict[str, str] = {
    cfg.LARGE_PANEL_SIZE: "2.5",
    cfg.LARGEST_PANEL_SIZE: "4.0",
}
DEFAULT_WIRE_GAUGE = "1.5"

METERED_SIZES = frozenset({cfg.LARGE_PANEL_SIZE, cfg.LARGEST_PANEL_SIZE})


@dataclass(frozen=True)
class LineSpec:
    """A catalog line awaiting pricing."""
    code: str
    quantity: int
    name: Optional[str] = None            # overrides the catalog name
    specifications: Optional[str] = None  # overrides the catalog spec text
    brand: Optional[str] = None           # brand preference for brand-tagged lines
    fallback_code: Optional[str] = None   # priced instead when ``code`` is missing
    mandatory_role: Optional[str] = None  # set → a missing entry aborts expansion
    prefix: str = ""                      # multi-level label, e.g. "MCC Level - "


PlanEntry = Union[LineSpec, BOMLineItem]


@dataclass
class BOMExpansion:
    items: List[BOMLineItem] = field(default_factory=list)
    omitted_components: List[str] = field(default_factory=list)


# ── Standard panel selection (pure) ───────────────────────────────────────────

def _enclosure(config: PanelConfiguration) -> LineSpec:
    size, ip = config.panel_size, config.ip_rating
    return LineSpec(
        code=ENCLOSURE_BY_SIZE.get(size, DEFAULT_ENCLOSURE),
        quantity=1,
        name=f"Enclosure {ip} {size}",
        specifications=f"1.6mm CRCA, Indoor Type, {ip}",
        mandatory_role="Enclosure",
    )


def _apfc_block(config: PanelConfiguration, feeders: int, motors: int) -> List[LineSpec]:
    lines = [LineSpec("APFC-CTRL", 1, brand=config.brand_preference)]
    if config.panel_size == cfg.LARGEST_PANEL_SIZE:
        lines.append(LineSpec("CAP-50", cfg.APFC_LARGEST_TIER_CAPACITORS))
    else:
        qty = max(cfg.APFC_MIN_CAPACITORS, math.ceil(feeders / cfg.APFC_FEEDERS_PER_CAPACITOR))
        lines.append(LineSpec("CAP-25", qty))
    return lines


def _vfd_block(config: PanelConfiguration, feeders: int, motors: int) -> List[LineSpec]:
    # One drive per motor, never fewer than one
    return [LineSpec("VFD-22KW", max(1, motors), brand=config.brand_preference)]


def _plc_block(config: PanelConfiguration, feeders: int, motors: int) -> List[LineSpec]:
    return [LineSpec("PLC-BASIC", 1, brand=config.brand_preference)]


def _no_block(config: PanelConfiguration, feeders: int, motors: int) -> List[LineSpec]:
    return []


TypeBlock = Callable[[PanelConfiguration, int, int], List[LineSpec]]

TYPE_BLOCKS: Dict[PanelType, TypeBlock] = {
    PanelType.MCC: _no_block,
    PanelType.PCC: _no_block,
    PanelType.LT: _no_block,
    PanelType.APFC: _apfc_block,
    PanelType.VFD: _vfd_block,
    PanelType.PLC: _plc_block,
}


def _main_incomer(config: PanelConfiguration, panel_type: PanelType) -> LineSpec:
    downgrade = panel_type == PanelType.PCC or config.panel_size == cfg.LARGEST_PANEL_SIZE
    return LineSpec(
        code="MCCB-250" if downgrade else "MCCB-630",
        quantity=1,
        brand=config.brand_preference,
        mandatory_role="Main incomer",
    )


def _busbar(config: PanelConfiguration) -> LineSpec:
    rating = BUSBAR_RATING_BY_SIZE.get(config.panel_size, DEFAULT_BUSBAR_RATING)
    if config.busbar_type == BusbarType.ALUMINUM:
        return LineSpec(
            code=f"BUS-AL-{rating}",
            quantity=1,
            name="Aluminum Busbar Set",
            specifications=f"{rating}A, 4P",
            fallback_code=ALUMINUM_FALLBACK_BUSBAR,
        )
    return LineSpec(
        code=f"BUS-CU-{rating}",
        quantity=1,
        name="Copper Busbar Set",
        specifications=f"{rating}A, 4P",
    )


def _metering(config: PanelConfiguration) -> List[LineSpec]:
    if config.panel_size not in METERED_SIZES:
        return []
    return [
        LineSpec("MTR-MULTI", 1, brand=config.brand_preference),
        LineSpec("CT-SET", 1),
    ]


def feeder_split(feeders: int) -> tuple:
    """(63A count, 32A count). Exact decimal ceil so 0.4 × 15 is 6, not 7."""
    heavy = math.ceil(Decimal(str(cfg.FEEDER_HEAVY_SHARE)) * feeders)
    return heavy, feeders - heavy


def _feeders(config: PanelConfiguration, feeders: int) -> List[LineSpec]:
    heavy, light = feeder_split(feeders)
    lines = []
    if heavy > 0:
        lines.append(LineSpec("MCB-63", heavy, brand=config.brand_preference))
    if light > 0:
        lines.append(LineSpec("MCB-32", light, brand=config.brand_preference))
    return lines


def _motor_control(config: PanelConfiguration, motors: int) -> List[LineSpec]:
    if motors <= 0:
        return []
    small = motors <= cfg.SMALL_MOTOR_TIER_MAX
    return [
        LineSpec("CON-25" if small else "CON-40", motors, brand=config.brand_preference),
        LineSpec("OL-25" if small else "OL-40", motors, brand=config.brand_preference),
    ]


def standard_line_specs(
    config: PanelConfiguration,
    panel_type: PanelType,
    feeders: int,
    motors: int,
) -> List[LineSpec]:
    """Type-specific section of a standard panel, in document order."""
    block = TYPE_BLOCKS[panel_type]
    return [
        _enclosure(config),
        *block(config, feeders, motors),
        _main_incomer(config, panel_type),
        _busbar(config),
        *_metering(config),
        *_feeders(config, feeders),
        *_motor_control(config, motors),
    ]


def common_line_specs(config: PanelConfiguration, feeders: int, motors: int) -> List[LineSpec]:
    """Wiring, terminals and operator devices appended to every section."""
    gauge = POWER_WIRE_BY_SIZE.get(config.panel_size, DEFAULT_WIRE_GAUGE)
    lines = [
        LineSpec("TB-10", 6 * feeders + 8 * motors + 20),
        LineSpec(f"WIRE-{gauge}", 150 + 10 * feeders + 15 * motors),
        LineSpec(f"WIRE-{DEFAULT_WIRE_GAUGE}", 50 + 5 * feeders + 10 * motors),
        LineSpec("LAMP-LED", 6 + math.ceil(feeders / 4) + motors),
        LineSpec("PB-22", 2 * motors + 2),
    ]
    if motors > 0:
        lines.append(LineSpec("SELECTOR", motors))
    return lines


def custom_line_items(config: PanelConfiguration) -> List[BOMLineItem]:
    """Caller-supplied lines, verbatim. Unit defaults to Pcs."""
    return [
        BOMLineItem(
            component_code=c.component_code,
            name=c.name,
            category=c.category,
            brand=c.brand,
            specifications=c.specifications,
            quantity=c.quantity,
            unit_price=c.unit_price,
            unit=c.unit or cfg.DEFAULT_STOCK_UNIT,
        )
        for c in config.custom_components
    ]


def _prefixed(specs: Sequence[LineSpec], prefix: str) -> List[LineSpec]:
    return [replace(s, prefix=prefix) for s in specs]


def level_prefix(panel_type: PanelType) -> str:
    return f"{panel_type.value} Level - "


# ── Engine ────────────────────────────────────────────────────────────────────

class BOMEngine:
    """
    Stateless BOM expander bound to a catalog provider.

    The engine keeps no per-request state; one instance may serve
    concurrent estimations.
    """

    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    # -- planning ------------------------------------------------------------

    def plan(self, config: PanelConfiguration) -> List[PlanEntry]:
        """Ordered plan for the table-driven expansion."""
        if config.panel_type == PanelType.CUSTOM:
            return [
                *custom_line_items(config),
                *common_line_specs(config, config.feeder_count, config.motor_count),
            ]

        if config.panel_type == PanelType.MULTI:
            plan: List[PlanEntry] = []
            for level in config.panel_levels:
                specs = standard_line_specs(config, level.type, level.feeder_count, level.motor_count)
                specs += common_line_specs(config, level.feeder_count, level.motor_count)
                plan.extend(_prefixed(specs, level_prefix(level.type)))
            return plan

        return [
            *standard_line_specs(config, config.panel_type, config.feeder_count, config.motor_count),
            *common_line_specs(config, config.feeder_count, config.motor_count),
        ]

    async def plan_from_rules(self, config: PanelConfiguration) -> List[PlanEntry]:
        """Ordered plan for the rule-driven expansion."""
        if config.panel_type == PanelType.CUSTOM:
            return self.plan(config)

        if config.panel_type == PanelType.MULTI:
            sections = [(lvl.type, lvl.feeder_count, lvl.motor_count, level_prefix(lvl.type))
                        for lvl in config.panel_levels]
        else:
            sections = [(config.panel_type, config.feeder_count, config.motor_count, "")]

        plan: List[PlanEntry] = []
        for panel_type, feeders, motors, prefix in sections:
            rules = await self.provider.get_rules_for_panel_type(panel_type.value)
            if not rules:
                logger.info(f"No BOM rules stored for panel type {panel_type.value}")
            specs = [
                LineSpec(
                    code=rule.component_code,
                    quantity=resolve_quantity(rule.quantity_rule, rule.base_quantity, feeders, motors),
                    brand=config.brand_preference or None,
                    mandatory_role="Mandatory rule" if rule.mandatory else None,
                )
                for rule in rules
            ]
            specs += common_line_specs(config, feeders, motors)
            plan.extend(_prefixed(specs, prefix))
        return plan

    # -- pricing -------------------------------------------------------------

    async def _price(self, spec: LineSpec) -> Optional[BOMLineItem]:
        entry = await self.provider.get_component_by_code(spec.code)
        if entry is None and spec.fallback_code:
            entry = await self.provider.get_component_by_code(spec.fallback_code)
        if entry is None:
            if spec.mandatory_role:
                raise MandatoryLookupError(spec.code, role=spec.mandatory_role)
            return None
        return BOMLineItem(
            component_code=entry.code,
            name=f"{spec.prefix}{spec.name or entry.name}",
            category=entry.category,
            brand=spec.brand or entry.brand,
            specifications=spec.specifications if spec.specifications is not None else entry.specifications,
            quantity=spec.quantity,
            unit_price=entry.unit_price,
            unit=entry.stock_unit,
        )

    async def price_plan(self, plan: List[PlanEntry]) -> BOMExpansion:
        specs = [p for p in plan if isinstance(p, LineSpec)]
        tasks = [asyncio.ensure_future(self._price(s)) for s in specs]
        try:
            priced = await asyncio.gather(*tasks)
        except BaseException:
            # No lookup may outlive a failed expansion
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        lookup = iter(priced)

        result = BOMExpansion()
        for entry in plan:
            if isinstance(entry, BOMLineItem):
                result.items.append(entry)
                continue
            item = next(lookup)
            if item is None:
                logger.warning(
                    f"Component {entry.code} not in catalog, line omitted",
                    extra={"component_code": entry.code},
                )
                result.omitted_components.append(entry.code)
            else:
                result.items.append(item)
        return result

    # -- public --------------------------------------------------------------

    async def expand_detailed(self, config: PanelConfiguration) -> BOMExpansion:
        return await self.price_plan(self.plan(config))

    async def expand(self, config: PanelConfiguration) -> List[BOMLineItem]:
        """Table-driven expansion. Returns the ordered BOM."""
        return (await self.expand_detailed(config)).items

    async def expand_from_rules_detailed(self, config: PanelConfiguration) -> BOMExpansion:
        return await self.price_plan(await self.plan_from_rules(config))

    async def expand_from_rules(self, config: PanelConfiguration) -> List[BOMLineItem]:
        """Rule-driven expansion over the provider's stored BOM rules."""
        return (await self.expand_from_rules_detailed(config)).items
