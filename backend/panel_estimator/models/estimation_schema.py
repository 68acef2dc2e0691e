"""
Estimation boundary models.

Attributes are snake_case; every model serializes with camelCase aliases so
the field names crossing the API / quotation store / PDF boundary are exactly
``materialCost``, ``unitPrice``, ``componentCode`` and so on. Either spelling
is accepted on input.
"""
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from panel_estimator.config import (
    DEFAULT_BRAND,
    DEFAULT_BUSBAR_TYPE,
    DEFAULT_IP_RATING,
    DEFAULT_PANEL_SIZE,
    DEFAULT_STOCK_UNIT,
)


class PanelType(StrEnum):
    MCC = "MCC"
    PCC = "PCC"
    LT = "LT"
    VFD = "VFD"
    APFC = "APFC"
    PLC = "PLC"
    MULTI = "multi"
    CUSTOM = "custom"


STANDARD_PANEL_TYPES = frozenset({
    PanelType.MCC, PanelType.PCC, PanelType.LT,
    PanelType.VFD, PanelType.APFC, PanelType.PLC,
})


class BusbarType(StrEnum):
    COPPER = "copper"
    ALUMINUM = "aluminum"


class QuantityRule(StrEnum):
    FIXED = "fixed"
    PER_FEEDER = "per_feeder"
    PER_MOTOR = "per_motor"
    PER_CAPACITOR_BANK = "per_capacitor_bank"

    @classmethod
    def _missing_(cls, value):
        # Older rule rows store the capacitor rule as "per_capacitor"
        if isinstance(value, str) and value.strip().lower() == "per_capacitor":
            return cls.PER_CAPACITOR_BANK
        return None


CATEGORIES = (
    "Circuit Breaker",
    "Contactor",
    "Relay",
    "Protection",
    "Busbar",
    "Capacitor",
    "Controller",
    "Power Supply",
    "Wiring",
    "Enclosure",
    "Accessory",
    "Meter",
    "Instrument",
    "PLC",
)

STOCK_UNITS = ("Pcs", "Meter", "Set")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ── Catalog reference data ────────────────────────────────────────────────────

class ComponentCatalogEntry(_CamelModel):
    """One priced catalog component. Read-only to the engine."""
    code: str
    name: str
    category: str
    brand: str = "Standard"
    specifications: str = ""
    unit_price: float = Field(..., ge=0)
    stock_unit: str = DEFAULT_STOCK_UNIT

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: str) -> str:
        if v not in CATEGORIES:
            raise ValueError(f"unknown component category '{v}'")
        return v

    @field_validator("stock_unit")
    @classmethod
    def _known_unit(cls, v: str) -> str:
        if v not in STOCK_UNITS:
            raise ValueError(f"unknown stock unit '{v}'")
        return v


class BOMRule(_CamelModel):
    """Association of a panel type to a component with a quantity rule."""
    panel_type: str
    component_code: str
    quantity_rule: QuantityRule = QuantityRule.FIXED
    base_quantity: int = Field(1, ge=1)
    mandatory: bool = True


# ── Request ───────────────────────────────────────────────────────────────────

class PanelLevel(_CamelModel):
    """One electrically distinct section of a multi-level panel."""
    type: PanelType
    feeder_count: int = Field(0, ge=0)
    motor_count: int = Field(0, ge=0)

    @field_validator("type")
    @classmethod
    def _standard_only(cls, v: PanelType) -> PanelType:
        if v not in STANDARD_PANEL_TYPES:
            raise ValueError(f"panel level type must be a standard panel type, got '{v}'")
        return v


class CustomComponent(_CamelModel):
    """Ad-hoc line supplied verbatim for a custom panel."""
    name: str
    category: str = "Accessory"
    brand: str = ""
    specifications: str = ""
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)
    unit: Optional[str] = None
    component_code: Optional[str] = None


class PanelConfiguration(_CamelModel):
    """Estimation request. Immutable for the lifetime of one estimation."""
    panel_type: PanelType
    feeder_count: int = Field(0, ge=0)
    motor_count: int = Field(0, ge=0)
    panel_size: str = DEFAULT_PANEL_SIZE
    busbar_type: BusbarType = BusbarType(DEFAULT_BUSBAR_TYPE)
    brand_preference: str = DEFAULT_BRAND
    ip_rating: str = Field(DEFAULT_IP_RATING, pattern=r"^IP\d{2}$")
    panel_levels: List[PanelLevel] = Field(default_factory=list)
    custom_components: List[CustomComponent] = Field(default_factory=list)

    @model_validator(mode="after")
    def _composite_payloads(self) -> "PanelConfiguration":
        if self.panel_type == PanelType.CUSTOM and not self.custom_components:
            raise ValueError("custom panel requires at least one custom component")
        if self.panel_type == PanelType.MULTI and not self.panel_levels:
            raise ValueError("multi panel requires at least one panel level")
        return self


# ── Engine output ─────────────────────────────────────────────────────────────

class BOMLineItem(_CamelModel):
    """
    One priced BOM line. ``total_price`` is derived on read and never
    serialized, so it cannot drift from quantity / unit price.
    """
    component_code: Optional[str] = None
    name: str
    category: str
    brand: str = ""
    specifications: str = ""
    quantity: int = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)
    unit: str = DEFAULT_STOCK_UNIT

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price

    def with_name_prefix(self, prefix: str) -> "BOMLineItem":
        return self.model_copy(update={"name": f"{prefix}{self.name}"})


class CostBreakdown(_CamelModel):
    material_cost: float
    powder_coating: float
    labour: float
    wiring: float
    testing: float
    production_cost: float
    total_cost: float
    profit_margin: float
    price_before_tax: float
    tax_percentage: float
    tax_amount: float
    final_amount: float


class EstimateResult(_CamelModel):
    """The complete, internally consistent output of one estimation."""
    bom_items: List[BOMLineItem]
    cost_breakdown: CostBreakdown
    omitted_components: List[str] = Field(default_factory=list)
