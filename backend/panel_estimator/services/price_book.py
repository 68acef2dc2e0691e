"""
Price Book — the one static table of component prices, default panel types and
default BOM rules.

Both estimation paths read from here: the catalog-free path through
``StaticCatalogProvider`` and the catalog-backed path through the database,
which is seeded from these same records. Prices are INR per stock unit.
"""
from typing import Dict, List

from panel_estimator.models.estimation_schema import (
    BOMRule,
    ComponentCatalogEntry,
    QuantityRule,
)


def _entry(code, name, category, brand, specifications, unit_price, stock_unit="Pcs"):
    return ComponentCatalogEntry(
        code=code,
        name=name,
        category=category,
        brand=brand,
        specifications=specifications,
        unit_price=unit_price,
        stock_unit=stock_unit,
    )


# ---------------------------------------------------------------------------
# Components referenced by the table-driven expander
# ---------------------------------------------------------------------------
_EXPANDER_COMPONENTS: List[ComponentCatalogEntry] = [
    # Enclosures, one per size tier
    _entry("ENC-600", "Enclosure 600x600x200", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 15000),
    _entry("ENC-800", "Enclosure 800x800x300", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 18000),
    _entry("ENC-1000", "Enclosure 1000x1000x400", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 22000),
    _entry("ENC-1500", "Enclosure 1500x1000x400", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 35000),
    _entry("ENC-1600", "Enclosure 1600x1700x600", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 45000),
    _entry("ENC-2100", "Enclosure 2100x2900x1000", "Enclosure", "Standard", "1.6mm CRCA, Indoor Type", 75000),

    # Circuit breakers
    _entry("MCCB-630", "MCCB 630A", "Circuit Breaker", "Schneider", "630A, 415V, 4P, 65kA", 8500),
    _entry("MCCB-250", "MCCB 250A", "Circuit Breaker", "Schneider", "250A, 415V, 3P, 50kA", 6500),
    _entry("MCB-63", "MCB 63A", "Circuit Breaker", "Schneider", "63A, 415V, 3P, 10kA", 3200),
    _entry("MCB-32", "MCB 32A", "Circuit Breaker", "Legrand", "32A, 240V, SPN, 10kA", 850),

    # Contactors
    _entry("CON-25", "Contactor 25A", "Contactor", "ABB", "25A, 415V, 3P, AC3", 1800),
    _entry("CON-40", "Contactor 40A", "Contactor", "ABB", "40A, 415V, 3P, AC3", 2500),
    _entry("CON-100", "Contactor 100A", "Contactor", "ABB", "100A, 415V, 3P, AC3", 5800),

    # Protection
    _entry("OL-25", "Overload Relay 18-25A", "Protection", "Siemens", "18-25A, Adjustable, Thermal", 2200),
    _entry("OL-40", "Overload Relay 30-40A", "Protection", "Siemens", "30-40A, Adjustable, Thermal", 2800),
    _entry("MP-25", "Motor Protection Breaker 25A", "Protection", "Siemens", "17-25A, 415V, 3P", 4500),

    # Busbars (sets)
    _entry("BUS-CU-630", "Copper Busbar Set", "Busbar", "Standard", "630A, 4P", 12000, "Set"),
    _entry("BUS-CU-800", "Copper Busbar Set", "Busbar", "Standard", "800A, 4P", 15000, "Set"),
    _entry("BUS-CU-1000", "Copper Busbar Set", "Busbar", "Standard", "1000A, 4P", 20000, "Set"),
    _entry("BUS-AL-630", "Aluminum Busbar Set", "Busbar", "Standard", "630A, 4P", 8000, "Set"),

    # Controllers
    _entry("APFC-CTRL", "APFC Controller", "Controller", "Schneider", "Digital, 12 Step, RS485", 12000),
    _entry("PLC-BASIC", "PLC Basic Unit", "Controller", "Schneider", "24VDC, 14DI/10DO", 18000),
    _entry("VFD-22KW", "VFD 22kW", "Controller", "ABB", "22kW, 415V, 3P, IP55", 25000),

    # Capacitors
    _entry("CAP-15", "Capacitor 15kVAR", "Capacitor", "Standard", "15kVAR, 440V, Dry Type", 6500),
    _entry("CAP-25", "Capacitor 25kVAR", "Capacitor", "Standard", "25kVAR, 440V, Dry Type", 8500),
    _entry("CAP-50", "Capacitor 50kVAR", "Capacitor", "Standard", "50kVAR, 440V, Dry Type", 12000),

    # Meters and instruments
    _entry("MTR-MULTI", "Multi-function Meter", "Meter", "ABB", "3 Phase, 4 Wire, RS485", 8500),
    _entry("MTR-ENERGY", "Energy Meter", "Meter", "ABB", "3 Phase, 4 Wire, Class 1.0", 6500),
    _entry("MTR-POWER", "Power Meter", "Meter", "ABB", "3 Phase, kW/kVA", 4500),
    _entry("CT-600", "CT 600/5A", "Instrument", "Standard", "600/5A, Class 1", 1800),
    _entry("CT-800", "CT 800/5A", "Instrument", "Standard", "800/5A, Class 1", 2500),
    _entry("CT-SET", "CT Set (3P+1N)", "Instrument", "Standard", "3 Phase + Neutral, 600/5A", 7500, "Set"),

    # Common components
    _entry("TB-10", "Terminal Block", "Accessory", "Phoenix", "10A, 600V, Screw Type", 45),
    _entry("WIRE-1.5", "FRLS Wire 1.5sqmm", "Wiring", "Finolex", "1.5sqmm, FRLS, Copper", 85, "Meter"),
    _entry("WIRE-2.5", "FRLS Wire 2.5sqmm", "Wiring", "Finolex", "2.5sqmm, FRLS, Copper", 120, "Meter"),
    _entry("WIRE-4.0", "FRLS Wire 4.0sqmm", "Wiring", "Finolex", "4.0sqmm, FRLS, Copper", 180, "Meter"),
    _entry("LAMP-LED", "Indication Lamp LED", "Accessory", "Legrand", "LED, 220V, 22mm", 280),
    _entry("PB-22", "Push Button 22mm", "Accessory", "Legrand", "22mm, IP55, Red/Green", 320),
    _entry("SELECTOR", "Selector Switch", "Accessory", "Schneider", "22mm, 3 Position, IP55", 450),
]

# ---------------------------------------------------------------------------
# Components referenced by the default rule store
# ---------------------------------------------------------------------------
_RULE_COMPONENTS: List[ComponentCatalogEntry] = [
    _entry("MCCB-100A", "MCCB 100A", "Circuit Breaker", "Schneider", "100A, 3P, 35kA", 4500),
    _entry("MCCB-250A", "MCCB 250A", "Circuit Breaker", "Schneider", "250A, 3P, 35kA", 8500),
    _entry("CONT-25A", "Contactor 25A", "Contactor", "ABB", "25A, 3P, AC3", 1800),
    _entry("CONT-40A", "Contactor 40A", "Contactor", "ABB", "40A, 3P, AC3", 2500),
    _entry("OLR-25A", "Overload Relay 25A", "Relay", "Siemens", "25A, Adjustable", 1200),
    _entry("BUS-630A", "Copper Busbar 630A", "Busbar", "Custom", "630A, 6mmx50mm", 500, "Meter"),
    _entry("CAP-25kVAR", "Capacitor 25kVAR", "Capacitor", "Cromptron", "25kVAR, 440V", 7500),
    _entry("PLC-DVP", "Delta PLC DVP", "PLC", "Delta", "DVP Series, 24V", 15000, "Set"),
    _entry("SMPS-24V", "SMPS 24V 10A", "Power Supply", "Meanwell", "24V DC, 10A", 3500),
    _entry("ENCL-IP55", "Enclosure IP55 600x800", "Enclosure", "Amtek", "600x800x200mm, IP55", 8500),
]

PRICE_BOOK: Dict[str, ComponentCatalogEntry] = {
    e.code: e for e in (_EXPANDER_COMPONENTS + _RULE_COMPONENTS)
}


# ---------------------------------------------------------------------------
# Panel types (base costs are informational; margin is the default margin)
# ---------------------------------------------------------------------------
DEFAULT_PANEL_TYPES: List[Dict] = [
    {"panel_code": "MCC", "name": "MCC Panel", "description": "Motor Control Center",
     "base_wiring_cost": 15000.0, "base_fabrication_cost": 20000.0, "base_labor_cost": 10000.0,
     "profit_margin": 20.0},
    {"panel_code": "PCC", "name": "PCC Panel", "description": "Power Control Center",
     "base_wiring_cost": 20000.0, "base_fabrication_cost": 25000.0, "base_labor_cost": 15000.0,
     "profit_margin": 20.0},
    {"panel_code": "LT", "name": "LT Panel", "description": "Low Tension Panel",
     "base_wiring_cost": 12000.0, "base_fabrication_cost": 15000.0, "base_labor_cost": 8000.0,
     "profit_margin": 20.0},
    {"panel_code": "VFD", "name": "VFD Panel", "description": "Variable Frequency Drive Panel",
     "base_wiring_cost": 18000.0, "base_fabrication_cost": 22000.0, "base_labor_cost": 12000.0,
     "profit_margin": 20.0},
    {"panel_code": "APFC", "name": "APFC Panel", "description": "Automatic Power Factor Correction",
     "base_wiring_cost": 10000.0, "base_fabrication_cost": 12000.0, "base_labor_cost": 6000.0,
     "profit_margin": 20.0},
    {"panel_code": "PLC", "name": "PLC Panel", "description": "Programmable Logic Controller Panel",
     "base_wiring_cost": 15000.0, "base_fabrication_cost": 18000.0, "base_labor_cost": 10000.0,
     "profit_margin": 20.0},
]


# ---------------------------------------------------------------------------
# Default BOM rules
# ---------------------------------------------------------------------------
DEFAULT_BOM_RULES: List[BOMRule] = [
    BOMRule(panel_type="MCC", component_code="MCCB-100A", quantity_rule=QuantityRule.PER_FEEDER, base_quantity=1),
    BOMRule(panel_type="MCC", component_code="CONT-25A", quantity_rule=QuantityRule.PER_FEEDER, base_quantity=1),
    BOMRule(panel_type="MCC", component_code="OLR-25A", quantity_rule=QuantityRule.PER_FEEDER, base_quantity=1),
    BOMRule(panel_type="MCC", component_code="BUS-630A", quantity_rule=QuantityRule.FIXED, base_quantity=5),
]
