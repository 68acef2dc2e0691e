"""
Estimation configuration — single source of truth for cost ratios, size tiers,
selection thresholds and environment settings.

Import from here in all services and routes rather than hardcoding values.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


# ── Production cost ratios (fraction of material cost) ────────────────────────
POWDER_COATING_RATIO: str = "0.03"
LABOUR_RATIO: str = "0.20"
WIRING_RATIO: str = "0.15"
TESTING_RATIO: str = "0.05"

# Percentages, not fractions
DEFAULT_PROFIT_MARGIN_PCT: float = 20.0
DEFAULT_TAX_PCT: float = 18.0


# ── Panel size tiers ──────────────────────────────────────────────────────────
# Nominal H x W x D in mm. Unknown sizes fall back to DEFAULT_PANEL_SIZE.
PANEL_SIZES: list[str] = [
    "600x600x200",
    "800x800x300",
    "1000x1000x400",
    "1500x1000x400",
    "1600x1700x600",
    "2100x2900x1000",
]
DEFAULT_PANEL_SIZE: str = "800x800x300"

# The two largest tiers get metering, heavier busbar and heavier power wiring
LARGE_PANEL_SIZE: str = "1600x1700x600"
LARGEST_PANEL_SIZE: str = "2100x2900x1000"


# ── Selection thresholds ──────────────────────────────────────────────────────
# Share of outgoing feeders on 63A breakers; the rest go on 32A
FEEDER_HEAVY_SHARE: float = 0.4

# Motor count at or below which the small contactor/overload tier is used
SMALL_MOTOR_TIER_MAX: int = 5

# APFC capacitor bank sizing for every tier except the largest
APFC_MIN_CAPACITORS: int = 2
APFC_FEEDERS_PER_CAPACITOR: int = 3
APFC_LARGEST_TIER_CAPACITORS: int = 8


# ── Request defaults (mirrors the quotation form) ─────────────────────────────
DEFAULT_BUSBAR_TYPE: str = "copper"
DEFAULT_BRAND: str = "Schneider"
DEFAULT_IP_RATING: str = "IP55"
DEFAULT_STOCK_UNIT: str = "Pcs"


# ── Environment ───────────────────────────────────────────────────────────────
DATABASE_URL: str = os.getenv("DATABASE_URL", "")

# "static" uses the in-process price book, "database" the catalog tables
CATALOG_SOURCE: str = os.getenv(
    "CATALOG_SOURCE", "database" if DATABASE_URL else "static"
).lower()

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON: bool = os.getenv("LOG_FORMAT", "json").lower() != "text"

CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")
    if o.strip()
]

DB_SEED_ON_STARTUP: bool = os.getenv("DB_SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes")
