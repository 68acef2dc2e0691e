"""
CostingEngine — layered cost roll-up from a priced BOM to the final payable
amount.

Fixed computation order (each step uses only prior results):

  1. material      = Σ quantity × unit_price
  2. powder coating 3 %, labour 20 %, wiring 15 %, testing 5 % of material
  3. production    = sum of the four
  4. total cost    = material + production
  5. before tax    = total cost × (1 + margin / 100)
  6. tax           = before tax × (tax % / 100)
  7. final amount  = before tax + tax

All arithmetic is exact Decimal; values are rounded half-up to 2 places only
when the breakdown is returned. The roll-up has no failure path: an empty
BOM rolls up to zeros.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from panel_estimator import config as cfg
from panel_estimator.models.estimation_schema import BOMLineItem, CostBreakdown

logger = logging.getLogger("panel-estimator-cost")

Number = Union[int, float, str, Decimal]

_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)


# ---------------------------------------------------------------------------
# Production overhead ratios (fraction of material cost)
# ---------------------------------------------------------------------------
_POWDER_COATING_RATIO = Decimal(cfg.POWDER_COATING_RATIO)
_LABOUR_RATIO = Decimal(cfg.LABOUR_RATIO)
_WIRING_RATIO = Decimal(cfg.WIRING_RATIO)
_TESTING_RATIO = Decimal(cfg.TESTING_RATIO)


def _dec(value: Number) -> Decimal:
    # str() first so binary float noise (0.1 → 0.1000000000000000055…) never enters
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _out(value: Decimal) -> float:
    return float(value.quantize(_CENT, rounding=ROUND_HALF_UP))


class CostingEngine:
    """
    Stateless roll-up calculator.

    Args:
        profit_margin: default margin percentage for ``rollup`` calls that
                       don't pass one (20 when omitted).
        tax_percentage: default tax percentage (18 when omitted).
    """

    def __init__(
        self,
        profit_margin: Number = cfg.DEFAULT_PROFIT_MARGIN_PCT,
        tax_percentage: Number = cfg.DEFAULT_TAX_PCT,
    ):
        self.profit_margin = _dec(profit_margin)
        self.tax_percentage = _dec(tax_percentage)

    # ------------------------------------------------------------------
    # Material
    # ------------------------------------------------------------------

    @staticmethod
    def material_cost(items: Iterable[BOMLineItem]) -> Decimal:
        """Exact Σ quantity × unit_price, unrounded."""
        return sum((item.quantity * _dec(item.unit_price) for item in items), Decimal(0))

    # ------------------------------------------------------------------
    # Roll-up
    # ------------------------------------------------------------------

    def rollup(
        self,
        items: Iterable[BOMLineItem],
        profit_margin: Optional[Number] = None,
        tax_percentage: Optional[Number] = None,
    ) -> CostBreakdown:
        """
        Roll a BOM up to a CostBreakdown.

        ``profit_margin`` and ``tax_percentage`` are percentages passed through
        to the breakdown unchanged; they fall back to the engine defaults.
        """
        margin = self.profit_margin if profit_margin is None else _dec(profit_margin)
        tax_pct = self.tax_percentage if tax_percentage is None else _dec(tax_percentage)
        if margin < 0 or tax_pct < 0:
            raise ValueError("profit_margin and tax_percentage must be non-negative")

        material = self.material_cost(items)

        powder_coating = material * _POWDER_COATING_RATIO
        labour = material * _LABOUR_RATIO
        wiring = material * _WIRING_RATIO
        testing = material * _TESTING_RATIO
        production = powder_coating + labour + wiring + testing

        total = material + production
        before_tax = total * (1 + margin / _HUNDRED)
        tax_amount = before_tax * (tax_pct / _HUNDRED)
        final = before_tax + tax_amount

        logger.debug(
            f"Rollup: material={material} production={production} final={final}"
        )

        return CostBreakdown(
            material_cost=_out(material),
            powder_coating=_out(powder_coating),
            labour=_out(labour),
            wiring=_out(wiring),
            testing=_out(testing),
            production_cost=_out(production),
            total_cost=_out(total),
            profit_margin=float(margin),
            price_before_tax=_out(before_tax),
            tax_percentage=float(tax_pct),
            tax_amount=_out(tax_amount),
            final_amount=_out(final),
        )
