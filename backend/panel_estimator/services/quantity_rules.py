"""
Quantity Rule Resolver — turns a declarative BOM quantity rule into a concrete
line quantity for a given feeder / motor count.

    fixed               → base
    per_feeder          → feeders × base
    per_motor           → motors × base
    per_capacitor_bank  → ceil(feeders / 2) × base

A zero feeder or motor count legitimately resolves to a zero quantity; callers
keep such lines so the full rule set stays visible downstream.
"""
import math
from typing import Union

from panel_estimator.models.estimation_schema import QuantityRule

FEEDERS_PER_CAPACITOR_BANK: int = 2


def resolve_quantity(
    rule: Union[QuantityRule, str],
    base_quantity: int,
    feeder_count: int,
    motor_count: int,
) -> int:
    """Resolve *rule* to a non-negative integer quantity."""
    if base_quantity < 1:
        raise ValueError(f"base_quantity must be at least 1, got {base_quantity}")
    if feeder_count < 0 or motor_count < 0:
        raise ValueError("feeder_count and motor_count must be non-negative")

    rule = QuantityRule(rule)
    if rule is QuantityRule.PER_FEEDER:
        return feeder_count * base_quantity
    if rule is QuantityRule.PER_MOTOR:
        return motor_count * base_quantity
    if rule is QuantityRule.PER_CAPACITOR_BANK:
        return math.ceil(feeder_count / FEEDERS_PER_CAPACITOR_BANK) * base_quantity
    return base_quantity
