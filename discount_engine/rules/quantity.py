"""
Tiered-quantity rule.

Buying more than five units unlocks a discount that steps up with quantity:

    6-9    ->  5%
    10-14  ->  7%
    15+    -> 10%
"""

from __future__ import annotations

from discount_engine.domain.models import Record
from discount_engine.rules.base import DiscountRule

MIN_QUANTITY = 5

# (lowest quantity of the tier, discount); highest tier first.
QUANTITY_TIERS = (
    (15, 10.0),
    (10, 7.0),
    (6, 5.0),
)


def qualifies(record: Record) -> bool:
    return record.quantity > MIN_QUANTITY


def value(record: Record) -> float:
    for lowest, discount in QUANTITY_TIERS:
        if record.quantity >= lowest:
            return discount
    return 0.0


QUANTITY_RULE = DiscountRule(name="QuantityDiscount", qualifies=qualifies, value=value)

__all__ = ["MIN_QUANTITY", "QUANTITY_RULE", "QUANTITY_TIERS"]
