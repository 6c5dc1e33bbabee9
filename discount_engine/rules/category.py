"""
Category-prefix rule: cheese and wine products.

Qualification is case-insensitive, but the value lookup compares the category
(text before the first " - ") case-sensitively. A product such as
"cheese - soft" therefore qualifies with a value of 0.0. Existing outputs depend
on this, so it is kept as is.
"""

from __future__ import annotations

from discount_engine.domain.models import Record
from discount_engine.rules.base import DiscountRule

CATEGORY_SEPARATOR = " - "
QUALIFYING_PREFIXES = ("cheese", "wine")
CATEGORY_DISCOUNTS = {
    "Cheese": 10.0,
    "Wine": 5.0,
}


def category_of(record: Record) -> str:
    return record.product_name.split(CATEGORY_SEPARATOR)[0]


def qualifies(record: Record) -> bool:
    return record.product_name.lower().startswith(QUALIFYING_PREFIXES)


def value(record: Record) -> float:
    return CATEGORY_DISCOUNTS.get(category_of(record), 0.0)


CATEGORY_RULE = DiscountRule(name="CheeseWineDiscount", qualifies=qualifies, value=value)

__all__ = ["CATEGORY_DISCOUNTS", "CATEGORY_RULE", "category_of"]
