"""Calendar-date rule: a special discount on March 23rd of any year."""

from __future__ import annotations

import re

from discount_engine.domain.models import Record
from discount_engine.rules.base import DiscountRule
from discount_engine.rules.dates import transaction_date_text

SPECIAL_DAY = re.compile(r".*-03-23")
SPECIAL_DAY_DISCOUNT = 50.0


def qualifies(record: Record) -> bool:
    return SPECIAL_DAY.fullmatch(transaction_date_text(record.timestamp)) is not None


def value(record: Record) -> float:
    return SPECIAL_DAY_DISCOUNT


CALENDAR_RULE = DiscountRule(name="March23SpecialDiscount", qualifies=qualifies, value=value)

__all__ = ["CALENDAR_RULE", "SPECIAL_DAY_DISCOUNT"]
