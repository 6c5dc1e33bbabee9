"""
Expiry-window rule.

Products sold within 30 days of their expiry date get a discount that grows as
expiry approaches: one percent for every day short of 30. A record whose dates
do not parse, or that is sold on or after its expiry date, does not qualify.
"""

from __future__ import annotations

from typing import Optional

from discount_engine.domain.models import Record
from discount_engine.rules.base import DiscountRule
from discount_engine.rules.dates import days_between, transaction_date_text

EXPIRY_WINDOW_DAYS = 30


def days_remaining(record: Record) -> Optional[int]:
    return days_between(transaction_date_text(record.timestamp), record.expiry_date)


def qualifies(record: Record) -> bool:
    remaining = days_remaining(record)
    return remaining is not None and 0 < remaining < EXPIRY_WINDOW_DAYS


def value(record: Record) -> float:
    remaining = days_remaining(record)
    if remaining is None:
        return 0.0
    return float(EXPIRY_WINDOW_DAYS - remaining)


EXPIRY_RULE = DiscountRule(name="ExpiryDiscount", qualifies=qualifies, value=value)

__all__ = ["EXPIRY_RULE", "EXPIRY_WINDOW_DAYS", "days_remaining"]
