"""Payment-method rule: a flat discount for Visa payments (exact match)."""

from __future__ import annotations

from discount_engine.domain.models import Record
from discount_engine.rules.base import DiscountRule

VISA = "Visa"
VISA_DISCOUNT = 5.0


def qualifies(record: Record) -> bool:
    return record.payment_method == VISA


def value(record: Record) -> float:
    return VISA_DISCOUNT


PAYMENT_RULE = DiscountRule(name="VisaDiscount", qualifies=qualifies, value=value)

__all__ = ["PAYMENT_RULE", "VISA", "VISA_DISCOUNT"]
