"""
Discount evaluation and pricing.

For each record the evaluator:
1. runs every rule's predicate and reports the qualifying ones,
2. computes the value of qualifying rules only,
3. averages the two largest values (0.0 when nothing qualifies),
4. applies the discount to unit price x quantity.

Usage:
    from discount_engine.evaluator import DiscountEvaluator

    evaluator = DiscountEvaluator()
    priced = evaluator.apply(record)
    print(priced.discount, priced.final_price)

Floats are used throughout with no rounding; `final_price` is plain binary
floating point arithmetic, so compare it approximately.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from discount_engine.audit import AuditSink, LoggingAuditSink
from discount_engine.domain.models import Record
from discount_engine.rules import DEFAULT_CATALOG, DiscountRule
from discount_engine.utils.logging import get_logger

log = get_logger(__name__)

TOP_DISCOUNTS = 2


def top_average(values: Sequence[float], top: int = TOP_DISCOUNTS) -> float:
    """
    Mean of the `top` largest values, or 0.0 for an empty sequence.

    Discounts are not summed: only the largest contributions count, so stacking
    many small rules cannot run away.
    """
    if not values:
        return 0.0
    best = sorted(values, reverse=True)[:top]
    return sum(best) / len(best)


def final_price(record: Record, discount: float) -> float:
    return record.unit_price * record.quantity * (1 - discount / 100)


class DiscountEvaluator:
    """
    Evaluate a fixed rule catalog against records and price them.

    The catalog is read-only and the evaluator keeps no per-record state, so a
    single instance can be reused for any number of records.
    """

    def __init__(
        self,
        rules: Optional[Sequence[DiscountRule]] = None,
        audit: Optional[AuditSink] = None,
    ) -> None:
        self.rules: Tuple[DiscountRule, ...] = tuple(
            DEFAULT_CATALOG if rules is None else rules
        )
        self.audit: AuditSink = audit if audit is not None else LoggingAuditSink()

    def _emit(self, level: int, message: str, **fields: Any) -> None:
        try:
            self.audit.record(level, message, fields)
        except Exception:  # noqa: BLE001 - audit trail must never change pricing
            log.debug("Audit sink failed", exc_info=True)

    def _qualifies(self, rule: DiscountRule, record: Record) -> bool:
        try:
            return bool(rule.qualifies(record))
        except Exception:  # noqa: BLE001 - a failing predicate means "does not apply"
            log.debug(
                f"Rule {rule.name} raised while qualifying; treated as not applicable",
                exc_info=True,
                extra={"rule": rule.name},
            )
            return False

    def _value(self, rule: DiscountRule, record: Record) -> Optional[float]:
        try:
            return rule.value(record)
        except Exception:  # noqa: BLE001 - a failing value function means "does not apply"
            log.debug(
                f"Rule {rule.name} raised while computing its value; treated as not applicable",
                exc_info=True,
                extra={"rule": rule.name},
            )
            return None

    def qualifying_rules(self, record: Record) -> List[DiscountRule]:
        qualifying: List[DiscountRule] = []
        for rule in self.rules:
            if self._qualifies(rule, record):
                self._emit(
                    logging.INFO,
                    f"Rule {rule.name} qualifies for product {record.product_name}",
                    rule=rule.name,
                    product=record.product_name,
                )
                qualifying.append(rule)
        return qualifying

    def evaluate(self, record: Record) -> float:
        """
        Return the effective discount percentage for `record`.

        Never raises because of a rule: a predicate or value function that
        fails counts as the rule not applying. Value functions are only called
        for qualifying rules.
        """
        values: List[float] = []
        for rule in self.qualifying_rules(record):
            discount_value = self._value(rule, record)
            if discount_value is None:
                continue
            self._emit(
                logging.INFO,
                f"Applying {discount_value}% discount from rule {rule.name} "
                f"for product {record.product_name}",
                rule=rule.name,
                product=record.product_name,
                discount=discount_value,
            )
            values.append(discount_value)

        if not values:
            self._emit(
                logging.INFO,
                f"No discounts apply for product {record.product_name}",
                product=record.product_name,
            )
            return 0.0

        average = top_average(values)
        self._emit(
            logging.INFO,
            f"Calculated average of top {TOP_DISCOUNTS} discounts: {average}% "
            f"for product {record.product_name}",
            product=record.product_name,
            discount=average,
        )
        return average

    def price(self, record: Record, discount: float) -> Record:
        """Return a copy of `record` with `discount` and `final_price` filled in."""
        total = final_price(record, discount)
        self._emit(
            logging.INFO,
            f"Final price for product {record.product_name}: {total}",
            product=record.product_name,
            final_price=total,
        )
        return record.with_pricing(discount=discount, final_price=total)

    def apply(self, record: Record) -> Record:
        return self.price(record, self.evaluate(record))


__all__ = ["DiscountEvaluator", "TOP_DISCOUNTS", "final_price", "top_average"]
