"""
Rules package for the discount engine.

Re-exports the rule contract and the concrete rules, and defines the default
catalog: the ordered tuple of rules every record is evaluated against. Order
only affects the order of audit messages; aggregation does not depend on it.
To add a rule, define a `DiscountRule` and append it to `DEFAULT_CATALOG`.
"""

from typing import List, Tuple

from discount_engine.rules.base import DiscountRule, Predicate, ValueFunction
from discount_engine.rules.calendar import CALENDAR_RULE
from discount_engine.rules.category import CATEGORY_RULE
from discount_engine.rules.expiry import EXPIRY_RULE
from discount_engine.rules.payment import PAYMENT_RULE
from discount_engine.rules.quantity import QUANTITY_RULE

DEFAULT_CATALOG: Tuple[DiscountRule, ...] = (
    EXPIRY_RULE,
    CATEGORY_RULE,
    PAYMENT_RULE,
    QUANTITY_RULE,
    CALENDAR_RULE,
)


def available_rules() -> List[str]:
    """Names of the default catalog's rules, in evaluation order."""
    return [rule.name for rule in DEFAULT_CATALOG]


__all__ = [
    # Contract
    "DiscountRule",
    "Predicate",
    "ValueFunction",
    # Concrete rules
    "CALENDAR_RULE",
    "CATEGORY_RULE",
    "EXPIRY_RULE",
    "PAYMENT_RULE",
    "QUANTITY_RULE",
    # Catalog
    "DEFAULT_CATALOG",
    "available_rules",
]
