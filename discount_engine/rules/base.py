"""
Rule contract for the discount engine.

A rule is data: a name plus two plain callables over a Record. `qualifies`
decides whether the rule applies; `value` returns the discount percentage and
is only ever called for records where `qualifies` returned True. Concrete rules
live in sibling modules and are collected into the catalog in
`discount_engine.rules`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from discount_engine.domain.models import Record

Predicate = Callable[[Record], bool]
ValueFunction = Callable[[Record], float]


@dataclass(frozen=True)
class DiscountRule:
    """
    One discount policy.

    Attributes
    ----------
    name : str
        Identifier used in audit messages. Expected to be unique in a catalog.
    qualifies : Callable[[Record], bool]
        Must not raise for malformed input; return False instead.
    value : Callable[[Record], float]
        Discount percentage for a qualifying record.
    """

    name: str
    qualifies: Predicate
    value: ValueFunction


__all__ = ["DiscountRule", "Predicate", "ValueFunction"]
