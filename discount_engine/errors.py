"""
Exception hierarchy for the discount engine.

Rule evaluation never raises; these errors belong to the collaborators around
the core (reading input and persisting priced records).
"""

from __future__ import annotations


class DiscountEngineError(Exception):
    """Base class for all errors raised by this package."""


class IngestError(DiscountEngineError):
    """The input file could not be read."""


class MalformedRowError(IngestError):
    """A single input line could not be turned into a Record."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class PersistenceError(DiscountEngineError):
    """A record store failed to save a record."""


__all__ = [
    "DiscountEngineError",
    "IngestError",
    "MalformedRowError",
    "PersistenceError",
]
