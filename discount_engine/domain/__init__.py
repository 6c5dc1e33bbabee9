"""
Domain package for the discount engine.

Exports the transaction Record used by ingestion, rules, evaluator and stores.
Keep this package focused on data definitions.
"""

from discount_engine.domain.models import Record

__all__ = [
    "Record",
]
