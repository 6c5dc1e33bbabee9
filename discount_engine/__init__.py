"""
Discount Engine - rules-based pricing for retail transaction batches.

Every transaction record is evaluated against a fixed catalog of discount
rules:

- Expiry window (products close to their expiry date)
- Category prefix (cheese and wine)
- Payment method (Visa)
- Tiered quantity
- Calendar date (March 23rd)

The two largest qualifying discounts are averaged into one effective discount,
which is applied to unit price x quantity to give the final price.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from discount_engine.audit import AuditSink, LoggingAuditSink, NullAuditSink
from discount_engine.config import Settings, get_settings
from discount_engine.domain.models import Record
from discount_engine.evaluator import DiscountEvaluator, final_price, top_average
from discount_engine.ingest import parse_line, read_records
from discount_engine.orchestrator import BatchResult, BatchSummary, RunConfig, run_batch
from discount_engine.rules import DEFAULT_CATALOG, DiscountRule, available_rules
from discount_engine.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Record",
    # Rules
    "DEFAULT_CATALOG",
    "DiscountRule",
    "available_rules",
    # Evaluation
    "DiscountEvaluator",
    "final_price",
    "top_average",
    # Audit
    "AuditSink",
    "LoggingAuditSink",
    "NullAuditSink",
    # Input
    "parse_line",
    "read_records",
    # Orchestration
    "BatchResult",
    "BatchSummary",
    "RunConfig",
    "run_batch",
    # Logging
    "configure_logging",
    "get_logger",
]
