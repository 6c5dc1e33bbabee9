"""
Audit sinks for the discount evaluator.

The evaluator reports every decision (rule qualified, rule value, aggregate,
final price) to an injected sink instead of a process-global logger, so tests
can capture the trail and batch runs can route it to the log file.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from discount_engine.utils.logging import get_logger


@runtime_checkable
class AuditSink(Protocol):
    """Receives leveled, human-readable audit messages."""

    def record(
        self, level: int, message: str, extra: Optional[Mapping[str, Any]] = None
    ) -> None:
        ...


class LoggingAuditSink:
    """Forward audit events to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger("discount_engine.audit")

    def record(
        self, level: int, message: str, extra: Optional[Mapping[str, Any]] = None
    ) -> None:
        self._logger.log(level, message, extra=dict(extra) if extra else None)


class NullAuditSink:
    """Discard audit events."""

    def record(
        self, level: int, message: str, extra: Optional[Mapping[str, Any]] = None
    ) -> None:
        del level, message, extra


__all__ = ["AuditSink", "LoggingAuditSink", "NullAuditSink"]
