"""
Logging setup shared by the CLI, the batch orchestrator, the evaluator and the
record stores.

Records go to stderr with a `time | level | logger | message` layout, or as one
JSON object per line when structured output is requested. A batch run can also
keep its audit trail in a log file; the file receives exactly what the console
receives.

Usage:
    from discount_engine.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", log_file="rules_engine.log")
    log = get_logger(__name__)
    log.info("Rule applied", extra={"rule": "VisaDiscount", "product": "Wine - Red"})
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

HUMAN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
HUMAN_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def render_json(record: logging.LogRecord) -> str:
    """Serialize one record, lifting its `extra=` fields to the top level."""
    body: Dict[str, Any] = {
        "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    body.update(
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED and key != "extra"
    )

    # Older call sites pass everything as a single nested `extra` dict.
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        body.update(nested)

    if record.exc_info:
        body["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        body["stack_info"] = record.stack_info
    return json.dumps(body, default=str)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return render_json(record)


def _handler_specs(level: str, formatter: str, log_file: Optional[str]) -> Dict[str, Dict[str, Any]]:
    specs: Dict[str, Dict[str, Any]] = {
        "stderr": {"class": "logging.StreamHandler", "formatter": formatter, "level": level},
    }
    if log_file:
        specs["audit_file"] = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "encoding": "utf-8",
            "formatter": formatter,
            "level": level,
        }
    return specs


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None,
    force: bool = True,
) -> None:
    """
    Install handlers on the root logger.

    Parameters
    ----------
    level : str
        Level name applied to the root logger and every handler.
    json_logs : bool
        Emit JSON lines instead of the pipe-separated human layout.
    log_file : str | None
        Also append every record to this file (opened in append mode).
    force : bool
        When False, leave an already configured root logger untouched.
    """
    if not force and logging.getLogger().handlers:
        return

    formatter = "structured" if json_logs else "human"
    handlers = _handler_specs(level, formatter, log_file)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "human": {"format": HUMAN_FORMAT, "datefmt": HUMAN_DATEFMT},
                "structured": {"()": JsonFormatter},
            },
            "handlers": handlers,
            "root": {"handlers": sorted(handlers), "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter", "render_json"]
