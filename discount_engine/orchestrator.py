"""
Batch orchestration: read, evaluate, price, save.

Records are processed strictly one at a time. Each record is fully evaluated
and priced, then handed to the record store, before the next one is read. Only
the first few priced records are kept (for display); everything else is
dropped once saved.

Usage (example from CLI):
    from discount_engine.orchestrator import RunConfig, run_batch

    result = run_batch(RunConfig(input_path="data/TRX1000.csv"))
    print(result.summary)

When `persist_summary` is set, the summary is saved to `results/` as well:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from itertools import islice
from pathlib import Path
from typing import List, Optional, TypedDict

from discount_engine.config import MalformedRowPolicy, get_settings
from discount_engine.domain.models import Record
from discount_engine.evaluator import DiscountEvaluator
from discount_engine.infrastructure.store import RecordStore, resolve_store, save_record
from discount_engine.ingest import RecordReader
from discount_engine.utils.logging import get_logger
from discount_engine.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)


class BatchSummary(TypedDict, total=False):
    """
    Metrics of one batch run.

    Totals are plain float sums of the per-record prices, rounded to cents for
    display only.
    """

    input_path: str
    store: str
    records: int
    skipped_rows: int
    discounted: int
    saved: int
    failed_saves: int
    gross_total: float
    net_total: float
    duration_seconds: float
    throughput_records_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


@dataclass
class RunConfig:
    """Options of a batch run; unset values fall back to settings."""

    input_path: Optional[Path | str] = None
    has_header: Optional[bool] = None
    malformed_row_policy: Optional[MalformedRowPolicy] = None
    store: Optional[str] = None
    preview_rows: Optional[int] = None
    limit: Optional[int] = None
    results_dir: Path | str = "results"
    persist_summary: bool = False


@dataclass
class BatchResult:
    summary: BatchSummary
    preview: List[Record] = field(default_factory=list)


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _persist_summary(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Summary persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _finish_summary(summary: BatchSummary, stats: ProfileStats) -> BatchSummary:
    summary["gross_total"] = _round_float(summary["gross_total"])
    summary["net_total"] = _round_float(summary["net_total"])
    summary["duration_seconds"] = _round_float(stats.duration_seconds, 3)
    summary["throughput_records_per_sec"] = _round_float(stats.per_second(summary["records"]))
    summary["peak_rss_bytes"] = stats.peak_rss_bytes
    summary["cpu_percent"] = (
        _round_float(stats.cpu_percent, 1) if stats.cpu_percent is not None else None
    )
    return summary


def run_batch(
    config: Optional[RunConfig] = None,
    evaluator: Optional[DiscountEvaluator] = None,
    store: Optional[RecordStore] = None,
) -> BatchResult:
    """
    Price every record of the input file and save each one.

    Parameters
    ----------
    config : RunConfig | None
        Run options. Defaults come from settings.
    evaluator : DiscountEvaluator | None
        Evaluator to use; defaults to the full rule catalog with a logging audit sink.
    store : RecordStore | None
        Store to save to; defaults to the store named in config/settings. The
        store is closed when the run ends, whether it succeeds or not.

    Raises
    ------
    IngestError
        If the input cannot be read, or a malformed row is met under the
        ``abort`` policy. Persistence failures never raise.
    """
    settings = get_settings()
    config = config or RunConfig()
    input_path = Path(config.input_path or settings.input_path)
    has_header = settings.input_has_header if config.has_header is None else config.has_header
    policy = config.malformed_row_policy or settings.malformed_row_policy
    preview_rows = settings.preview_rows if config.preview_rows is None else config.preview_rows

    evaluator = evaluator or DiscountEvaluator()
    store = store or resolve_store(config.store or settings.record_store)
    reader = RecordReader(input_path, has_header=has_header, policy=policy)
    records = reader if config.limit is None else islice(reader, max(config.limit, 0))

    summary = BatchSummary(
        input_path=str(input_path),
        store=store.name,
        records=0,
        skipped_rows=0,
        discounted=0,
        saved=0,
        failed_saves=0,
        gross_total=0.0,
        net_total=0.0,
    )
    preview: List[Record] = []

    log.info(
        f"[BATCH START] {input_path}",
        extra={"input_path": str(input_path), "store": store.name, "policy": policy},
    )
    try:
        with profile_block("discount-batch") as stats:
            for record in records:
                priced = evaluator.apply(record)
                summary["records"] += 1
                summary["gross_total"] += priced.gross_price
                summary["net_total"] += priced.final_price
                if priced.discount > 0:
                    summary["discounted"] += 1

                if save_record(store, priced):
                    summary["saved"] += 1
                else:
                    summary["failed_saves"] += 1

                if len(preview) < preview_rows:
                    preview.append(priced)
    finally:
        store.close()

    summary["skipped_rows"] = reader.skipped
    _finish_summary(summary, stats)

    if summary["failed_saves"]:
        log.warning(
            f"[BATCH] {summary['failed_saves']} record(s) could not be saved",
            extra={"failed_saves": summary["failed_saves"]},
        )
    log.info(
        f"[BATCH COMPLETE] {summary['records']} record(s) priced",
        extra={
            "records": summary["records"],
            "skipped_rows": summary["skipped_rows"],
            "saved": summary["saved"],
            "duration": summary["duration_seconds"],
        },
    )

    if config.persist_summary:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "summary": dict(summary),
        }
        _persist_summary(payload, Path(config.results_dir))

    return BatchResult(summary=summary, preview=preview)


__all__ = ["BatchResult", "BatchSummary", "RunConfig", "run_batch"]
