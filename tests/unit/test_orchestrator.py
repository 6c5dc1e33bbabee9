from __future__ import annotations

import json

import pytest

from discount_engine.audit import NullAuditSink
from discount_engine.errors import MalformedRowError, PersistenceError
from discount_engine.evaluator import DiscountEvaluator
from discount_engine.orchestrator import BatchSummary, RunConfig, _finish_summary, run_batch
from discount_engine.utils.profiler import ProfileStats

CHEESE_VISA_QTY10 = "2024-01-01T10:00:00,Cheese - Aged,2024-12-31,10,20.0,Store,Visa"
PLAIN_MILK = "2024-01-01T10:00:00,Milk - Whole,2024-12-31,2,1.5,Store,Cash"
SPECIAL_DAY = "2024-03-23T10:00:00,Bread - Rye,2024-12-31,1,4.0,App,Cash"
BAD_ROW = "2024-01-01T10:00:00,Milk - Whole,2024-12-31,lots,1.5,Store,Cash"

EXPECTED_RECORDS = 3
EXPECTED_GROSS = 200.0 + 3.0 + 4.0
EXPECTED_NET = 183.0 + 3.0 + 2.0


class _ProbeStore:
    name = "probe"

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.saved: list = []
        self.close_calls = 0

    def save(self, record) -> None:
        if record.product_name in self.fail_on:
            raise PersistenceError("write refused")
        self.saved.append(record)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def quiet_evaluator() -> DiscountEvaluator:
    return DiscountEvaluator(audit=NullAuditSink())


def test_run_batch_prices_and_saves_every_record(write_csv, quiet_evaluator):
    path = write_csv([CHEESE_VISA_QTY10, PLAIN_MILK, SPECIAL_DAY])
    store = _ProbeStore()

    result = run_batch(RunConfig(input_path=path), evaluator=quiet_evaluator, store=store)

    summary = result.summary
    assert summary["records"] == EXPECTED_RECORDS
    assert summary["saved"] == EXPECTED_RECORDS
    assert summary["failed_saves"] == 0
    assert summary["discounted"] == 2
    assert summary["gross_total"] == pytest.approx(EXPECTED_GROSS)
    assert summary["net_total"] == pytest.approx(EXPECTED_NET)
    assert summary["store"] == "probe"
    assert summary["duration_seconds"] >= 0

    assert [r.discount for r in store.saved] == [8.5, 0.0, 50.0]
    assert store.saved[0].final_price == pytest.approx(183.0)
    assert store.close_calls == 1


def test_failed_saves_do_not_stop_the_batch(write_csv, quiet_evaluator):
    path = write_csv([CHEESE_VISA_QTY10, PLAIN_MILK, SPECIAL_DAY])
    store = _ProbeStore(fail_on={"Milk - Whole"})

    result = run_batch(RunConfig(input_path=path), evaluator=quiet_evaluator, store=store)

    assert result.summary["records"] == EXPECTED_RECORDS
    assert result.summary["saved"] == 2
    assert result.summary["failed_saves"] == 1
    assert [r.product_name for r in store.saved] == ["Cheese - Aged", "Bread - Rye"]
    # The failed save leaves the computed price untouched.
    assert result.preview[1].final_price == pytest.approx(3.0)


def test_preview_keeps_only_the_first_records(write_csv, quiet_evaluator):
    path = write_csv([PLAIN_MILK] * 5)

    result = run_batch(
        RunConfig(input_path=path, preview_rows=2), evaluator=quiet_evaluator, store=_ProbeStore()
    )

    assert result.summary["records"] == 5
    assert len(result.preview) == 2


def test_limit_stops_early(write_csv, quiet_evaluator):
    path = write_csv([PLAIN_MILK] * 5)
    store = _ProbeStore()

    result = run_batch(RunConfig(input_path=path, limit=3), evaluator=quiet_evaluator, store=store)

    assert result.summary["records"] == 3
    assert len(store.saved) == 3


def test_skip_policy_reports_skipped_rows(write_csv, quiet_evaluator):
    path = write_csv([CHEESE_VISA_QTY10, BAD_ROW, PLAIN_MILK])

    result = run_batch(
        RunConfig(input_path=path, malformed_row_policy="skip"),
        evaluator=quiet_evaluator,
        store=_ProbeStore(),
    )

    assert result.summary["records"] == 2
    assert result.summary["skipped_rows"] == 1


def test_abort_policy_fails_the_batch_and_closes_store(write_csv, quiet_evaluator):
    path = write_csv([CHEESE_VISA_QTY10, BAD_ROW, PLAIN_MILK])
    store = _ProbeStore()

    with pytest.raises(MalformedRowError):
        run_batch(
            RunConfig(input_path=path, malformed_row_policy="abort"),
            evaluator=quiet_evaluator,
            store=store,
        )

    assert len(store.saved) == 1
    assert store.close_calls == 1


def test_policy_defaults_to_settings(write_csv, quiet_evaluator, monkeypatch):
    monkeypatch.setenv("MALFORMED_ROW_POLICY", "skip")
    path = write_csv([BAD_ROW, PLAIN_MILK])

    result = run_batch(RunConfig(input_path=path), evaluator=quiet_evaluator, store=_ProbeStore())

    assert result.summary["skipped_rows"] == 1


def test_store_resolved_from_settings(write_csv, quiet_evaluator, monkeypatch):
    monkeypatch.setenv("RECORD_STORE", "log")
    path = write_csv([PLAIN_MILK])

    result = run_batch(RunConfig(input_path=path), evaluator=quiet_evaluator)

    assert result.summary["store"] == "log"
    assert result.summary["saved"] == 1


def test_summary_is_persisted_as_json(write_csv, quiet_evaluator, tmp_path):
    path = write_csv([PLAIN_MILK])
    results_dir = tmp_path / "results"

    run_batch(
        RunConfig(input_path=path, results_dir=results_dir, persist_summary=True),
        evaluator=quiet_evaluator,
        store=_ProbeStore(),
    )

    payload = json.loads((results_dir / "latest.json").read_text(encoding="utf-8"))
    assert payload["summary"]["records"] == 1
    assert len(list(results_dir.glob("run-*.json"))) == 1


def test_idle_cpu_reading_is_reported_as_zero():
    summary = BatchSummary(records=0, gross_total=0.0, net_total=0.0)
    stats = ProfileStats(label="discount-batch", duration_seconds=0.5, cpu_percent=0.0)

    _finish_summary(summary, stats)

    assert summary["cpu_percent"] == 0.0
    assert summary["throughput_records_per_sec"] == 0.0
