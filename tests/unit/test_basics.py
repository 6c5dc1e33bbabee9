import csv
from pathlib import Path
from time import sleep

from discount_engine import config
from discount_engine.ingest import FIELDS, read_records
from discount_engine.utils import profiler
from scripts import generate_data


def test_get_settings_defaults():
    settings = config.get_settings()
    assert settings.input_path == "data/sample_transactions.csv"
    assert settings.input_has_header is True
    assert settings.malformed_row_policy == "abort"
    assert settings.record_store == "log"
    assert settings.store_delay_ms >= 0
    assert settings.preview_rows > 0


def test_default_input_ships_with_the_repo():
    repo_root = Path(__file__).resolve().parents[2]
    default_input = repo_root / config.get_settings().input_path

    records = list(read_records(default_input))

    assert len(records) == 8


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MALFORMED_ROW_POLICY", "skip")
    monkeypatch.setenv("PREVIEW_ROWS", "3")

    settings = config.get_settings()

    assert settings.malformed_row_policy == "skip"
    assert settings.preview_rows == 3


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.peak_rss_bytes is None or stats.peak_rss_bytes > 0
    if stats.cpu_percent is not None:
        assert isinstance(stats.cpu_percent, float)


def test_generate_data_writes_readable_csv(tmp_path: Path):
    csv_path = tmp_path / "transactions.csv"
    generate_data._generate_rows_csv(csv_path, rows=25, batch_size=10, seed=123)

    with csv_path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # header + 25 rows
    assert len(rows) == 26
    assert tuple(rows[0]) == FIELDS

    records = list(read_records(csv_path))
    assert len(records) == 25
    assert all(record.quantity >= 1 for record in records)


def test_generate_data_is_deterministic(tmp_path: Path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    generate_data._generate_rows_csv(first, rows=10, batch_size=4, seed=7)
    generate_data._generate_rows_csv(second, rows=10, batch_size=4, seed=7)

    assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")
