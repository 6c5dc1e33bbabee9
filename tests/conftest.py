"""
Pytest configuration for the discount engine.

Provides fixtures for:
- Building records with sensible defaults
- Capturing the evaluator's audit trail
- Writing transaction CSVs to a temporary directory
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Generator, List, Mapping, Optional, Tuple

import psycopg
import pytest

from discount_engine.config import Settings, get_settings
from discount_engine.domain.models import Record
from discount_engine.ingest import FIELDS

# Fields of a record no rule qualifies for.
NEUTRAL_RECORD = {
    "timestamp": "2024-01-01T10:00:00",
    "product_name": "Milk - Whole",
    "expiry_date": "2024-12-31",
    "quantity": 1,
    "unit_price": 10.0,
    "channel": "Store",
    "payment_method": "Cash",
}


class RecordingAuditSink:
    """Audit sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: List[Tuple[int, str, Mapping[str, Any]]] = []

    def record(self, level: int, message: str, extra: Optional[Mapping[str, Any]] = None) -> None:
        self.events.append((level, message, dict(extra or {})))

    @property
    def messages(self) -> List[str]:
        return [message for _, message, _ in self.events]


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop the cached Settings so env changes made by a test are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """
    Factory for records; keyword arguments override the neutral defaults.
    """

    def _make(**overrides: Any) -> Record:
        return Record(**{**NEUTRAL_RECORD, **overrides})

    return _make


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Write data lines (with the standard header) to a CSV and return its path.
    """

    def _write(lines: List[str], name: str = "transactions.csv", header: bool = True) -> Path:
        path = tmp_path / name
        content = [",".join(FIELDS)] if header else []
        content.extend(lines)
        path.write_text("\n".join(content) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "discount_engine"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection(test_dsn: str) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    try:
        conn = psycopg.connect(test_dsn, connect_timeout=5)
    except psycopg.OperationalError:
        pytest.skip("Database not available for integration tests")

    try:
        init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
        with conn.cursor() as cur:
            cur.execute(init_sql_path.read_text(encoding="utf-8"))
        conn.commit()
        yield conn
    finally:
        conn.close()


@pytest.fixture
def clean_processed_records(db_connection: psycopg.Connection) -> Generator[None, None, None]:
    """
    Empty the processed_records table before and after each test.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.processed_records RESTART IDENTITY;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.processed_records RESTART IDENTITY;")
    db_connection.commit()
