"""
Record stores: where priced records go after evaluation.

Saving is fire-and-forget from the batch's point of view. `save_record` calls a
store once per record, logs the outcome, and reports success as a boolean; a
failed save is never retried and never stops the batch.

Stores:
- ``log``: simulated database, logs each record and optionally sleeps.
- ``postgres``: inserts each record into ``public.processed_records``.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

from psycopg import Connection

from discount_engine.config import get_settings
from discount_engine.domain.models import Record
from discount_engine.errors import PersistenceError
from discount_engine.infrastructure.db_factory import get_sync_connection
from discount_engine.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """
    Common interface for record persistence.

    `save` raises on failure; callers go through `save_record`, which turns the
    outcome into a logged boolean.
    """

    name: str

    def save(self, record: Record) -> None:
        ...

    def close(self) -> None:
        ...


class SimulatedRecordStore:
    """
    Stand-in for a database: logs what would be written.

    `delay_ms` emulates the latency of a real write (STORE_DELAY_MS; 100 is a
    realistic value, 0 disables it).
    """

    name: str = "log"

    def __init__(self, delay_ms: Optional[int] = None) -> None:
        self.delay_ms = get_settings().store_delay_ms if delay_ms is None else delay_ms
        self.saved = 0

    def save(self, record: Record) -> None:
        log.info(
            f"Saving to database: {record.product_name}, Discount: {record.discount}%, "
            f"Final Price: {record.final_price}",
            extra={"product": record.product_name},
        )
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)
        self.saved += 1

    def close(self) -> None:
        return None


_INSERT_SQL = """
    INSERT INTO public.processed_records (
        transaction_ts, product_name, expiry_date, quantity, unit_price,
        channel, payment_method, discount, final_price
    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s);
"""


class PostgresRecordStore:
    """
    Insert each record into Postgres and commit it on its own.

    The connection is opened on first save, so constructing the store never
    touches the network. A failed insert is rolled back so the next record can
    still be written on the same connection. If connecting fails, later saves
    fail immediately until the store is closed.
    """

    name: str = "postgres"

    def __init__(
        self,
        dsn_override: Optional[str] = None,
        connect: Callable[..., Connection] = get_sync_connection,
    ) -> None:
        self._dsn_override = dsn_override
        self._connect = connect
        self._conn: Connection | None = None
        self._connect_error: Exception | None = None

    def _connection(self) -> Connection:
        # One connect attempt (with its retries) per run; later saves fail fast.
        if self._connect_error is not None:
            raise PersistenceError(f"postgres unavailable: {self._connect_error}")
        if self._conn is None:
            try:
                self._conn = self._connect(self._dsn_override)
            except Exception as exc:
                self._connect_error = exc
                raise PersistenceError(f"postgres unavailable: {exc}") from exc
        return self._conn

    def save(self, record: Record) -> None:
        conn = self._connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    _INSERT_SQL,
                    (
                        record.timestamp,
                        record.product_name,
                        record.expiry_date,
                        record.quantity,
                        record.unit_price,
                        record.channel,
                        record.payment_method,
                        record.discount,
                        record.final_price,
                    ),
                )
            conn.commit()
        except Exception as exc:
            if conn.closed:
                # Reconnect on the next save.
                self._conn = None
            else:
                conn.rollback()
            raise PersistenceError(f"insert failed for {record.product_name}: {exc}") from exc

    def close(self) -> None:
        self._connect_error = None
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None


def save_record(store: RecordStore, record: Record) -> bool:
    """
    Save `record` and log the outcome. Returns True on success.

    Failures are logged with their traceback and swallowed.
    """
    try:
        store.save(record)
    except Exception as exc:  # noqa: BLE001 - persistence is fire-and-forget
        log.exception(
            f"Failed to save record for {record.product_name}: {exc}",
            extra={"store": store.name, "product": record.product_name},
        )
        return False
    log.info(
        f"Successfully saved record for {record.product_name}",
        extra={"store": store.name, "product": record.product_name},
    )
    return True


def _store_factories() -> Dict[str, Callable[[], RecordStore]]:
    """Registry of available record stores."""
    return {
        "log": lambda: SimulatedRecordStore(),
        "postgres": lambda: PostgresRecordStore(),
    }


def available_stores() -> List[str]:
    """List available record store names."""
    return sorted(_store_factories().keys())


def resolve_store(name: str) -> RecordStore:
    factories = _store_factories()
    if name not in factories:
        raise ValueError(f"Unknown record store '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


__all__ = [
    "PostgresRecordStore",
    "RecordStore",
    "SimulatedRecordStore",
    "available_stores",
    "resolve_store",
    "save_record",
]
