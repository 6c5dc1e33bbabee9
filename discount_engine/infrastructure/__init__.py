"""
Infrastructure package for the discount engine.

Holds the persistence side of a batch run: database connectivity and the record
stores priced records are saved to. Keep this layer focused on I/O, decoupled
from rule evaluation.
"""

from discount_engine.infrastructure.db_factory import build_dsn, get_sync_connection
from discount_engine.infrastructure.store import (
    PostgresRecordStore,
    RecordStore,
    SimulatedRecordStore,
    available_stores,
    resolve_store,
    save_record,
)

__all__ = [
    "build_dsn",
    "get_sync_connection",
    "PostgresRecordStore",
    "RecordStore",
    "SimulatedRecordStore",
    "available_stores",
    "resolve_store",
    "save_record",
]
