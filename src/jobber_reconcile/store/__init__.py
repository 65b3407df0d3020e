"""Datastores and the batching persistence adapter."""

from jobber_reconcile.store.base import (
    JOBS_TABLE,
    OPPORTUNITIES_TABLE,
    QUOTES_TABLE,
    REQUESTS_TABLE,
    Datastore,
)
from jobber_reconcile.store.persistence import BatchOutcome, PersistenceAdapter, chunked, dedupe_last_wins
from jobber_reconcile.store.rest_store import RestStore
from jobber_reconcile.store.sqlite_store import RunRecord, SQLiteStore

__all__ = [
    "BatchOutcome",
    "Datastore",
    "JOBS_TABLE",
    "OPPORTUNITIES_TABLE",
    "PersistenceAdapter",
    "QUOTES_TABLE",
    "REQUESTS_TABLE",
    "RestStore",
    "RunRecord",
    "SQLiteStore",
    "chunked",
    "dedupe_last_wins",
]
