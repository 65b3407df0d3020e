"""Persistence adapter: last-write-wins dedup, fixed-size batches, per-batch error capture."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Iterator, Optional, TypeVar

from jobber_reconcile.errors import DatastoreError
from jobber_reconcile.models.result import ImportIssue, SourceFile

from .base import Datastore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 500


def dedupe_last_wins(items: Iterable[T], key: Callable[[T], Optional[Hashable]]) -> list[T]:
    """
    Keep only the last item per natural key; items with a None key are dropped.
    A later revision of a record replaces the earlier one in the earlier one's slot.
    """
    latest: dict[Hashable, T] = {}
    for item in items:
        k = key(item)
        if k is not None:
            latest[k] = item
    return list(latest.values())


def chunked(items: list[T], size: int) -> Iterator[tuple[int, list[T]]]:
    """Yield (start_offset, batch) pairs of at most size items."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield start, items[start : start + size]


@dataclass
class BatchOutcome:
    """Result of saving one table's rows."""

    submitted: int = 0
    saved: int = 0
    errors: list[ImportIssue] = field(default_factory=list)


class PersistenceAdapter:
    """
    Writes reconciled rows to a Datastore in batches.
    A rejected batch is recorded and the remaining batches are still attempted.
    """

    def __init__(self, datastore: Datastore, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError("batch size must be positive")
        self.datastore = datastore
        self.batch_size = batch_size

    async def save(
        self,
        file: SourceFile,
        table: str,
        records: list[dict[str, Any]],
        conflict_key: str,
        *,
        error_label: str = "Database error",
    ) -> BatchOutcome:
        """Dedupe records by conflict_key (last wins), then upsert batch by batch."""
        unique = dedupe_last_wins(records, key=lambda r: r.get(conflict_key))
        outcome = BatchOutcome(submitted=len(unique))
        for start, batch in chunked(unique, self.batch_size):
            try:
                await self.datastore.upsert(table, batch, conflict_key)
            except DatastoreError as e:
                logger.warning(
                    "Upsert into %s failed for rows %d-%d: %s",
                    table, start, start + len(batch) - 1, e,
                )
                outcome.errors.append(
                    ImportIssue(file=file, row=start, field="database", message=f"{error_label}: {e}")
                )
                continue
            outcome.saved += len(batch)
        return outcome
