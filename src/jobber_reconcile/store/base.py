"""Abstract datastore the persistence adapter upserts into."""

from abc import ABC, abstractmethod
from typing import Any

QUOTES_TABLE = "residential_quotes"
JOBS_TABLE = "residential_jobs"
REQUESTS_TABLE = "residential_requests"
OPPORTUNITIES_TABLE = "residential_opportunities"


class Datastore(ABC):
    """
    Batched upsert-by-natural-key.
    Implementations raise DatastoreError when a batch is rejected.
    """

    @abstractmethod
    async def upsert(self, table: str, rows: list[dict[str, Any]], conflict_key: str) -> None:
        """Insert rows, updating any existing row with the same conflict_key value."""
        pass

    async def close(self) -> None:
        """Release connections. Default: nothing to release."""
        return None
