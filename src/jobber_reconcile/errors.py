"""Exception types raised inside the reconciler."""

from typing import Optional


class ReconcileError(Exception):
    """Base class for reconciler errors."""


class ConfigError(ReconcileError):
    """Invalid import settings (bad YAML, out-of-range values)."""


class DatastoreError(ReconcileError):
    """A datastore rejected an upsert batch."""

    def __init__(self, table: str, message: str, code: Optional[str] = None):
        self.table = table
        self.message = message
        self.code = code
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code: {self.code})"
        return self.message
