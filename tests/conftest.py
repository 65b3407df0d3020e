"""Pytest fixtures for jobber-reconcile tests."""

import csv
import tempfile
from io import StringIO
from pathlib import Path
from typing import Any, Optional

import pytest

from jobber_reconcile.errors import DatastoreError
from jobber_reconcile.store import Datastore


def _build_csv(rows: list[dict]) -> str:
    """Build CSV string from list of row dicts."""
    if not rows:
        return ""
    out = StringIO()
    writer = csv.DictWriter(out, fieldnames=rows[0].keys())
    writer.writeheader()
    writer.writerows(rows)
    return out.getvalue()


def _quote_row(**overrides: str) -> dict[str, str]:
    """Quotes export row with sensible defaults."""
    row = {
        "Quote #": "101",
        "Client name": "Jane Doe",
        "Client email": "jane@example.com",
        "Client phone": "555-0100",
        "Service street": "12 Oak St",
        "Service city": "Springfield",
        "Service province": "ON",
        "Service ZIP": "K1A 0B1",
        "Title": "Backyard patio",
        "Status": "Awaiting response",
        "Line items": "Interlock patio",
        "Lead source": "Google",
        "Project Type": "Hardscape",
        "Location": "Backyard",
        "Salesperson": "Sam Rep",
        "Sent by user": "Sam Rep",
        "Subtotal ($)": "$500.00",
        "Total ($)": "$500.00",
        "Discount ($)": "",
        "Required deposit ($)": "",
        "Collected deposit ($)": "",
        "Drafted date": "Jan 5, 2024",
        "Sent date": "Jan 8, 2024",
        "Approved date": "",
        "Converted date": "",
        "Archived date": "",
        "Job #s": "",
    }
    row.update(overrides)
    return row


def _job_row(**overrides: str) -> dict[str, str]:
    """Jobs export row with sensible defaults."""
    row = {
        "Job #": "9001",
        "Quote #": "101",
        "Client name": "Jane Doe",
        "Service street": "12 Oak St",
        "Service city": "Springfield",
        "Service province": "ON",
        "Service ZIP": "K1A 0B1",
        "Title": "Backyard patio",
        "Salesperson": "Sam Rep",
        "Project Type": "Hardscape",
        "Location": "Backyard",
        "Created date": "Feb 1, 2024",
        "Scheduled start date": "Apr 15, 2024",
        "Closed date": "May 2, 2024",
        "Total revenue ($)": "$520.00",
        "Total costs ($)": "$300.00",
        "Profit ($)": "$220.00",
        "Crew 1": "Alpha",
        "Crew 1 Job Pay": "$150",
        "Crew 2": "",
        "Crew 2 Job Pay": "",
    }
    row.update(overrides)
    return row


def _request_row(**overrides: str) -> dict[str, str]:
    """Requests export row with sensible defaults."""
    row = {
        "Client name": "Jane Doe",
        "Client email": "jane@example.com",
        "Client phone": "555-0100",
        "Service street": "12 Oak St",
        "Service city": "Springfield",
        "Service province": "ON",
        "Service ZIP": "K1A 0B1",
        "Requested on date": "Dec 20, 2023",
        "Assessment date": "Jan 2, 2024",
        "Form name": "Website form",
        "Request title": "Patio quote",
        "Status": "Converted",
        "Assessment assigned to": "Sam Rep",
        "Online booking": "Yes",
        "Quote #s": "101",
        "Job #s": "",
        "Description of Work:": "New patio",
        "Source (For Internal Use)": "Google",
        "SIze of Project": "Medium",
        "Additional Rep": "",
    }
    row.update(overrides)
    return row


class RecordingDatastore(Datastore):
    """In-memory datastore that keeps every upserted row by natural key."""

    def __init__(self, fail_tables: Optional[set[str]] = None, fail_batches: Optional[set[int]] = None):
        self.tables: dict[str, dict[Any, dict[str, Any]]] = {}
        self.calls: list[tuple[str, int, str]] = []
        self.fail_tables = fail_tables or set()
        self.fail_batches = fail_batches or set()
        self.closed = False

    async def upsert(self, table: str, rows: list[dict[str, Any]], conflict_key: str) -> None:
        call_index = len(self.calls)
        self.calls.append((table, len(rows), conflict_key))
        if table in self.fail_tables or call_index in self.fail_batches:
            raise DatastoreError(table, "boom", "XX000")
        target = self.tables.setdefault(table, {})
        for row in rows:
            target[row[conflict_key]] = dict(row)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sample_quote_row() -> dict[str, str]:
    return _quote_row()


@pytest.fixture
def sample_job_row() -> dict[str, str]:
    return _job_row()


@pytest.fixture
def sample_request_row() -> dict[str, str]:
    return _request_row()


@pytest.fixture
def datastore() -> RecordingDatastore:
    """Fresh in-memory datastore."""
    return RecordingDatastore()


@pytest.fixture
def temp_db() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)
