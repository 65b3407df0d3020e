"""SQLite-backed datastore with upsert by natural key and import run history."""

import asyncio
import re
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from jobber_reconcile.errors import DatastoreError
from jobber_reconcile.models.opportunity import OpportunityStatus
from jobber_reconcile.models.result import ImportResult

from .base import OPPORTUNITIES_TABLE, Datastore

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_STATUS_COLUMNS = {
    OpportunityStatus.WON: "is_won",
    OpportunityStatus.LOST: "is_lost",
    OpportunityStatus.PENDING: "is_pending",
}


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise DatastoreError(name, f"Invalid identifier: {name!r}")
    return name


class RunRecord:
    """Record of an import run."""

    def __init__(
        self,
        id: int,
        started_at: datetime,
        finished_at: Optional[datetime],
        status: str,
        opportunities_total: int = 0,
        error_count: int = 0,
    ):
        self.id = id
        self.started_at = started_at
        self.finished_at = finished_at
        self.status = status
        self.opportunities_total = opportunities_total
        self.error_count = error_count


class SQLiteStore(Datastore):
    """
    Local SQLite datastore for reconciled rows.
    Upserts run in a worker thread so the import task only suspends at I/O.
    """

    def __init__(self, db_path: str | Path = "residential.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def _upsert_sync(self, table: str, rows: list[dict[str, Any]], conflict_key: str) -> None:
        if not rows:
            return
        columns = [_check_identifier(c) for c in rows[0]]
        _check_identifier(table)
        _check_identifier(conflict_key)
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns if c != conflict_key)
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)}) "
            f"ON CONFLICT({conflict_key}) DO UPDATE SET {updates}"
        )
        try:
            with self._connection() as conn:
                conn.executemany(sql, [tuple(row.get(c) for c in columns) for row in rows])
                conn.commit()
        except sqlite3.Error as e:
            code = getattr(e, "sqlite_errorname", None)
            raise DatastoreError(table, str(e), code) from e
        except (OverflowError, ValueError, TypeError) as e:
            # Values sqlite3 cannot bind, e.g. integers wider than 64 bits
            raise DatastoreError(table, str(e), type(e).__name__) from e

    async def upsert(self, table: str, rows: list[dict[str, Any]], conflict_key: str) -> None:
        await asyncio.to_thread(self._upsert_sync, table, rows, conflict_key)

    def get_opportunities(self, status: Optional[OpportunityStatus] = None) -> list[dict[str, Any]]:
        """Return persisted opportunities, optionally only those in one status."""
        sql = f"SELECT * FROM {OPPORTUNITIES_TABLE}"
        if status is not None:
            sql += f" WHERE {_STATUS_COLUMNS[status]} = 1"
        with self._connection() as conn:
            rows = conn.execute(sql + " ORDER BY opportunity_key").fetchall()
        return [dict(r) for r in rows]

    def get_opportunity(self, opportunity_key: str) -> Optional[dict[str, Any]]:
        """Get a single opportunity by key."""
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {OPPORTUNITIES_TABLE} WHERE opportunity_key = ?",
                (opportunity_key,),
            ).fetchone()
        return dict(row) if row else None

    def count(self, table: str) -> int:
        """Number of rows in one of the import tables."""
        with self._connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {_check_identifier(table)}").fetchone()[0]

    def start_run(
        self,
        quotes_file: Optional[str] = None,
        jobs_file: Optional[str] = None,
        requests_file: Optional[str] = None,
    ) -> RunRecord:
        """Record start of an import run. Returns RunRecord with id."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            cursor = conn.execute(
                "INSERT INTO import_runs (started_at, status, quotes_file, jobs_file, requests_file) "
                "VALUES (?, 'running', ?, ?, ?)",
                (now, quotes_file, jobs_file, requests_file),
            )
            conn.commit()
            run_id = cursor.lastrowid
        return RunRecord(
            id=run_id or 0,
            started_at=datetime.fromisoformat(now),
            finished_at=None,
            status="running",
        )

    def finish_run(self, run_id: int, result: ImportResult) -> None:
        """Record completion of an import run with its headline counts."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            conn.execute(
                """
                UPDATE import_runs SET finished_at = ?, status = ?, opportunities_total = ?,
                    quotes_total = ?, jobs_total = ?, requests_total = ?, error_count = ?
                WHERE id = ?
                """,
                (
                    now,
                    "completed" if result.success else "completed_with_errors",
                    result.opportunities.total,
                    result.quotes.total,
                    result.jobs.total,
                    result.requests.total,
                    len(result.errors),
                    run_id,
                ),
            )
            conn.commit()

    def list_runs(self, limit: int = 20) -> list[RunRecord]:
        """Most recent import runs first."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM import_runs ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()
        return [
            RunRecord(
                id=r["id"],
                started_at=datetime.fromisoformat(r["started_at"]),
                finished_at=datetime.fromisoformat(r["finished_at"]) if r["finished_at"] else None,
                status=r["status"],
                opportunities_total=r["opportunities_total"],
                error_count=r["error_count"],
            )
            for r in rows
        ]
