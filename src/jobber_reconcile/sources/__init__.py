"""Jobber CSV sources: decoding, field parsing and row mapping."""

from jobber_reconcile.sources.decoder import load_records, read_records
from jobber_reconcile.sources.mappers import (
    MappedRows,
    map_job_row,
    map_job_rows,
    map_quote_row,
    map_quote_rows,
    map_request_row,
    map_request_rows,
)

__all__ = [
    "MappedRows",
    "load_records",
    "map_job_row",
    "map_job_rows",
    "map_quote_row",
    "map_quote_rows",
    "map_request_row",
    "map_request_rows",
    "read_records",
]
