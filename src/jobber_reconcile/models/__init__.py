"""Typed rows, the reconciled opportunity, and import result models."""

from jobber_reconcile.models.opportunity import Opportunity, OpportunityStatus
from jobber_reconcile.models.result import (
    ImportIssue,
    ImportProgress,
    ImportResult,
    JobCounts,
    RecordCounts,
    RequestCounts,
)
from jobber_reconcile.models.rows import JobRow, QuoteRow, RequestRow

__all__ = [
    "ImportIssue",
    "ImportProgress",
    "ImportResult",
    "JobCounts",
    "JobRow",
    "Opportunity",
    "OpportunityStatus",
    "QuoteRow",
    "RecordCounts",
    "RequestCounts",
    "RequestRow",
]
