"""Opportunity reconciliation: quote grouping, metrics and cross-source enrichment."""

from jobber_reconcile.reconcile.builder import OpportunityBuilder, compute_all_metrics, group_quotes
from jobber_reconcile.reconcile.enrichment import (
    RequestDateIndex,
    enrich_with_jobs,
    enrich_with_requests,
    index_jobs_by_quote,
    index_requests_by_quote,
)

__all__ = [
    "OpportunityBuilder",
    "RequestDateIndex",
    "compute_all_metrics",
    "enrich_with_jobs",
    "enrich_with_requests",
    "group_quotes",
    "index_jobs_by_quote",
    "index_requests_by_quote",
]
