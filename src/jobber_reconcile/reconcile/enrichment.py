"""Cross-source enrichment: copy Job and Request data onto built opportunities."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from jobber_reconcile.models.rows import JobRow, RequestRow

from .builder import OpportunityBuilder


def index_jobs_by_quote(jobs: Iterable[JobRow]) -> dict[int, JobRow]:
    """Quote number -> job. A later job for the same quote overwrites an earlier one."""
    index: dict[int, JobRow] = {}
    for job in jobs:
        if job.quote_number is not None:
            index[job.quote_number] = job
    return index


def enrich_with_jobs(
    builders: Iterable[OpportunityBuilder],
    jobs_by_quote: dict[int, JobRow],
) -> int:
    """
    For each won opportunity, take the first won quote number (file order)
    that has a job and copy that job's schedule, close date and revenue.
    Returns the number of opportunities linked to a job.
    """
    linked = 0
    for builder in builders:
        if not builder.is_won:
            continue
        for quote_number in builder.won_quote_numbers:
            job = jobs_by_quote.get(quote_number)
            if job is None:
                continue
            builder.scheduled_date = job.scheduled_start_date
            builder.closed_date = job.closed_date
            builder.actual_revenue = job.total_revenue
            linked += 1
            break
    return linked


def _keep_earliest(index: dict[int, str], quote_number: int, value: Optional[str]) -> None:
    if value is None:
        return
    existing = index.get(quote_number)
    if existing is None or value < existing:
        index[quote_number] = value


@dataclass
class RequestDateIndex:
    """Earliest request dates per linked quote number."""

    assessment_by_quote: dict[int, str] = field(default_factory=dict)
    request_date_by_quote: dict[int, str] = field(default_factory=dict)


def index_requests_by_quote(requests: Iterable[RequestRow]) -> RequestDateIndex:
    """
    Index every request under each quote number it links to.
    The request date is the assessment date when present, else the requested date.
    """
    index = RequestDateIndex()
    for request in requests:
        for token in request.quote_numbers:
            quote_number = int(token)
            _keep_earliest(index.assessment_by_quote, quote_number, request.assessment_date)
            _keep_earliest(index.request_date_by_quote, quote_number, request.request_date)
    return index


def enrich_with_requests(
    builders: Iterable[OpportunityBuilder],
    index: RequestDateIndex,
) -> int:
    """
    Scan every member quote number of every opportunity (won or not) and keep
    the earliest assessment and request dates found.
    Returns how many times an assessment date was set or moved earlier.
    """
    linked = 0
    for builder in builders:
        for quote_number in builder.quote_numbers:
            assessed = index.assessment_by_quote.get(quote_number)
            if assessed and (builder.assessment_date is None or assessed < builder.assessment_date):
                builder.assessment_date = assessed
                linked += 1

            requested = index.request_date_by_quote.get(quote_number)
            if requested and (builder.request_date is None or requested < builder.request_date):
                builder.request_date = requested
    return linked
