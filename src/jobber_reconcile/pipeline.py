"""Residential import pipeline: decode, map, reconcile, enrich, persist."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from jobber_reconcile.config import ImportSettings
from jobber_reconcile.keys import normalize_opportunity_key
from jobber_reconcile.models.result import (
    ImportIssue,
    ImportResult,
    JobCounts,
    RecordCounts,
    RequestCounts,
)
from jobber_reconcile.progress import NullReporter, ProgressReporter
from jobber_reconcile.reconcile import (
    compute_all_metrics,
    enrich_with_jobs,
    enrich_with_requests,
    group_quotes,
    index_jobs_by_quote,
    index_requests_by_quote,
)
from jobber_reconcile.sources import load_records, map_job_rows, map_quote_rows, map_request_rows
from jobber_reconcile.sources.decoder import CsvSource
from jobber_reconcile.store import (
    JOBS_TABLE,
    OPPORTUNITIES_TABLE,
    QUOTES_TABLE,
    REQUESTS_TABLE,
    Datastore,
    PersistenceAdapter,
)

logger = logging.getLogger(__name__)


async def import_residential_data(
    quotes_source: CsvSource,
    jobs_source: Optional[CsvSource] = None,
    requests_source: Optional[CsvSource] = None,
    *,
    datastore: Datastore,
    reporter: Optional[ProgressReporter] = None,
    settings: Optional[ImportSettings] = None,
) -> ImportResult:
    """
    Reconcile the Quotes export (plus optional Jobs and Requests exports) into
    opportunities and persist every row set through the datastore.

    Never raises: row and batch failures are collected in ``errors`` and any
    unexpected exception yields ``ImportResult.failed``.
    """
    reporter = reporter or NullReporter()
    settings = settings or ImportSettings()
    try:
        return await _run(quotes_source, jobs_source, requests_source, datastore, reporter, settings)
    except Exception as e:
        logger.exception("Residential import failed")
        return ImportResult.failed(str(e))


async def _run(
    quotes_source: CsvSource,
    jobs_source: Optional[CsvSource],
    requests_source: Optional[CsvSource],
    datastore: Datastore,
    reporter: ProgressReporter,
    settings: ImportSettings,
) -> ImportResult:
    errors: list[ImportIssue] = []

    reporter.report("parsing", 5, "Parsing CSV files...")
    quote_records = await load_records(quotes_source)
    job_records = await load_records(jobs_source) if jobs_source is not None else []
    request_records = await load_records(requests_source) if requests_source is not None else []
    reporter.report(
        "parsing",
        15,
        f"Parsed {len(quote_records)} quotes, {len(job_records)} jobs, {len(request_records)} requests",
    )

    # Pass 1: group quotes
    reporter.report("quotes", 20, "Processing quotes and building opportunities...")
    quotes = map_quote_rows(quote_records)
    errors.extend(quotes.errors)
    builders = group_quotes(quotes.rows)
    reporter.report("quotes", 40, f"Built {len(builders)} opportunities from {len(quotes.rows)} quotes")

    # Pass 2: metrics and status
    reporter.report("opportunities", 45, "Calculating opportunity metrics...")
    compute_all_metrics(builders)

    # Pass 3a: jobs
    reporter.report("jobs", 50, "Enriching with job data...")
    jobs = map_job_rows(job_records)
    errors.extend(jobs.errors)
    linked_jobs = enrich_with_jobs(builders.values(), index_jobs_by_quote(jobs.rows))
    reporter.report("jobs", 65, f"Linked {linked_jobs} jobs to opportunities")

    # Pass 3b: requests
    reporter.report("requests", 70, "Enriching with assessment and request dates...")
    requests = map_request_rows(request_records)
    keyed_requests = [r for r in requests.rows if r.request_key is not None]
    linked_requests = enrich_with_requests(builders.values(), index_requests_by_quote(requests.rows))
    reporter.report(
        "requests",
        80,
        f"Linked {linked_requests} assessment dates, {len(keyed_requests)} requests to save",
    )

    reporter.report("opportunities", 85, "Saving to database...")
    adapter = PersistenceAdapter(datastore, batch_size=settings.batch_size)

    quote_outcome = await adapter.save(
        "quotes",
        QUOTES_TABLE,
        [
            q.to_record(normalize_opportunity_key(q.client_name, q.service_street))
            for q in quotes.rows
        ],
        "quote_number",
    )
    errors.extend(quote_outcome.errors)

    job_outcome = await adapter.save(
        "jobs", JOBS_TABLE, [j.to_record() for j in jobs.rows], "job_number"
    )
    errors.extend(job_outcome.errors)

    request_outcome = await adapter.save(
        "requests", REQUESTS_TABLE, [r.to_record() for r in keyed_requests], "request_key"
    )
    errors.extend(request_outcome.errors)

    updated_at = datetime.now(timezone.utc)
    opportunity_outcome = await adapter.save(
        "quotes",
        OPPORTUNITIES_TABLE,
        [b.to_opportunity().to_record(updated_at) for b in builders.values()],
        "opportunity_key",
        error_label="Opportunities DB error",
    )
    errors.extend(opportunity_outcome.errors)

    reporter.report("complete", 100, "Import complete!")
    if errors:
        logger.warning("Residential import finished with %d errors", len(errors))

    return ImportResult(
        success=not errors,
        opportunities=RecordCounts(total=len(builders), new=opportunity_outcome.submitted, updated=0),
        quotes=RecordCounts(total=len(quotes.rows), new=quote_outcome.submitted, updated=0),
        jobs=JobCounts(total=len(jobs.rows), linked=linked_jobs),
        requests=RequestCounts(
            total=len(request_records),
            linked=linked_requests,
            saved=request_outcome.saved,
        ),
        errors=errors,
    )


def run_import(
    quotes_source: CsvSource,
    jobs_source: Optional[CsvSource] = None,
    requests_source: Optional[CsvSource] = None,
    *,
    datastore: Datastore,
    reporter: Optional[ProgressReporter] = None,
    settings: Optional[ImportSettings] = None,
) -> ImportResult:
    """Blocking wrapper around import_residential_data; closes the datastore afterwards."""

    async def _main() -> ImportResult:
        try:
            return await import_residential_data(
                quotes_source,
                jobs_source,
                requests_source,
                datastore=datastore,
                reporter=reporter,
                settings=settings,
            )
        finally:
            await datastore.close()

    return asyncio.run(_main())
