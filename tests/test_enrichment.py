"""Unit tests for Job and Request enrichment."""

from jobber_reconcile.models import JobRow, QuoteRow, RequestRow
from jobber_reconcile.reconcile import (
    compute_all_metrics,
    enrich_with_jobs,
    enrich_with_requests,
    group_quotes,
    index_jobs_by_quote,
    index_requests_by_quote,
)


def _builders(*quotes: QuoteRow):
    builders = group_quotes(quotes)
    compute_all_metrics(builders)
    return builders


def _quote(number: int, status: str = "Converted", street: str = "12 Oak St") -> QuoteRow:
    return QuoteRow(quote_number=number, status=status, total=100, client_name="Jane Doe", service_street=street)


class TestJobEnrichment:
    """Tests for enrich_with_jobs."""

    def test_first_hit_in_won_quote_order(self) -> None:
        builders = _builders(_quote(101), _quote(102))
        jobs = [
            JobRow(job_number=2, quote_number=102, scheduled_start_date="2024-05-01", total_revenue=900),
        ]
        linked = enrich_with_jobs(builders.values(), index_jobs_by_quote(jobs))
        builder = builders["jane doe|12 oak st"]
        assert linked == 1
        assert builder.scheduled_date == "2024-05-01"
        assert builder.actual_revenue == 900

    def test_no_rescan_after_first_hit(self) -> None:
        builders = _builders(_quote(101), _quote(102))
        jobs = [
            JobRow(job_number=1, quote_number=101, closed_date="2024-04-01", total_revenue=100),
            JobRow(job_number=2, quote_number=102, closed_date="2024-06-01", total_revenue=200),
        ]
        linked = enrich_with_jobs(builders.values(), index_jobs_by_quote(jobs))
        builder = builders["jane doe|12 oak st"]
        assert linked == 1
        assert builder.closed_date == "2024-04-01"
        assert builder.actual_revenue == 100

    def test_later_job_for_same_quote_wins_index(self) -> None:
        index = index_jobs_by_quote(
            [JobRow(job_number=1, quote_number=101), JobRow(job_number=2, quote_number=101)]
        )
        assert index[101].job_number == 2

    def test_non_won_opportunities_untouched(self) -> None:
        builders = _builders(_quote(101, status="Awaiting response"))
        jobs = [JobRow(job_number=1, quote_number=101, total_revenue=100)]
        assert enrich_with_jobs(builders.values(), index_jobs_by_quote(jobs)) == 0
        assert builders["jane doe|12 oak st"].actual_revenue is None

    def test_no_match_leaves_fields_unset(self) -> None:
        builders = _builders(_quote(101))
        assert enrich_with_jobs(builders.values(), {}) == 0
        builder = builders["jane doe|12 oak st"]
        assert builder.scheduled_date is None
        assert builder.closed_date is None


class TestRequestEnrichment:
    """Tests for enrich_with_requests."""

    def test_earliest_dates_across_requests(self) -> None:
        builders = _builders(_quote(101, status="Sent"), _quote(102, status="Sent"))
        requests = [
            RequestRow(quote_numbers=["101"], requested_date="2024-01-10", assessment_date="2024-01-20"),
            RequestRow(quote_numbers=["102"], requested_date="2024-01-05", assessment_date="2024-01-12"),
        ]
        linked = enrich_with_requests(builders.values(), index_requests_by_quote(requests))
        builder = builders["jane doe|12 oak st"]
        assert builder.assessment_date == "2024-01-12"
        assert builder.request_date == "2024-01-12"
        assert linked == 2

    def test_request_date_falls_back_to_requested_on(self) -> None:
        builders = _builders(_quote(101))
        requests = [RequestRow(quote_numbers=["101"], requested_date="2024-01-10")]
        linked = enrich_with_requests(builders.values(), index_requests_by_quote(requests))
        builder = builders["jane doe|12 oak st"]
        assert builder.assessment_date is None
        assert builder.request_date == "2024-01-10"
        assert linked == 0

    def test_request_linked_to_several_quotes(self) -> None:
        index = index_requests_by_quote(
            [RequestRow(quote_numbers=["101", "102"], assessment_date="2024-02-02")]
        )
        assert index.assessment_by_quote == {101: "2024-02-02", 102: "2024-02-02"}

    def test_requests_without_quote_numbers_ignored(self) -> None:
        index = index_requests_by_quote([RequestRow(assessment_date="2024-02-02")])
        assert index.assessment_by_quote == {}
        assert index.request_date_by_quote == {}
