"""Opportunity builder: group quotes by opportunity key and derive aggregate metrics."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from jobber_reconcile.keys import normalize_opportunity_key
from jobber_reconcile.models.opportunity import Opportunity, OpportunityStatus
from jobber_reconcile.models.rows import QuoteRow
from jobber_reconcile.sources.parsers import parse_id_list

CONVERTED = "Converted"
ARCHIVED = "Archived"


def _earliest(dates: Iterable[Optional[str]]) -> Optional[str]:
    """Min over present ISO dates; ``YYYY-MM-DD`` strings sort chronologically."""
    present = [d for d in dates if d is not None]
    return min(present) if present else None


def _latest(dates: Iterable[Optional[str]]) -> Optional[str]:
    present = [d for d in dates if d is not None]
    return max(present) if present else None


@dataclass
class OpportunityBuilder:
    """
    Mutable working state for one opportunity during a single import run.
    Static fields are seeded from the first quote seen for the key.
    """

    key: str
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    service_street: Optional[str] = None
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip: Optional[str] = None
    salesperson: Optional[str] = None
    project_type: Optional[str] = None
    location: Optional[str] = None
    lead_source: Optional[str] = None

    quotes: list[QuoteRow] = field(default_factory=list)
    quote_numbers: list[int] = field(default_factory=list)

    quote_count: int = 0
    max_quote_value: float = 0.0
    min_quote_value: float = 0.0
    total_quoted_value: float = 0.0
    avg_quote_value: float = 0.0
    first_quote_date: Optional[str] = None
    last_quote_date: Optional[str] = None
    first_quote_sent_date: Optional[str] = None

    status: OpportunityStatus = OpportunityStatus.PENDING
    won_value: float = 0.0
    won_date: Optional[str] = None
    won_quote_numbers: list[int] = field(default_factory=list)
    job_numbers: list[str] = field(default_factory=list)

    scheduled_date: Optional[str] = None
    closed_date: Optional[str] = None
    actual_revenue: Optional[float] = None

    assessment_date: Optional[str] = None
    request_date: Optional[str] = None

    @classmethod
    def seeded_from(cls, key: str, first_quote: QuoteRow) -> "OpportunityBuilder":
        """New builder carrying the first-seen quote's static fields."""
        return cls(
            key=key,
            client_name=first_quote.client_name,
            client_email=first_quote.client_email,
            client_phone=first_quote.client_phone,
            service_street=first_quote.service_street,
            service_city=first_quote.service_city,
            service_state=first_quote.service_state,
            service_zip=first_quote.service_zip,
            salesperson=first_quote.salesperson,
            project_type=first_quote.project_type,
            location=first_quote.location,
            lead_source=first_quote.lead_source,
        )

    @property
    def is_won(self) -> bool:
        return self.status is OpportunityStatus.WON

    def add_quote(self, quote: QuoteRow) -> None:
        """Append a member quote; salesperson is the first non-empty value seen."""
        self.quotes.append(quote)
        if quote.quote_number is not None:
            self.quote_numbers.append(quote.quote_number)
        if not self.salesperson and quote.salesperson:
            self.salesperson = quote.salesperson

    def compute_metrics(self) -> None:
        """Aggregate values and dates over member quotes, then derive status."""
        quotes = self.quotes
        totals = [q.total for q in quotes]

        self.quote_count = len(quotes)
        self.total_quoted_value = sum(totals)
        self.max_quote_value = max([0.0, *totals])
        self.min_quote_value = min(totals) if totals else 0.0
        self.avg_quote_value = self.total_quoted_value / len(quotes) if quotes else 0.0

        # Drafted dates are the legacy cycle anchor; sent date is the primary one
        self.first_quote_date = _earliest(q.drafted_date for q in quotes)
        self.last_quote_date = _latest(q.drafted_date for q in quotes)
        self.first_quote_sent_date = _earliest(q.sent_date for q in quotes)

        self._derive_status()

    def _derive_status(self) -> None:
        """
        PENDING -> WON if any quote is Converted (wins over any number of archived
        siblings); else LOST if every quote is Archived; else stays PENDING.
        """
        converted = [q for q in self.quotes if q.status == CONVERTED]
        if converted:
            self.status = OpportunityStatus.WON
            self.won_value = sum(q.total for q in converted)
            self.won_date = _earliest(q.converted_date for q in converted)
            self.won_quote_numbers = [q.quote_number for q in converted if q.quote_number is not None]
            job_numbers: list[str] = []
            for q in converted:
                job_numbers.extend(parse_id_list(q.job_numbers))
            self.job_numbers = list(dict.fromkeys(job_numbers))
        elif self.quotes and all(q.status == ARCHIVED for q in self.quotes):
            self.status = OpportunityStatus.LOST
        else:
            self.status = OpportunityStatus.PENDING

    def to_opportunity(self) -> Opportunity:
        """Freeze the builder into the persisted Opportunity model."""
        return Opportunity(
            opportunity_key=self.key,
            client_name=self.client_name,
            client_name_normalized=(self.client_name or "").lower().strip(),
            client_email=self.client_email,
            client_phone=self.client_phone,
            service_street=self.service_street,
            service_street_normalized=(self.service_street or "").lower().strip(),
            service_city=self.service_city,
            service_state=self.service_state,
            service_zip=self.service_zip,
            salesperson=self.salesperson,
            project_type=self.project_type,
            location=self.location,
            lead_source=self.lead_source,
            quote_count=self.quote_count,
            quote_numbers=list(self.quote_numbers),
            first_quote_date=self.first_quote_date,
            last_quote_date=self.last_quote_date,
            first_quote_sent_date=self.first_quote_sent_date,
            max_quote_value=self.max_quote_value,
            min_quote_value=self.min_quote_value,
            total_quoted_value=self.total_quoted_value,
            avg_quote_value=self.avg_quote_value,
            status=self.status,
            won_value=self.won_value,
            won_date=self.won_date,
            won_quote_numbers=list(self.won_quote_numbers),
            job_numbers=list(self.job_numbers),
            scheduled_date=self.scheduled_date,
            closed_date=self.closed_date,
            actual_revenue=self.actual_revenue,
            assessment_date=self.assessment_date,
            request_date=self.request_date,
        )


def group_quotes(quotes: Iterable[QuoteRow]) -> dict[str, OpportunityBuilder]:
    """
    Pass 1: group valid quotes by opportunity key, in file order.
    The first quote for a key seeds the builder (first-seen wins).
    """
    builders: dict[str, OpportunityBuilder] = {}
    for quote in quotes:
        key = normalize_opportunity_key(quote.client_name, quote.service_street)
        builder = builders.get(key)
        if builder is None:
            builder = OpportunityBuilder.seeded_from(key, quote)
            builders[key] = builder
        builder.add_quote(quote)
    return builders


def compute_all_metrics(builders: dict[str, OpportunityBuilder]) -> None:
    """Pass 2 over every builder."""
    for builder in builders.values():
        builder.compute_metrics()
