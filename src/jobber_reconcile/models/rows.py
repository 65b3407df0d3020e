"""Typed rows produced by the per-source row mappers."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class QuoteRow(BaseModel):
    """One record of the Quotes export after field parsing."""

    quote_number: Optional[int] = Field(default=None, description="Required; rows without it are rejected")

    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None

    service_street: Optional[str] = None
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip: Optional[str] = None

    title: Optional[str] = None
    status: Optional[str] = None  # "Converted" | "Archived" | other free text
    line_items: Optional[str] = None
    lead_source: Optional[str] = None
    project_type: Optional[str] = None
    location: Optional[str] = None

    salesperson: Optional[str] = None
    sent_by_user: Optional[str] = None

    subtotal: float = 0.0
    total: float = 0.0
    discount: float = 0.0
    required_deposit: float = 0.0
    collected_deposit: float = 0.0

    drafted_date: Optional[str] = None
    sent_date: Optional[str] = None
    approved_date: Optional[str] = None
    converted_date: Optional[str] = None
    archived_date: Optional[str] = None

    job_numbers: Optional[str] = Field(default=None, description="Raw comma-separated job numbers")

    def to_record(self, opportunity_key: str) -> dict[str, Any]:
        """Flat record for the quotes table, tagged with its opportunity key."""
        record = self.model_dump()
        record["opportunity_key"] = opportunity_key
        return record


class JobRow(BaseModel):
    """One record of the Jobs export after field parsing."""

    job_number: Optional[int] = None
    quote_number: Optional[int] = None

    client_name: Optional[str] = None
    service_street: Optional[str] = None
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip: Optional[str] = None

    title: Optional[str] = None
    salesperson: Optional[str] = None
    project_type: Optional[str] = None
    location: Optional[str] = None

    created_date: Optional[str] = None
    scheduled_start_date: Optional[str] = None
    closed_date: Optional[str] = None

    total_revenue: float = 0.0
    total_costs: float = 0.0
    profit: float = 0.0

    crew_1: Optional[str] = None
    crew_1_pay: float = 0.0
    crew_2: Optional[str] = None
    crew_2_pay: float = 0.0

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class RequestRow(BaseModel):
    """One record of the Requests (site assessment) export after field parsing."""

    client_name: Optional[str] = None
    client_name_normalized: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None

    service_street: Optional[str] = None
    service_street_normalized: Optional[str] = None
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip: Optional[str] = None

    requested_date: Optional[str] = None
    assessment_date: Optional[str] = None

    form_name: Optional[str] = None
    request_title: Optional[str] = None
    status: Optional[str] = None
    assessment_assigned_to: Optional[str] = None

    description_of_work: Optional[str] = None
    size_of_project: Optional[str] = None
    source: Optional[str] = None
    additional_rep: Optional[str] = None
    online_booking: bool = False

    quote_numbers: list[str] = Field(default_factory=list)
    job_numbers: list[str] = Field(default_factory=list)

    request_key: Optional[str] = Field(
        default=None,
        description="normalized client|street; None when either part is empty",
    )

    @property
    def request_date(self) -> Optional[str]:
        """Assessment date when known, else the date the request came in."""
        return self.assessment_date or self.requested_date

    def to_record(self) -> dict[str, Any]:
        """Flat record for the requests table; id lists stored comma-joined."""
        record = self.model_dump()
        record["quote_numbers"] = ",".join(self.quote_numbers) if self.quote_numbers else None
        record["job_numbers"] = ",".join(self.job_numbers) if self.job_numbers else None
        return record
