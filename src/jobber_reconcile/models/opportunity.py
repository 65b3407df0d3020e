"""Reconciled opportunity model: one per normalized client + service street."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class OpportunityStatus(str, Enum):
    """Conversion state derived from member quote statuses."""

    PENDING = "pending"
    WON = "won"
    LOST = "lost"


class Opportunity(BaseModel):
    """Canonical engagement record built from every quote sharing an opportunity key."""

    opportunity_key: str = Field(..., description="normalize(client)|normalize(street)")

    client_name: Optional[str] = None
    client_name_normalized: str = ""
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    service_street: Optional[str] = None
    service_street_normalized: str = ""
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip: Optional[str] = None

    salesperson: Optional[str] = None
    project_type: Optional[str] = None
    location: Optional[str] = None
    lead_source: Optional[str] = None

    quote_count: int = 0
    quote_numbers: list[int] = Field(default_factory=list)
    first_quote_date: Optional[str] = Field(default=None, description="Earliest drafted date")
    last_quote_date: Optional[str] = Field(default=None, description="Latest drafted date")
    first_quote_sent_date: Optional[str] = None

    max_quote_value: float = 0.0
    min_quote_value: float = 0.0
    total_quoted_value: float = 0.0
    avg_quote_value: float = 0.0

    status: OpportunityStatus = OpportunityStatus.PENDING
    won_value: float = 0.0
    won_date: Optional[str] = None
    won_quote_numbers: list[int] = Field(default_factory=list)
    job_numbers: list[str] = Field(default_factory=list)

    scheduled_date: Optional[str] = None
    closed_date: Optional[str] = None
    actual_revenue: Optional[float] = None

    assessment_date: Optional[str] = None
    request_date: Optional[str] = None

    @property
    def is_won(self) -> bool:
        return self.status is OpportunityStatus.WON

    @property
    def is_lost(self) -> bool:
        return self.status is OpportunityStatus.LOST

    @property
    def is_pending(self) -> bool:
        return self.status is OpportunityStatus.PENDING

    def to_record(self, updated_at: Optional[datetime] = None) -> dict[str, Any]:
        """Flat record for the opportunities table."""
        record = self.model_dump(mode="json", exclude={"status"})
        record["quote_numbers"] = ",".join(str(n) for n in self.quote_numbers)
        record["won_quote_numbers"] = (
            ",".join(str(n) for n in self.won_quote_numbers) if self.won_quote_numbers else None
        )
        record["job_numbers"] = ",".join(self.job_numbers) if self.job_numbers else None
        record["is_won"] = self.is_won
        record["is_lost"] = self.is_lost
        record["is_pending"] = self.is_pending
        record["last_updated_at"] = (updated_at or datetime.now(timezone.utc)).isoformat()
        return record
