"""Import result, per-row issue and progress models shared with the caller."""

from typing import Literal

from pydantic import BaseModel, Field

SourceFile = Literal["quotes", "jobs", "requests"]
ProgressStage = Literal["parsing", "quotes", "opportunities", "jobs", "requests", "complete"]


class ImportIssue(BaseModel):
    """A row validation, batch persistence, or fatal error recorded during a run."""

    file: SourceFile
    row: int = Field(..., description="1-indexed data row (header counted), or batch start offset")
    field: str
    message: str


class RecordCounts(BaseModel):
    total: int = 0
    new: int = 0
    updated: int = 0


class JobCounts(BaseModel):
    total: int = 0
    linked: int = 0


class RequestCounts(BaseModel):
    total: int = 0
    linked: int = 0
    saved: int = 0


class ImportResult(BaseModel):
    """
    Outcome of one import run.
    Always returned, never raised: partial failures carry their errors.
    """

    success: bool
    opportunities: RecordCounts = Field(default_factory=RecordCounts)
    quotes: RecordCounts = Field(default_factory=RecordCounts)
    jobs: JobCounts = Field(default_factory=JobCounts)
    requests: RequestCounts = Field(default_factory=RequestCounts)
    errors: list[ImportIssue] = Field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> "ImportResult":
        """Single-error result for a run aborted by an unexpected exception."""
        return cls(
            success=False,
            errors=[ImportIssue(file="quotes", row=0, field="system", message=message)],
        )


class ImportProgress(BaseModel):
    """Progress milestone handed to the progress sink."""

    stage: ProgressStage
    percent: int = Field(..., ge=0, le=100)
    message: str
