"""Pydantic models for the ``jobs`` table (read only here) and the
derived summary counters shown on the overview tab.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import StatusTone


class JobPosting(BaseModel):
    """Full job record returned from the database."""
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Any
    title: str | None = None
    description: str | None = None
    status: str | None = None
    budget: int | None = None
    deadline: date | None = None
    category: str | None = None
    skills: list[str] | None = None
    client_email: str | None = None
    created_at: datetime | None = None

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline_as_date(cls, value: Any) -> Any:
        """Reduce timestamp deadlines to their calendar date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


class JobStats(BaseModel):
    """Counters derived from the user's posted jobs."""
    total_jobs: int = 0
    active_jobs: int = 0
    completed_jobs: int = 0


class JobCard(BaseModel):
    """A posted job ready for display on the posted-jobs tab."""
    id: Any
    title: str | None = None
    description: str | None = None
    status_label: str
    status_tone: StatusTone
    formatted_budget: str
    formatted_deadline: str
    category: str | None = None
    skills: list[str] = Field(default_factory=list)
    hidden_skill_count: int = 0
    detail_path: str


class PostedJobsResponse(BaseModel):
    """Response for GET /api/v1/profile/jobs."""
    jobs: list[JobCard] = []
    stats: JobStats = JobStats()
