"""Posted-jobs loading and summary counters.

Jobs are owned by a separate posting workflow; this module only reads the
rows whose ``client_email`` matches the signed-in user and counts them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError
from supabase import Client

from app.core.config import settings
from app.models.enums import JobStatus
from app.models.job import JobPosting, JobStats

logger = logging.getLogger(__name__)


def load_posted_jobs(client: Client, email: str) -> list[JobPosting]:
    """Return every job posted by *email*, newest first.

    Store errors propagate to the caller.  A row that fails validation is
    logged and skipped so it cannot blank out the rest of the list.
    """
    result = (
        client.table(settings.JOBS_TABLE)
        .select("*")
        .eq("client_email", email)
        .order("created_at", desc=True)
        .execute()
    )
    jobs: list[JobPosting] = []
    for row in result.data or []:
        try:
            jobs.append(JobPosting(**row))
        except ValidationError as exc:
            logger.warning(
                "posted_job_row_skipped",
                extra={
                    "email": email,
                    "job_id": row.get("id"),
                    "error_message": str(exc),
                },
            )
    logger.debug("posted_jobs_loaded", extra={"email": email, "count": len(jobs)})
    return jobs


def compute_job_stats(jobs: Sequence[JobPosting]) -> JobStats:
    """Count total, open and completed jobs."""
    return JobStats(
        total_jobs=len(jobs),
        active_jobs=sum(1 for job in jobs if job.status == JobStatus.open.value),
        completed_jobs=sum(
            1 for job in jobs if job.status == JobStatus.completed.value
        ),
    )
