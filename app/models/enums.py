"""Enum types for the profile page."""

from enum import Enum


class ProfileTab(str, Enum):
    """View states of the profile page. Exactly one is active."""
    overview = "overview"
    posted_jobs = "posted-jobs"
    edit = "edit"


class JobStatus(str, Enum):
    """Lifecycle labels stored in ``jobs.status``."""
    open = "募集中"
    in_progress = "進行中"
    completed = "完了"


class StatusTone(str, Enum):
    """Badge colour family for a job status."""
    open = "open"
    in_progress = "in_progress"
    completed = "completed"
    other = "other"
