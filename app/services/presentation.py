"""Display formatting for the profile page.

Turns a ``PageSnapshot`` into the ``ProfilePageView`` the client renders.
"""

from __future__ import annotations

from datetime import date

from app.core.constants import (
    BIO_PLACEHOLDER,
    BUDGET_NEGOTIABLE,
    CURRENCY_SYMBOL,
    DEADLINE_NONE,
    DEFAULT_AVATAR_INITIAL,
    DEFAULT_DISPLAY_NAME,
    HOURLY_RATE_UNSET,
    HOURLY_SUFFIX,
    JOB_SKILLS_SHOWN,
    SAVE_LABEL_BUSY,
    SAVE_LABEL_IDLE,
    SKILLS_PLACEHOLDER,
    TAB_LABELS,
)
from app.models.enums import JobStatus, ProfileTab, StatusTone
from app.models.job import JobCard, JobPosting
from app.models.page import (
    OverviewSection,
    ProfileHeader,
    ProfilePageView,
    TabItem,
)
from app.models.profile import ProfileForm
from app.services.profile import parse_hourly_rate
from app.state.page import PageSnapshot

_STATUS_TONES: dict[str, StatusTone] = {
    JobStatus.open.value: StatusTone.open,
    JobStatus.in_progress.value: StatusTone.in_progress,
    JobStatus.completed.value: StatusTone.completed,
}


# ---------------------------------------------------------------------------
# Scalar formatters
# ---------------------------------------------------------------------------

def format_yen(amount: int) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,}"


def format_budget(budget: int | None) -> str:
    """``¥1,234,567``, or the negotiable label for an empty / zero budget."""
    if not budget:
        return BUDGET_NEGOTIABLE
    return format_yen(budget)


def format_deadline(deadline: date | None) -> str:
    """Japanese short date (``2025/3/9``), or the no-deadline label."""
    if deadline is None:
        return DEADLINE_NONE
    return f"{deadline.year}/{deadline.month}/{deadline.day}"


def format_hourly_rate(raw: str) -> str:
    rate = parse_hourly_rate(raw) if raw else None
    if rate is None:
        return HOURLY_RATE_UNSET
    return format_yen(rate) + HOURLY_SUFFIX


def status_label(status: str | None) -> str:
    """Stored status, or the open label when none is set."""
    return status or JobStatus.open.value


def status_tone(status: str | None) -> StatusTone:
    return _STATUS_TONES.get(status_label(status), StatusTone.other)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def build_job_card(job: JobPosting) -> JobCard:
    skills = job.skills or []
    return JobCard(
        id=job.id,
        title=job.title,
        description=job.description,
        status_label=status_label(job.status),
        status_tone=status_tone(job.status),
        formatted_budget=format_budget(job.budget),
        formatted_deadline=format_deadline(job.deadline),
        category=job.category,
        skills=skills[:JOB_SKILLS_SHOWN],
        hidden_skill_count=max(len(skills) - JOB_SKILLS_SHOWN, 0),
        detail_path=f"/job/{job.id}",
    )


def build_header(form: ProfileForm) -> ProfileHeader:
    initial = form.full_name[:1].upper() or DEFAULT_AVATAR_INITIAL
    return ProfileHeader(
        display_name=form.full_name or DEFAULT_DISPLAY_NAME,
        email=form.email,
        bio=form.bio or BIO_PLACEHOLDER,
        location=form.location or None,
        avatar_url=form.avatar_url or None,
        avatar_initial=initial,
    )


def build_tabs(active: ProfileTab) -> list[TabItem]:
    tabs: list[TabItem] = []
    for tab in ProfileTab:
        label, icon = TAB_LABELS[tab.value]
        tabs.append(TabItem(id=tab, label=label, icon=icon, active=tab == active))
    return tabs


def build_page_view(snapshot: PageSnapshot) -> ProfilePageView:
    """Assemble the full page view from a state snapshot."""
    form = snapshot.form
    overview = OverviewSection(
        stats=snapshot.stats,
        skills=list(form.skills),
        skills_placeholder=None if form.skills else SKILLS_PLACEHOLDER,
        hourly_rate_display=format_hourly_rate(form.hourly_rate),
        portfolio_url=form.portfolio_url or None,
    )
    return ProfilePageView(
        active_tab=snapshot.active_tab,
        loading=snapshot.loading,
        saving=snapshot.saving,
        save_label=SAVE_LABEL_BUSY if snapshot.saving else SAVE_LABEL_IDLE,
        header=build_header(form),
        tabs=build_tabs(snapshot.active_tab),
        overview=overview,
        jobs=[build_job_card(job) for job in snapshot.jobs],
        form=form,
    )
