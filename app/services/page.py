"""Profile page orchestration.

Runs the profile and posted-jobs loads into a ``ProfilePageState`` and
drives the save flow:

1. Take the in-flight save flag (``SaveInProgressError`` if held)
2. Update or insert the profile row
3. Reload the profile to pick up server-side values
4. Release the flag, always
"""

from __future__ import annotations

import logging

from supabase import Client

from app.core.constants import SAVE_FAILURE_PREFIX, SAVE_SUCCESS_MESSAGE
from app.services.jobs import compute_job_stats, load_posted_jobs
from app.services.profile import ProfileSaveError, load_profile, save_profile
from app.state.page import ProfilePageState, SaveInProgressError

logger = logging.getLogger(__name__)


def refresh_profile(state: ProfilePageState, client: Client) -> bool:
    """Load the profile into *state*. Returns False if the result was stale."""
    token = state.begin_profile_load()
    form = load_profile(client, state.user)
    applied = state.finish_profile_load(token, form)
    if not applied:
        logger.info(
            "profile_load_discarded",
            extra={"email": state.user.email, "token": token},
        )
    return applied


def refresh_jobs(state: ProfilePageState, client: Client) -> bool:
    """Load posted jobs and counters into *state*.

    On failure the previous jobs and counters are kept.
    """
    token = state.begin_jobs_load()
    try:
        jobs = load_posted_jobs(client, state.user.email)
    except Exception as exc:
        logger.error(
            "jobs_load_failed",
            extra={
                "email": state.user.email,
                "error_message": getattr(exc, "message", None) or str(exc),
            },
        )
        return False

    applied = state.finish_jobs_load(token, jobs, compute_job_stats(jobs))
    if not applied:
        logger.info(
            "jobs_load_discarded",
            extra={"email": state.user.email, "token": token},
        )
    return applied


def refresh_page(state: ProfilePageState, client: Client) -> None:
    """Reload both the profile and the posted jobs."""
    refresh_profile(state, client)
    refresh_jobs(state, client)


def ensure_loaded(
    state: ProfilePageState, client: Client, force: bool = False
) -> None:
    """Load the page on first access, or again when *force* is set."""
    if force or not state.loaded:
        refresh_page(state, client)


def save_page(state: ProfilePageState, client: Client) -> str:
    """Persist the current form and reload the profile.

    Returns the confirmation message.  Raises ``SaveInProgressError`` when
    another save is outstanding and ``ProfileSaveError`` (with the
    user-facing message) when the store rejects the write.
    """
    if not state.try_begin_save():
        logger.warning(
            "save_already_in_progress",
            extra={"email": state.user.email},
        )
        raise SaveInProgressError("A save is already in progress")

    try:
        form = state.snapshot().form
        try:
            save_profile(client, state.user, form)
        except ProfileSaveError as exc:
            logger.error(
                "profile_save_failed",
                extra={
                    "email": state.user.email,
                    "error_message": exc.message,
                },
            )
            raise ProfileSaveError(SAVE_FAILURE_PREFIX + exc.message) from exc

        refresh_profile(state, client)
        return SAVE_SUCCESS_MESSAGE
    finally:
        state.end_save()
