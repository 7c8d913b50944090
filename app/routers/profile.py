"""Profile page endpoints.

Every endpoint operates on the caller's page state and, except for the
jobs listing, returns the full ``ProfilePageView``.  Routes are plain
``def`` handlers so the Supabase calls run in the threadpool and two saves
from the same user can genuinely overlap; the save flag turns the second
one into a 409.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.core.security import get_session_user
from app.db.supabase import get_supabase
from app.models.job import PostedJobsResponse
from app.models.page import ProfilePageView, SaveResponse, TabChange
from app.models.profile import FieldUpdate
from app.models.session import SessionUser
from app.services.page import ensure_loaded, refresh_page, save_page
from app.services.presentation import build_job_card, build_page_view
from app.services.profile import FieldUpdateError, ProfileSaveError
from app.state.page import ProfilePageState, SaveInProgressError, get_page_state

logger = logging.getLogger(__name__)

router = APIRouter()


def _page_state(user: SessionUser = Depends(get_session_user)) -> ProfilePageState:
    return get_page_state(user)


@router.get("", response_model=ProfilePageView)
def get_profile_page(
    refresh: bool = Query(default=False, description="Reload profile and jobs"),
    state: ProfilePageState = Depends(_page_state),
    client: Client = Depends(get_supabase),
) -> ProfilePageView:
    """Return the page view, loading it on first access."""
    ensure_loaded(state, client, force=refresh)
    return build_page_view(state.snapshot())


@router.post("/refresh", response_model=ProfilePageView)
def refresh_profile_page(
    state: ProfilePageState = Depends(_page_state),
    client: Client = Depends(get_supabase),
) -> ProfilePageView:
    """Reload the profile and posted jobs."""
    refresh_page(state, client)
    return build_page_view(state.snapshot())


@router.put("/tab", response_model=ProfilePageView)
def change_tab(
    body: TabChange,
    state: ProfilePageState = Depends(_page_state),
) -> ProfilePageView:
    """Switch the active tab."""
    state.set_tab(body.tab)
    return build_page_view(state.snapshot())


@router.patch("/fields", response_model=ProfilePageView)
def update_field(
    body: FieldUpdate,
    state: ProfilePageState = Depends(_page_state),
) -> ProfilePageView:
    """Assign one form field from user input."""
    try:
        state.update_field(body.name, body.value)
    except FieldUpdateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return build_page_view(state.snapshot())


@router.post("/save", response_model=SaveResponse)
def save_profile_page(
    state: ProfilePageState = Depends(_page_state),
    client: Client = Depends(get_supabase),
) -> SaveResponse:
    """Persist the form: 409 while another save is outstanding, 502 on store errors."""
    try:
        message = save_page(state, client)
    except SaveInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ProfileSaveError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return SaveResponse(message=message, view=build_page_view(state.snapshot()))


@router.get("/jobs", response_model=PostedJobsResponse)
def list_posted_jobs(
    state: ProfilePageState = Depends(_page_state),
    client: Client = Depends(get_supabase),
) -> PostedJobsResponse:
    """Return the formatted posted-jobs list and its counters."""
    ensure_loaded(state, client)
    snapshot = state.snapshot()
    return PostedJobsResponse(
        jobs=[build_job_card(job) for job in snapshot.jobs],
        stats=snapshot.stats,
    )
