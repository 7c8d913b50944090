"""Sign-out endpoint.

The session itself is owned by Supabase Auth; signing out here drops the
caller's server-held page state so no stale load can land on it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.core.constants import LOGOUT_CALLBACK_URL
from app.core.security import get_session_user
from app.models.page import LogoutResponse
from app.models.session import SessionUser
from app.state.page import discard_page_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/logout", response_model=LogoutResponse)
def logout(user: SessionUser = Depends(get_session_user)) -> LogoutResponse:
    """Discard the caller's page state and return the redirect target."""
    discarded = discard_page_state(user.email)
    logger.info("user_logged_out", extra={"email": user.email, "had_state": discarded})
    return LogoutResponse(callback_url=LOGOUT_CALLBACK_URL)
