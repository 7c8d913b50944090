"""Profile loading and persistence against the ``profiles`` table.

The signed-in user's email is the lookup key.  A missing row is the
expected first-visit case (PostgREST ``PGRST116`` from ``.single()``) and
is answered with defaults derived from the session identity; the row is
only created on the first save.

All functions take the Supabase client explicitly so callers decide which
client (or test double) is used.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Literal

from postgrest.exceptions import APIError
from supabase import Client

from app.core.config import settings
from app.core.constants import POSTGREST_NOT_FOUND_CODE
from app.models.profile import (
    EDITABLE_FIELDS,
    Profile,
    ProfileCreate,
    ProfileForm,
    ProfileUpdate,
)
from app.models.session import SessionUser

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*\+?(\d+)")

# ``profiles.hourly_rate`` is a Postgres ``integer``.
MAX_HOURLY_RATE = 2_147_483_647


class ProfileSaveError(RuntimeError):
    """Raised when the existence check, update or insert fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FieldUpdateError(ValueError):
    """Raised when a form field cannot be assigned."""


# ---------------------------------------------------------------------------
# Form helpers
# ---------------------------------------------------------------------------

def session_defaults(user: SessionUser) -> ProfileForm:
    """Build the form shown before any profile row exists."""
    return ProfileForm(
        full_name=user.name or "",
        email=user.email or "",
        avatar_url=user.image or "",
    )


def merge_profile(row: Profile, user: SessionUser) -> ProfileForm:
    """Overlay a fetched row on the session defaults.

    Name, email and avatar fall back to the session; every other field
    falls back to empty.
    """
    return ProfileForm(
        full_name=row.full_name or user.name or "",
        email=row.email or user.email or "",
        bio=row.bio or "",
        skills=list(row.skills or []),
        hourly_rate=str(row.hourly_rate) if row.hourly_rate else "",
        location=row.location or "",
        portfolio_url=row.portfolio_url or "",
        avatar_url=row.avatar_url or user.image or "",
    )


def parse_hourly_rate(raw: str | int | None) -> int | None:
    """Parse the rate typed into the form.

    Empty, non-numeric, negative and out-of-range input all become
    ``None``; otherwise the leading integer is used (``"3000.5"`` -> ``3000``).
    """
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw if 0 <= raw <= MAX_HOURLY_RATE else None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_HOURLY_RATE)):
        return None
    rate = int(digits)
    return rate if rate <= MAX_HOURLY_RATE else None


def parse_skills(value: str | list[str]) -> list[str]:
    """Normalise a skills value from a list or a comma separated string."""
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def apply_field(form: ProfileForm, name: str, value: str | list[str]) -> ProfileForm:
    """Return a copy of *form* with one editable field assigned.

    Raises ``FieldUpdateError`` for immutable or unknown fields.
    """
    if name == "email":
        raise FieldUpdateError("email cannot be changed")
    if name not in EDITABLE_FIELDS:
        raise FieldUpdateError(f"Unknown profile field: {name}")

    if name == "skills":
        coerced: Any = parse_skills(value)
    elif isinstance(value, list):
        raise FieldUpdateError(f"Field {name} expects a string value")
    else:
        coerced = value
    return form.model_copy(update={name: coerced})


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _is_not_found(exc: APIError) -> bool:
    return exc.code == POSTGREST_NOT_FOUND_CODE


def fetch_profile(client: Client, email: str) -> Profile | None:
    """Return the profile row for *email*, or ``None`` when absent.

    Any error other than "no row found" propagates.
    """
    try:
        result = (
            client.table(settings.PROFILES_TABLE)
            .select("*")
            .eq("email", email)
            .single()
            .execute()
        )
    except APIError as exc:
        if _is_not_found(exc):
            return None
        raise
    if not result.data:
        return None
    return Profile(**result.data)


def load_profile(client: Client, user: SessionUser) -> ProfileForm:
    """Load the signed-in user's profile into form state.

    Lookup failures are logged and answered with the session defaults.
    """
    try:
        row = fetch_profile(client, user.email)
    except Exception as exc:
        logger.error(
            "profile_load_failed",
            extra={
                "email": user.email,
                "error_message": getattr(exc, "message", None) or str(exc),
            },
        )
        return session_defaults(user)

    if row is None:
        logger.info("profile_not_found", extra={"email": user.email})
        return session_defaults(user)
    return merge_profile(row, user)


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------

def profile_exists(client: Client, email: str) -> bool:
    """Check whether a profile row exists for *email*."""
    try:
        result = (
            client.table(settings.PROFILES_TABLE)
            .select("id")
            .eq("email", email)
            .single()
            .execute()
        )
    except APIError as exc:
        if _is_not_found(exc):
            return False
        raise
    return bool(result.data)


def save_profile(
    client: Client,
    user: SessionUser,
    form: ProfileForm,
) -> Literal["inserted", "updated"]:
    """Persist *form*: update the row matched by email, or insert one.

    Raises ``ProfileSaveError`` carrying the store's message on failure.
    """
    table = settings.PROFILES_TABLE

    try:
        hourly_rate = parse_hourly_rate(form.hourly_rate)
        if profile_exists(client, user.email):
            payload = ProfileUpdate(
                full_name=form.full_name,
                bio=form.bio,
                skills=form.skills,
                hourly_rate=hourly_rate,
                location=form.location,
                portfolio_url=form.portfolio_url,
                updated_at=datetime.now(timezone.utc),
            )
            client.table(table).update(payload.model_dump(mode="json")).eq(
                "email", user.email
            ).execute()
            action: Literal["inserted", "updated"] = "updated"
        else:
            payload_new = ProfileCreate(
                email=user.email,
                full_name=form.full_name,
                bio=form.bio,
                skills=form.skills,
                hourly_rate=hourly_rate,
                location=form.location,
                portfolio_url=form.portfolio_url,
                avatar_url=user.image or "",
            )
            client.table(table).insert([payload_new.model_dump(mode="json")]).execute()
            action = "inserted"
    except Exception as exc:
        message = getattr(exc, "message", None) or str(exc)
        raise ProfileSaveError(message) from exc

    logger.info("profile_saved", extra={"email": user.email, "action": action})
    return action
