"""Pydantic models for the ``profiles`` table and the editable profile form.

``email`` is the lookup key from the application's point of view and is
never changed after insert.  ``ProfileForm`` mirrors the record as the
user edits it: ``hourly_rate`` is kept as the raw text typed into the form
and only parsed when the form is saved.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Payload for inserting a new profile."""
    email: str
    full_name: str = ""
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    hourly_rate: int | None = None
    location: str = ""
    portfolio_url: str = ""
    avatar_url: str = ""


class ProfileUpdate(BaseModel):
    """Payload for updating an existing profile (matched on email)."""
    full_name: str = ""
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    hourly_rate: int | None = None
    location: str = ""
    portfolio_url: str = ""
    updated_at: datetime


class Profile(BaseModel):
    """Full profile record returned from the database."""
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Any = None
    email: str | None = None
    full_name: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    hourly_rate: int | None = None
    location: str | None = None
    portfolio_url: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileForm(BaseModel):
    """Locally held, editable copy of the signed-in user's profile."""
    full_name: str = ""
    email: str = ""
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    hourly_rate: str = ""
    location: str = ""
    portfolio_url: str = ""
    avatar_url: str = ""


# Fields a user may assign through the edit form.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"full_name", "bio", "skills", "hourly_rate", "location", "portfolio_url"}
)


class FieldUpdate(BaseModel):
    """Request body for a single form field assignment."""
    name: str
    value: str | list[str] = ""
