"""Identity of the signed-in user, as supplied by Supabase Auth."""

from pydantic import BaseModel


class SessionUser(BaseModel):
    """Authenticated user attributes the profile page falls back to."""
    email: str
    name: str | None = None
    image: str | None = None
