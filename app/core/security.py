"""Session identity resolution.

The bearer access token issued by Supabase Auth is exchanged for the
user's email, display name and avatar.  Name and avatar come from the
OAuth ``user_metadata`` when the provider supplied them.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from app.db.supabase import get_supabase
from app.models.session import SessionUser

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
) -> str:
    """Return the bearer token or answer 401."""
    if not credentials or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    return credentials.credentials


def get_session_user(
    token: str = Depends(get_access_token),
    client: Client = Depends(get_supabase),
) -> SessionUser:
    """Resolve the signed-in user from the access token."""
    try:
        response = client.auth.get_user(token)
    except Exception as exc:
        logger.warning(
            "session_validation_failed",
            extra={"error_message": str(exc)},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
        ) from exc

    user = response.user if response else None
    if not user or not user.email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
        )

    metadata = user.user_metadata or {}
    return SessionUser(
        email=user.email,
        name=metadata.get("full_name") or metadata.get("name"),
        image=metadata.get("avatar_url") or metadata.get("picture"),
    )
