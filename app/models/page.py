"""Response models for the profile page endpoints.

These are API-layer view schemas, not direct table mappings.
"""

from pydantic import BaseModel

from app.models.enums import ProfileTab
from app.models.job import JobCard, JobStats
from app.models.profile import ProfileForm


class ProfileHeader(BaseModel):
    """Identity block at the top of the page."""
    display_name: str
    email: str
    bio: str
    location: str | None = None
    avatar_url: str | None = None
    avatar_initial: str


class TabItem(BaseModel):
    """One entry of the tab navigation."""
    id: ProfileTab
    label: str
    icon: str
    active: bool = False


class OverviewSection(BaseModel):
    """Content of the overview tab."""
    stats: JobStats
    skills: list[str] = []
    skills_placeholder: str | None = None
    hourly_rate_display: str
    portfolio_url: str | None = None


class ProfilePageView(BaseModel):
    """Full response for GET /api/v1/profile."""
    active_tab: ProfileTab
    loading: bool = False
    saving: bool = False
    save_label: str
    header: ProfileHeader
    tabs: list[TabItem]
    overview: OverviewSection
    jobs: list[JobCard] = []
    form: ProfileForm


class TabChange(BaseModel):
    """Request body for PUT /api/v1/profile/tab."""
    tab: ProfileTab


class SaveResponse(BaseModel):
    """Response for POST /api/v1/profile/save."""
    message: str
    view: ProfilePageView


class LogoutResponse(BaseModel):
    """Response for POST /api/v1/auth/logout."""
    callback_url: str
