"""Per-user profile page state and the in-process registry holding it.

Each signed-in user gets one ``ProfilePageState``: the editable form, the
posted jobs and counters, the active tab and the loading / saving flags.

Loads are guarded by generation tokens: ``begin_*_load`` hands out a token
and ``finish_*_load`` applies a result only if no newer load of the same
kind has started and the state has not been discarded since.

Saving uses a non-blocking ``threading.Lock``: if a save is already in
flight the second caller gets ``False`` from ``try_begin_save`` and must
not issue any store request.

The registry is bounded: states idle for longer than
``PAGE_STATE_IDLE_SECONDS`` are evicted, and beyond
``PAGE_STATE_MAX_ENTRIES`` the least recently used state goes first.
Evicted states are closed like discarded ones.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field

from app.core.config import settings
from app.models.enums import ProfileTab
from app.models.job import JobPosting, JobStats
from app.models.profile import ProfileForm
from app.models.session import SessionUser
from app.services.profile import apply_field, session_defaults


class SaveInProgressError(RuntimeError):
    """Raised when a save is requested while another one is outstanding."""


@dataclass(frozen=True)
class PageSnapshot:
    """Consistent copy of a page state for rendering."""
    user: SessionUser
    form: ProfileForm
    jobs: list[JobPosting] = field(default_factory=list)
    stats: JobStats = field(default_factory=JobStats)
    active_tab: ProfileTab = ProfileTab.overview
    loading: bool = False
    saving: bool = False


class ProfilePageState:
    """Mutable view state of one user's profile page."""

    def __init__(self, user: SessionUser) -> None:
        self.user = user
        self.form = session_defaults(user)
        self.jobs: list[JobPosting] = []
        self.stats = JobStats()
        self.active_tab = ProfileTab.overview
        self.loading = False
        self.loaded = False
        self.closed = False
        self._profile_generation = 0
        self._jobs_generation = 0
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()
        self.last_access = time.monotonic()

    # -- loading ------------------------------------------------------------

    def begin_profile_load(self) -> int:
        with self._lock:
            self._profile_generation += 1
            self.loading = True
            return self._profile_generation

    def finish_profile_load(self, token: int, form: ProfileForm) -> bool:
        """Apply a loaded form. Returns False if the result is stale."""
        with self._lock:
            if self.closed or token != self._profile_generation:
                return False
            self.form = form
            self.loading = False
            self.loaded = True
            return True

    def begin_jobs_load(self) -> int:
        with self._lock:
            self._jobs_generation += 1
            return self._jobs_generation

    def finish_jobs_load(
        self, token: int, jobs: list[JobPosting], stats: JobStats
    ) -> bool:
        """Apply loaded jobs and counters. Returns False if the result is stale."""
        with self._lock:
            if self.closed or token != self._jobs_generation:
                return False
            self.jobs = jobs
            self.stats = stats
            return True

    # -- editing ------------------------------------------------------------

    def update_field(self, name: str, value: str | list[str]) -> None:
        with self._lock:
            self.form = apply_field(self.form, name, value)

    def set_tab(self, tab: ProfileTab) -> None:
        with self._lock:
            self.active_tab = tab

    # -- saving -------------------------------------------------------------

    @property
    def saving(self) -> bool:
        return self._save_lock.locked()

    def try_begin_save(self) -> bool:
        return self._save_lock.acquire(blocking=False)

    def end_save(self) -> None:
        try:
            self._save_lock.release()
        except RuntimeError:
            pass  # Already released

    # -- lifecycle ----------------------------------------------------------

    def rebind_user(self, user: SessionUser) -> None:
        """Follow the latest session identity and mark the page as used."""
        with self._lock:
            self.user = user
            self.last_access = time.monotonic()

    def close(self) -> None:
        """Discard the page; any load still in flight will be dropped."""
        with self._lock:
            self.closed = True
            self._profile_generation += 1
            self._jobs_generation += 1

    def snapshot(self) -> PageSnapshot:
        with self._lock:
            return PageSnapshot(
                user=self.user,
                form=self.form.model_copy(deep=True),
                jobs=list(self.jobs),
                stats=self.stats.model_copy(),
                active_tab=self.active_tab,
                loading=self.loading,
                saving=self.saving,
            )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_registry: OrderedDict[str, ProfilePageState] = OrderedDict()
_registry_lock = threading.Lock()


def _evict_locked(now: float) -> list[ProfilePageState]:
    """Pop idle and over-capacity states. Caller holds ``_registry_lock``."""
    evicted: list[ProfilePageState] = []
    idle_limit = settings.PAGE_STATE_IDLE_SECONDS
    # Ordered oldest access first
    while _registry:
        email, state = next(iter(_registry.items()))
        if now - state.last_access <= idle_limit:
            break
        del _registry[email]
        evicted.append(state)
    while len(_registry) > settings.PAGE_STATE_MAX_ENTRIES:
        _, state = _registry.popitem(last=False)
        evicted.append(state)
    return evicted


def get_page_state(user: SessionUser) -> ProfilePageState:
    """Return the page state for *user*, creating it on first access.

    The session identity is refreshed on every call so name / avatar
    fallbacks follow the latest session.
    """
    with _registry_lock:
        state = _registry.get(user.email)
        if state is None:
            state = ProfilePageState(user)
            _registry[user.email] = state
        else:
            state.rebind_user(user)
            _registry.move_to_end(user.email)
        evicted = _evict_locked(time.monotonic())
    for stale in evicted:
        stale.close()
    return state


def discard_page_state(email: str) -> bool:
    """Drop and close the page state for *email*. Returns True if one existed."""
    with _registry_lock:
        state = _registry.pop(email, None)
    if state is None:
        return False
    state.close()
    return True


def clear_page_states() -> None:
    """Close and drop every page state."""
    with _registry_lock:
        states = list(_registry.values())
        _registry.clear()
    for state in states:
        state.close()
