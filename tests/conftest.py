"""Shared test fixtures.

Provides a chainable mock Supabase client, a fixed session identity, and a
``test_client`` for FastAPI with the Supabase and session dependencies
overridden.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

from app.models.session import SessionUser  # noqa: E402
from app.state.page import clear_page_states  # noqa: E402

TABLE_METHODS = (
    "select", "insert", "update", "eq", "limit", "order", "single",
)


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in TABLE_METHODS:
        getattr(m, method).return_value = m
    return m


def supabase_with_tables(**tables: MagicMock) -> MagicMock:
    """Create a Supabase mock dispatching ``table(name)`` to *tables*."""
    mock_sb = MagicMock()

    def table_dispatch(name: str) -> MagicMock:
        if name not in tables:
            tables[name] = chainable_table_mock()
        return tables[name]

    mock_sb.table.side_effect = table_dispatch
    return mock_sb


@pytest.fixture()
def session_user() -> SessionUser:
    return SessionUser(
        email="taro@example.com",
        name="山田太郎",
        image="https://example.com/taro.png",
    )


@pytest.fixture(autouse=True)
def _reset_page_states() -> Generator[None, None, None]:
    clear_page_states()
    yield
    clear_page_states()


@pytest.fixture()
def mock_supabase() -> MagicMock:
    """A Supabase mock with empty ``profiles`` and ``jobs`` tables."""
    profiles = chainable_table_mock()
    profiles.execute.return_value = MagicMock(data=None)
    jobs = chainable_table_mock()
    jobs.execute.return_value = MagicMock(data=[])
    return supabase_with_tables(profiles=profiles, jobs=jobs)


@pytest.fixture()
def test_client(
    mock_supabase: MagicMock, session_user: SessionUser
) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient bound to ``mock_supabase``."""
    from app.core.security import get_session_user
    from app.db.supabase import get_supabase
    from app.main import app

    app.dependency_overrides[get_supabase] = lambda: mock_supabase
    app.dependency_overrides[get_session_user] = lambda: session_user
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
