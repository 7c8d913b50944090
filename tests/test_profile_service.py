"""Unit tests for the profile loading / saving service."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from conftest import chainable_table_mock

from app.models.profile import Profile, ProfileForm
from app.models.session import SessionUser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _not_found() -> APIError:
    return APIError({
        "message": "JSON object requested, multiple (or no) rows returned",
        "code": "PGRST116",
        "details": "The result contains 0 rows",
        "hint": None,
    })


def _server_error(message: str = "permission denied for table profiles") -> APIError:
    return APIError({"message": message, "code": "42501", "details": None, "hint": None})


def _client_for(table: MagicMock) -> MagicMock:
    client = MagicMock()
    client.table.return_value = table
    return client


FULL_ROW = {
    "id": "5c7e",
    "email": "taro@example.com",
    "full_name": "Taro Yamada",
    "bio": "Backend engineer",
    "skills": ["Python", "FastAPI"],
    "hourly_rate": 4500,
    "location": "東京都渋谷区",
    "portfolio_url": "https://taro.dev",
    "avatar_url": "https://cdn.example.com/a.png",
    "created_at": "2025-01-01T00:00:00+00:00",
    "updated_at": "2025-01-02T00:00:00+00:00",
}


# ---------------------------------------------------------------------------
# parse_hourly_rate / parse_skills
# ---------------------------------------------------------------------------


class TestParseHourlyRate:

    def test_empty_is_none(self) -> None:
        from app.services.profile import parse_hourly_rate

        assert parse_hourly_rate("") is None
        assert parse_hourly_rate("   ") is None
        assert parse_hourly_rate(None) is None

    def test_integer_text(self) -> None:
        from app.services.profile import parse_hourly_rate

        assert parse_hourly_rate("3000") == 3000
        assert parse_hourly_rate(" 3000 ") == 3000

    def test_leading_integer_is_used(self) -> None:
        from app.services.profile import parse_hourly_rate

        assert parse_hourly_rate("3000.5") == 3000
        assert parse_hourly_rate("1200yen") == 1200

    def test_non_numeric_and_negative_are_none(self) -> None:
        from app.services.profile import parse_hourly_rate

        assert parse_hourly_rate("abc") is None
        assert parse_hourly_rate("-500") is None
        assert parse_hourly_rate(-1) is None

    def test_int_passthrough(self) -> None:
        from app.services.profile import parse_hourly_rate

        assert parse_hourly_rate(0) == 0
        assert parse_hourly_rate(2500) == 2500

    def test_oversized_input_is_none(self) -> None:
        """Rates beyond the integer column range are coerced, never raised."""
        from app.services.profile import MAX_HOURLY_RATE, parse_hourly_rate

        assert parse_hourly_rate("9" * 5000) is None
        assert parse_hourly_rate(str(MAX_HOURLY_RATE + 1)) is None
        assert parse_hourly_rate(MAX_HOURLY_RATE + 1) is None
        assert parse_hourly_rate(str(MAX_HOURLY_RATE)) == MAX_HOURLY_RATE
        assert parse_hourly_rate("0" * 20 + "42") == 42


class TestApplyField:

    def test_assigns_text_field(self) -> None:
        from app.services.profile import apply_field

        form = apply_field(ProfileForm(), "bio", "hello")
        assert form.bio == "hello"

    def test_skills_from_comma_string(self) -> None:
        from app.services.profile import apply_field

        form = apply_field(ProfileForm(), "skills", "Python, React,, Go ")
        assert form.skills == ["Python", "React", "Go"]

    def test_skills_from_list_keeps_order(self) -> None:
        from app.services.profile import apply_field

        form = apply_field(ProfileForm(), "skills", ["Go", " ", "Rust"])
        assert form.skills == ["Go", "Rust"]

    def test_email_is_immutable(self) -> None:
        from app.services.profile import FieldUpdateError, apply_field

        with pytest.raises(FieldUpdateError):
            apply_field(ProfileForm(email="a@b.c"), "email", "x@y.z")

    def test_unknown_field_rejected(self) -> None:
        from app.services.profile import FieldUpdateError, apply_field

        with pytest.raises(FieldUpdateError):
            apply_field(ProfileForm(), "avatar_url", "https://evil")

    def test_original_form_untouched(self) -> None:
        from app.services.profile import apply_field

        original = ProfileForm(location="Osaka")
        apply_field(original, "location", "Kyoto")
        assert original.location == "Osaka"


# ---------------------------------------------------------------------------
# load_profile
# ---------------------------------------------------------------------------


class TestLoadProfile:

    def test_no_row_uses_session_defaults(self, session_user: SessionUser) -> None:
        """Missing row: name/email/avatar from session, everything else empty."""
        from app.services.profile import load_profile

        table = chainable_table_mock()
        table.execute.side_effect = _not_found()

        form = load_profile(_client_for(table), session_user)

        assert form.full_name == session_user.name
        assert form.email == session_user.email
        assert form.avatar_url == session_user.image
        assert form.bio == ""
        assert form.skills == []
        assert form.hourly_rate == ""
        assert form.location == ""
        assert form.portfolio_url == ""
        table.eq.assert_called_with("email", session_user.email)

    def test_row_fields_override_session(self, session_user: SessionUser) -> None:
        from app.services.profile import load_profile

        table = chainable_table_mock()
        table.execute.return_value = MagicMock(data=FULL_ROW)

        form = load_profile(_client_for(table), session_user)

        assert form.full_name == "Taro Yamada"
        assert form.bio == "Backend engineer"
        assert form.skills == ["Python", "FastAPI"]
        assert form.hourly_rate == "4500"
        assert form.location == "東京都渋谷区"
        assert form.portfolio_url == "https://taro.dev"
        assert form.avatar_url == "https://cdn.example.com/a.png"

    def test_absent_fields_fall_back(self, session_user: SessionUser) -> None:
        """Absent name/avatar fall back to session; other fields to empty."""
        from app.services.profile import load_profile

        table = chainable_table_mock()
        table.execute.return_value = MagicMock(data={
            "id": "1",
            "email": "taro@example.com",
            "full_name": None,
            "bio": None,
            "skills": None,
            "hourly_rate": None,
            "location": None,
            "portfolio_url": None,
            "avatar_url": None,
        })

        form = load_profile(_client_for(table), session_user)

        assert form.full_name == session_user.name
        assert form.avatar_url == session_user.image
        assert form.email == "taro@example.com"
        assert form.bio == ""
        assert form.skills == []
        assert form.hourly_rate == ""
        assert form.location == ""

    def test_other_error_logged_and_defaults(
        self, session_user: SessionUser, caplog: pytest.LogCaptureFixture
    ) -> None:
        from app.services.profile import load_profile

        table = chainable_table_mock()
        table.execute.side_effect = _server_error()

        with caplog.at_level("ERROR"):
            form = load_profile(_client_for(table), session_user)

        assert form.full_name == session_user.name
        assert form.bio == ""
        assert any(r.getMessage() == "profile_load_failed" for r in caplog.records)

    def test_transport_error_logged_and_defaults(self, session_user: SessionUser) -> None:
        from app.services.profile import load_profile

        table = chainable_table_mock()
        table.execute.side_effect = ConnectionError("connection reset")

        form = load_profile(_client_for(table), session_user)
        assert form.email == session_user.email


class TestMergeProfile:

    def test_session_without_name_or_image(self) -> None:
        from app.services.profile import merge_profile

        user = SessionUser(email="anon@example.com")
        form = merge_profile(Profile(email=None), user)

        assert form.full_name == ""
        assert form.email == "anon@example.com"
        assert form.avatar_url == ""


# ---------------------------------------------------------------------------
# save_profile
# ---------------------------------------------------------------------------


class TestSaveProfile:

    def test_insert_when_absent(self, session_user: SessionUser) -> None:
        from app.services.profile import save_profile

        table = chainable_table_mock()
        table.execute.side_effect = [_not_found(), MagicMock(data=[{"id": "new"}])]
        form = ProfileForm(
            full_name="Taro",
            email=session_user.email,
            bio="bio",
            skills=["Python"],
            hourly_rate="3000",
            location="Tokyo",
            portfolio_url="https://taro.dev",
        )

        action = save_profile(_client_for(table), session_user, form)

        assert action == "inserted"
        table.update.assert_not_called()
        rows = table.insert.call_args.args[0]
        assert len(rows) == 1
        row = rows[0]
        assert row["email"] == session_user.email
        assert row["avatar_url"] == session_user.image
        assert row["hourly_rate"] == 3000
        assert row["skills"] == ["Python"]

    def test_insert_without_session_image(self) -> None:
        from app.services.profile import save_profile

        user = SessionUser(email="anon@example.com")
        table = chainable_table_mock()
        table.execute.side_effect = [_not_found(), MagicMock(data=[])]

        save_profile(_client_for(table), user, ProfileForm(email=user.email))

        row = table.insert.call_args.args[0][0]
        assert row["avatar_url"] == ""
        assert row["hourly_rate"] is None

    def test_update_when_present(self, session_user: SessionUser) -> None:
        from app.services.profile import save_profile

        table = chainable_table_mock()
        table.execute.side_effect = [MagicMock(data={"id": "5c7e"}), MagicMock(data=[])]
        form = ProfileForm(full_name="Taro", email=session_user.email, hourly_rate="")

        action = save_profile(_client_for(table), session_user, form)

        assert action == "updated"
        table.insert.assert_not_called()
        payload = table.update.call_args.args[0]
        assert payload["full_name"] == "Taro"
        assert payload["hourly_rate"] is None
        assert "updated_at" in payload
        assert "email" not in payload
        assert "avatar_url" not in payload
        table.eq.assert_called_with("email", session_user.email)

    def test_existence_check_failure_raises(self, session_user: SessionUser) -> None:
        from app.services.profile import ProfileSaveError, save_profile

        table = chainable_table_mock()
        table.execute.side_effect = _server_error("boom")

        with pytest.raises(ProfileSaveError) as excinfo:
            save_profile(_client_for(table), session_user, ProfileForm())

        assert excinfo.value.message == "boom"
        table.insert.assert_not_called()
        table.update.assert_not_called()

    def test_write_failure_carries_message(self, session_user: SessionUser) -> None:
        from app.services.profile import ProfileSaveError, save_profile

        table = chainable_table_mock()
        table.execute.side_effect = [
            MagicMock(data={"id": "1"}),
            _server_error("value too long for type character varying(100)"),
        ]

        with pytest.raises(ProfileSaveError) as excinfo:
            save_profile(_client_for(table), session_user, ProfileForm())

        assert "value too long" in excinfo.value.message
