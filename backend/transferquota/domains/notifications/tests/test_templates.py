"""Unit tests for notification texts and byte formatting."""

import pytest

from transferquota.domains.notifications.templates import (
    format_bytes,
    get_admin_alert_email,
    get_user_threshold_email,
    render_in_app,
)
from transferquota.domains.notifications.tests.conftest import GIB, _make_notification
from transferquota.schemas.account import Account
from transferquota.schemas.notification import SubjectKind


@pytest.mark.parametrize(
    "num_bytes,expected",
    [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (2 * 1024**2, "2 MB"),
        (int(9.5 * GIB), "9.5 GB"),
        (1024**5, "1 PB"),
        (1234567, "1.18 MB"),
    ],
)
def test_format_bytes(num_bytes, expected):
    assert format_bytes(num_bytes) == expected


class TestInApp:
    def test_warning_text(self):
        subject, message = render_in_app(_make_notification(percent=80.4))

        assert subject == "You have reached 80% of your monthly data transfer limit"
        assert "reducing your data transfers" in message

    def test_critical_text_is_prefixed(self):
        subject, _ = render_in_app(_make_notification(kind=SubjectKind.CRITICAL, percent=95.0))

        assert subject.startswith("CRITICAL: You have reached 95%")


class TestEmails:
    def test_user_email_contains_usage_line(self):
        account = Account(id="alice", display_name="Alice", email="alice@example.com")

        subject, body = get_user_threshold_email(
            _make_notification(), account, "Cloud", "https://cloud.example.com"
        )

        assert subject == "Warning: Data transfer limit approaching"
        assert "Hello Alice," in body
        assert "Current usage: 8 GB of 10 GB (80%)" in body
        assert 'href="https://cloud.example.com"' in body

    def test_user_email_escapes_display_name(self):
        account = Account(id="eve", display_name="<script>", email="eve@example.com")

        _, body = get_user_threshold_email(_make_notification(account_id="eve"), account, "Cloud")

        assert "<script>" not in body
        assert "&lt;script&gt;" in body

    def test_admin_alert_names_the_user(self):
        account = Account(id="alice", display_name="Alice")
        admin = Account(id="root", display_name="Root", is_admin=True)

        subject, body = get_admin_alert_email(
            _make_notification(kind=SubjectKind.CRITICAL, percent=95.0, usage_bytes=int(9.5 * GIB)),
            account,
            admin,
            "Cloud",
        )

        assert subject == "User alice has exceeded transfer quota"
        assert "Hello Root," in body
        assert "User Alice (alice) has exceeded 95%" in body
        assert "Cloud Transfer Quota Alert" in body
