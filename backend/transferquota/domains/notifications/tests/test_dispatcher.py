"""Unit tests for NotificationDispatcher: delivery channels and suppression."""

import pytest

from transferquota.domains.notifications.tests.conftest import _make_notification
from transferquota.schemas.notification import SubjectKind


class TestWarning:
    @pytest.mark.asyncio
    async def test_warning_sends_in_app_and_user_email(self, dispatcher, in_app, email):
        result = await dispatcher.dispatch(_make_notification())

        assert in_app.subjects_for("alice") == ["warning_threshold_reached"]
        assert email.recipients == ["alice@example.com"]
        assert email.sent[0].subject == "Warning: Data transfer limit approaching"
        assert result.in_app_sent and result.user_email_sent
        assert result.admin_emails_sent == []

    @pytest.mark.asyncio
    async def test_warning_never_alerts_admins(self, dispatcher, email):
        await dispatcher.dispatch(_make_notification())

        assert "root@example.com" not in email.recipients


class TestCritical:
    @pytest.mark.asyncio
    async def test_critical_alerts_enabled_admins_with_email(self, dispatcher, accounts, email):
        accounts.add("ops", email="ops@example.com", is_admin=True, enabled=False)
        accounts.add("noemail", email=None, is_admin=True)

        result = await dispatcher.dispatch(
            _make_notification(kind=SubjectKind.CRITICAL, percent=95.0, threshold=95)
        )

        assert email.recipients == ["alice@example.com", "root@example.com"]
        assert result.admin_emails_sent == ["root@example.com"]
        assert email.sent_to("root@example.com")[0].subject == (
            "User alice has exceeded transfer quota"
        )

    @pytest.mark.asyncio
    async def test_critical_user_subject(self, dispatcher, email):
        await dispatcher.dispatch(_make_notification(kind=SubjectKind.CRITICAL, percent=95.0))

        assert email.sent_to("alice@example.com")[0].subject == (
            "CRITICAL: Data transfer limit almost reached"
        )


class TestChannelIndependence:
    @pytest.mark.asyncio
    async def test_email_failure_does_not_stop_in_app(self, dispatcher, in_app, email):
        email.failing_recipients.add("alice@example.com")

        result = await dispatcher.dispatch(_make_notification())

        assert result.in_app_sent is True
        assert result.user_email_sent is False
        assert "email:alice@example.com" in result.failures

    @pytest.mark.asyncio
    async def test_in_app_failure_does_not_stop_email(self, dispatcher, in_app, email):
        in_app.fail_with = ConnectionError("redis down")

        result = await dispatcher.dispatch(_make_notification())

        assert result.in_app_sent is False
        assert email.recipients == ["alice@example.com"]

    @pytest.mark.asyncio
    async def test_user_email_failure_does_not_stop_admin_alert(self, dispatcher, email):
        email.failing_recipients.add("alice@example.com")

        result = await dispatcher.dispatch(_make_notification(kind=SubjectKind.CRITICAL))

        assert result.admin_emails_sent == ["root@example.com"]


class TestMissingAccount:
    @pytest.mark.asyncio
    async def test_unknown_account_is_skipped(self, dispatcher, in_app, email):
        result = await dispatcher.dispatch(_make_notification(account_id="ghost"))

        assert result.account_found is False
        assert in_app.notifications == []
        assert email.sent == []

    @pytest.mark.asyncio
    async def test_account_without_email_still_gets_in_app(
        self, dispatcher, accounts, in_app, email
    ):
        accounts.add("bob", email=None)

        result = await dispatcher.dispatch(_make_notification(account_id="bob"))

        assert result.in_app_sent is True
        assert result.user_email_sent is False
        assert email.sent == []

    @pytest.mark.asyncio
    async def test_directory_failure_is_contained(self, dispatcher, accounts, in_app):
        accounts.fail_with = OSError("directory unreachable")

        result = await dispatcher.dispatch(_make_notification())

        assert result.account_found is False
        assert "account_lookup" in result.failures
        assert in_app.notifications == []


class TestSuppression:
    @pytest.mark.asyncio
    async def test_identical_subject_within_window_is_suppressed(self, dispatcher, in_app):
        await dispatcher.dispatch(_make_notification())
        second = await dispatcher.dispatch(_make_notification())

        assert second.suppressed is True
        assert len(in_app.notifications) == 1

    @pytest.mark.asyncio
    async def test_other_subject_not_suppressed(self, dispatcher, in_app):
        await dispatcher.dispatch(_make_notification())
        await dispatcher.dispatch(_make_notification(kind=SubjectKind.CRITICAL))

        assert in_app.subjects_for("alice") == [
            "warning_threshold_reached",
            "critical_threshold_reached",
        ]

    @pytest.mark.asyncio
    async def test_subject_sent_again_after_window(self, dispatcher, in_app, suppression):
        await dispatcher.dispatch(_make_notification())
        suppression.expire("notification", "alice:warning_threshold_reached")

        await dispatcher.dispatch(_make_notification())

        assert len(in_app.notifications) == 2

    @pytest.mark.asyncio
    async def test_suppression_uses_configured_ttl(self, dispatcher, suppression):
        await dispatcher.dispatch(_make_notification())

        assert suppression.claims[0] == (
            "notification",
            "alice:warning_threshold_reached",
            300,
            True,
        )

    @pytest.mark.asyncio
    async def test_broken_suppression_store_does_not_block(self, dispatcher, in_app, suppression):
        suppression.fail_with = ConnectionError("redis down")

        result = await dispatcher.dispatch(_make_notification())

        assert result.suppressed is False
        assert result.in_app_sent is True
