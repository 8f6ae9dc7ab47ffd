"""Notification dispatcher.

Sends one fired threshold over every channel:

1. in-app notice to the account holder,
2. e-mail to the account holder,
3. for critical only, an alert e-mail to every enabled admin with an address.

Channels are attempted independently; a failure is logged and the next
channel still runs. A short-lived suppression key per ``(account, subject)``
blocks an identical dispatch inside its TTL. The ledger's latches remain
the durable guard; the suppression key only catches repeats that slip past
them (e.g. a forced recheck right after a crossing).
"""

from typing import Optional

from transferquota.core.config import settings
from transferquota.core.logging import logger
from transferquota.core.protocols import (
    AccountDirectory,
    EmailSender,
    IdempotencyStore,
    InAppNotifier,
)
from transferquota.domains.notifications.protocols import NotificationDispatcherProtocol
from transferquota.domains.notifications.templates import (
    get_admin_alert_email,
    get_user_threshold_email,
)
from transferquota.domains.notifications.types import DispatchResult
from transferquota.schemas.notification import QuotaNotification, SubjectKind

SUPPRESSION_NAMESPACE = "notification"


class NotificationDispatcher(NotificationDispatcherProtocol):
    """Fan a threshold notification out to in-app and e-mail channels."""

    def __init__(
        self,
        accounts: AccountDirectory,
        in_app: InAppNotifier,
        email: EmailSender,
        suppression: IdempotencyStore,
        suppression_ttl_seconds: int = settings.NOTIFICATION_SUPPRESSION_SECONDS,
        instance_name: str = settings.INSTANCE_NAME,
        app_url: Optional[str] = settings.APP_FULL_URL,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            accounts: Directory used to resolve the holder and the admins
            in_app: In-app notice channel
            email: E-mail channel
            suppression: Store holding the short-lived suppression keys
            suppression_ttl_seconds: Window inside which a repeat is dropped
            instance_name: Name of the installation shown in e-mails
            app_url: Base URL linked from e-mails, if known
        """
        self._accounts = accounts
        self._in_app = in_app
        self._email = email
        self._suppression = suppression
        self._ttl = suppression_ttl_seconds
        self._instance_name = instance_name
        self._app_url = app_url

    async def dispatch(self, notification: QuotaNotification) -> DispatchResult:
        """Send every channel of one notification. Never raises."""
        log = logger.with_context(
            account_id=notification.account_id, event_type=notification.subject
        )
        result = DispatchResult()

        if await self._is_suppressed(notification, log):
            log.info("Notification suppressed, identical subject sent recently")
            result.suppressed = True
            return result

        try:
            account = await self._accounts.get_account(notification.account_id)
        except Exception:
            log.error("Account lookup failed, notification skipped", exc_info=True)
            result.account_found = False
            result.failures.append("account_lookup")
            return result
        if account is None:
            log.warning("Unknown account, notification skipped")
            result.account_found = False
            return result

        try:
            await self._in_app.notify(notification)
            result.in_app_sent = True
            log.info(f"In-app notification sent at {notification.percent}%")
        except Exception:
            log.error("In-app notification failed", exc_info=True)
            result.failures.append("in_app")

        if account.email:
            subject, html_body = get_user_threshold_email(
                notification, account, self._instance_name, self._app_url
            )
            try:
                await self._email.send(account.email, subject, html_body)
                result.user_email_sent = True
                log.info(f"Threshold e-mail sent to {account.email}")
            except Exception:
                log.error(f"Threshold e-mail to {account.email} failed", exc_info=True)
                result.failures.append(f"email:{account.email}")
        else:
            log.warning("Account has no e-mail address, user e-mail skipped")

        if notification.subject_kind == SubjectKind.CRITICAL:
            await self._alert_admins(notification, account, result, log)

        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _is_suppressed(self, notification: QuotaNotification, log) -> bool:
        key = f"{notification.account_id}:{notification.subject}"
        try:
            claimed = await self._suppression.claim(SUPPRESSION_NAMESPACE, key, self._ttl)
        except Exception:
            # A failing guard never blocks a claimed latch
            log.warning("Suppression store unavailable, dispatching anyway", exc_info=True)
            return False
        return not claimed

    async def _alert_admins(self, notification, account, result: DispatchResult, log) -> None:
        try:
            admins = await self._accounts.list_admins()
        except Exception:
            log.error("Admin lookup failed, admin alerts skipped", exc_info=True)
            result.failures.append("admin_lookup")
            return

        for admin in admins:
            if not admin.enabled or not admin.email:
                continue
            subject, html_body = get_admin_alert_email(
                notification, account, admin, self._instance_name, self._app_url
            )
            try:
                await self._email.send(admin.email, subject, html_body)
                result.admin_emails_sent.append(admin.email)
                log.info(f"Admin alert sent to {admin.email}")
            except Exception:
                log.error(f"Admin alert to {admin.email} failed", exc_info=True)
                result.failures.append(f"email:{admin.email}")
