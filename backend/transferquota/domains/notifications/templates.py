"""Texts of threshold notifications.

E-mail builders return ``(subject, html_body)`` tuples; in-app renderers
return the subject line and message shown in the host's notification feed.
"""

from html import escape
from typing import Optional

from transferquota.schemas.account import Account
from transferquota.schemas.notification import QuotaNotification, SubjectKind

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(num_bytes: int, precision: int = 2) -> str:
    """Human readable size with 1024-based units, e.g. ``8.5 GB``."""
    value = float(max(num_bytes, 0))
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, precision):g} {_UNITS[unit]}"


# ---------------------------------------------------------------------------
# In-app
# ---------------------------------------------------------------------------


def render_in_app(notification: QuotaNotification) -> tuple[str, str]:
    """Subject line and message for the in-app feed."""
    percent = round(notification.percent)
    if notification.subject_kind == SubjectKind.CRITICAL:
        subject = f"CRITICAL: You have reached {percent}% of your monthly data transfer limit"
        message = (
            "You are close to exceeding your monthly transfer quota. Once you reach 100%, "
            "your ability to upload and download files may be severely restricted until "
            "the quota resets next month."
        )
    else:
        subject = f"You have reached {percent}% of your monthly data transfer limit"
        message = (
            "You may experience service limitations if you exceed your monthly transfer "
            "quota. Please consider reducing your data transfers until the quota resets "
            "next month."
        )
    return subject, message


# ---------------------------------------------------------------------------
# E-mail
# ---------------------------------------------------------------------------


def _usage_line(notification: QuotaNotification) -> str:
    return (
        f"Current usage: {format_bytes(notification.usage_bytes)} of "
        f"{format_bytes(notification.limit_bytes)} ({int(notification.percent)}%)"
    )


def _wrap(heading: str, paragraphs: list[str], link: Optional[tuple[str, str]]) -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    button = ""
    if link is not None:
        label, url = link
        button = f'<p><a href="{escape(url, quote=True)}">{escape(label)}</a></p>'
    return f"<html><body><h2>{escape(heading)}</h2>{body}{button}</body></html>"


def get_user_threshold_email(
    notification: QuotaNotification,
    account: Account,
    instance_name: str,
    app_url: Optional[str] = None,
) -> tuple[str, str]:
    """Warning or critical e-mail to the account holder."""
    percent = int(notification.percent)
    paragraphs = [
        f"Hello {escape(account.label)},",
        f"Your data transfer usage on {escape(instance_name)} has reached {percent}% "
        "of your monthly limit.",
    ]
    if notification.subject_kind == SubjectKind.CRITICAL:
        subject = "CRITICAL: Data transfer limit almost reached"
        heading = "Data Transfer Critical Warning"
        paragraphs.append(
            "You may soon be unable to upload or download files if you reach 100% of your limit."
        )
    else:
        subject = "Warning: Data transfer limit approaching"
        heading = "Data Transfer Warning"
    paragraphs.append(escape(_usage_line(notification)))
    paragraphs.append("If you need more transfer capacity, please contact your administrator.")

    link = ("Go to Files", app_url) if app_url else None
    return subject, _wrap(heading, paragraphs, link)


def get_admin_alert_email(
    notification: QuotaNotification,
    account: Account,
    admin: Account,
    instance_name: str,
    app_url: Optional[str] = None,
) -> tuple[str, str]:
    """Critical alert e-mail to one administrator."""
    percent = int(notification.percent)
    subject = f"User {account.id} has exceeded transfer quota"
    paragraphs = [
        f"Hello {escape(admin.label)},",
        f"User {escape(account.label)} ({escape(account.id)}) has exceeded {percent}% of "
        "their monthly data transfer limit.",
        escape(_usage_line(notification)),
    ]
    link = ("Go to Admin Settings", f"{app_url.rstrip('/')}/settings/admin") if app_url else None
    return subject, _wrap(f"{instance_name} Transfer Quota Alert", paragraphs, link)
