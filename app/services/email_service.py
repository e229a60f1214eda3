"""Email delivery for moderation notifications."""

from __future__ import annotations

import html
import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import get_settings

logger = logging.getLogger(__name__)


def _moderation_url(settings) -> str:
    return f"{getattr(settings, 'public_base_url', '').rstrip('/')}/admin/moderation"


def _build_html_email(heading: str, intro: str, rows: list[tuple[str, str]], action_url: str) -> str:
    """Build a small HTML notification body with a label/value table and a review link."""
    items = "".join(
        f"<p><strong>{html.escape(label)}:</strong> {html.escape(value)}</p>"
        for label, value in rows
    )
    return (
        "<html><body>"
        '<div style="font-family:sans-serif;max-width:600px;margin:0 auto;">'
        '<div style="font-size:24px;font-weight:bold;color:#7c3aed;">LaunchPad</div>'
        f"<h2>{html.escape(heading)}</h2>"
        f"<p>{html.escape(intro)}</p>"
        f'<div style="background:#f5f3ff;padding:15px;border-radius:4px;">{items}</div>'
        f'<p><a href="{html.escape(action_url, quote=True)}">Review Startup</a></p>'
        f'<p style="color:#888;font-size:12px;">&copy; {date.today().year} LaunchPad. '
        "This is an automated email, please do not reply.</p>"
        "</div></body></html>"
    )


def _build_text_email(heading: str, intro: str, rows: list[tuple[str, str]], action_url: str) -> str:
    lines = [heading, "=" * 40, "", intro, ""]
    for label, value in rows:
        lines.append(f"{label}: {value}")
    lines.append("")
    lines.append(f"Review: {action_url}")
    return "\n".join(lines)


def build_startup_created_email(startup_name: str, slug: str, settings=None) -> tuple[str, str, str]:
    """Return (subject, html, text) for a new-submission notification."""
    if settings is None:
        settings = get_settings()
    rows = [("Startup Name", startup_name), ("Slug", slug), ("Status", "Pending Approval")]
    heading = "New Startup Created"
    intro = "A new startup has been added to the platform and is awaiting approval."
    url = _moderation_url(settings)
    return (
        f"New Startup Created: {startup_name}",
        _build_html_email(heading, intro, rows, url),
        _build_text_email(heading, intro, rows, url),
    )


def build_startup_approved_email(startup_name: str, slug: str, settings=None) -> tuple[str, str, str]:
    """Return (subject, html, text) for an approval notification."""
    if settings is None:
        settings = get_settings()
    rows = [("Startup Name", startup_name), ("Slug", slug), ("Status", "Approved")]
    heading = "Startup Status Changed"
    intro = "A startup has been approved and is now publicly listed."
    url = f"{getattr(settings, 'public_base_url', '').rstrip('/')}/startups/{slug}"
    return (
        f"Startup Approved: {startup_name}",
        _build_html_email(heading, intro, rows, url),
        _build_text_email(heading, intro, rows, url),
    )


def send_email(
    recipient: str,
    subject: str,
    html_body: str,
    text_body: str,
    settings=None,
) -> bool:
    """Send one multipart email. Returns True on success, False on any failure."""
    if settings is None:
        settings = get_settings()

    if not recipient:
        logger.warning("email_send_skipped: no recipient configured")
        return False

    smtp_host = getattr(settings, "smtp_host", "")
    if not smtp_host:
        logger.warning("email_send_skipped: SMTP host not configured")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = getattr(settings, "smtp_from", "")
    msg["To"] = recipient
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(smtp_host, getattr(settings, "smtp_port", 587)) as server:
            server.starttls()
            smtp_user = getattr(settings, "smtp_user", "")
            smtp_password = getattr(settings, "smtp_password", "")
            if smtp_user:
                server.login(smtp_user, smtp_password)
            server.sendmail(msg["From"], [recipient], msg.as_string())
        logger.info("email_sent: recipient=%s subject=%s", recipient, subject)
        return True
    except smtplib.SMTPAuthenticationError:
        logger.error("email_auth_failed: could not authenticate with SMTP server")
        return False
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email_send_failed: %s", exc)
        return False


def notify_admin_startup_created(startup_name: str, slug: str, settings=None) -> bool:
    """Tell the configured admin address about a new pending submission."""
    if settings is None:
        settings = get_settings()
    subject, html_body, text_body = build_startup_created_email(startup_name, slug, settings)
    return send_email(
        getattr(settings, "admin_notify_email", ""), subject, html_body, text_body, settings
    )


def notify_admin_startup_approved(startup_name: str, slug: str, settings=None) -> bool:
    """Tell the configured admin address that a startup was approved."""
    if settings is None:
        settings = get_settings()
    subject, html_body, text_body = build_startup_approved_email(startup_name, slug, settings)
    return send_email(
        getattr(settings, "admin_notify_email", ""), subject, html_body, text_body, settings
    )
