"""Send notification emails through SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from dapdip.config import get_settings

logger = logging.getLogger(__name__)


def _sendgrid_error_details(body: Any) -> str | None:
    """Flatten a SendGrid error body into ``message (help: link)`` entries."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        try:
            body = json.loads(body) if body else None
        except json.JSONDecodeError:
            return body
    if not body:
        return None

    errors = body.get("errors") if isinstance(body, dict) else body
    if isinstance(errors, list):
        messages = []
        for error in errors:
            if not isinstance(error, dict):
                messages.append(str(error))
            elif error.get("help") and error.get("message"):
                messages.append(f"{error['message']} (help: {error['help']})")
            elif error.get("message"):
                messages.append(str(error["message"]))
        if messages:
            return "; ".join(messages)
    return json.dumps(body, default=str)


def _log_sendgrid_failure(source: Any) -> None:
    """Log the status and error body carried by a response or raised error."""

    status_code = getattr(source, "status_code", None)
    details = _sendgrid_error_details(getattr(source, "body", None))
    summary = "SendGrid delivery failed"
    if status_code is not None:
        summary = f"{summary} with status {status_code}"
    if details:
        logger.error("%s: %s", summary, details)
    else:
        logger.error("%s", summary)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send one HTML email; returns whether SendGrid accepted it."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )
    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:
        if hasattr(exc, "status_code") or hasattr(exc, "body"):
            _log_sendgrid_failure(exc)
        else:
            logger.exception("Error sending email to %s via SendGrid", recipient)
        return False

    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int) and 200 <= status_code < 300:
        return True
    _log_sendgrid_failure(response)
    return False


def send_notification_email(
    recipient: str,
    *,
    recipient_name: str | None,
    subject: str,
    text: str,
    link: str | None = None,
) -> bool:
    """Send the email version of a notification."""

    greeting = f"Hi {escape(recipient_name)}," if recipient_name else "Hi,"
    parts = [f"<p>{greeting}</p>", f"<p>{escape(text)}</p>"]
    if link:
        url = link
        if link.startswith("/"):
            url = get_settings().public_app_url.rstrip("/") + link
        parts.append(f'<p><a href="{escape(url, quote=True)}">Open DapDip</a></p>')
    parts.append(
        "<p>You can change which emails you receive in your notification settings.</p>"
    )
    return send_email(subject, "".join(parts), recipient)


__all__ = ["send_email", "send_notification_email"]
