"""Outbound email senders implementing INotificationService.

LogOnlyNotificationService is the default (EMAIL_BACKEND=log);
SmtpNotificationService delivers through an SMTP relay with STARTTLS.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from medonboard.core.config import Settings, get_settings
from medonboard.domain.exceptions import DependencyFailure
from medonboard.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _dedupe(to_emails: list[str]) -> list[str]:
    return list(dict.fromkeys(e.strip() for e in to_emails or [] if e and e.strip()))


class LogOnlyNotificationService:
    """Logs notifications instead of sending them."""

    async def send(self, to_emails: list[str], subject: str, body: str) -> None:
        recipients = _dedupe(to_emails)
        subject_preview = (subject or "")[:80]
        if not recipients:
            logger.info("Email: no recipients, skipping send (subject=%r)", subject_preview)
            return
        logger.info(
            "Email: would send to %d recipients (subject=%r)",
            len(recipients),
            subject_preview,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Email recipients: %s (at %s)\n%s",
                recipients,
                utc_now().isoformat(),
                body,
            )


class SmtpNotificationService:
    """Sends one message per recipient over SMTP.

    In sandbox mode every message goes to EMAIL_TEST_RECIPIENT and the
    intended recipient is noted in the subject.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _build(self, to_email: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.email_from
        if self.settings.email_sandbox_mode and self.settings.email_test_recipient:
            msg["To"] = self.settings.email_test_recipient
            msg["Subject"] = f"[sandbox → {to_email}] {subject}"
        else:
            msg["To"] = to_email
            msg["Subject"] = subject
        if body.lstrip().lower().startswith(("<!doctype html", "<html")):
            msg.set_content(body, subtype="html")
        else:
            msg.set_content(body)
        return msg

    def _deliver(self, messages: list[EmailMessage]) -> None:
        s = self.settings
        password = s.email_smtp_password.get_secret_value() if s.email_smtp_password else None
        with smtplib.SMTP(s.email_smtp_host, s.email_smtp_port, timeout=s.email_smtp_timeout) as server:
            server.ehlo()
            try:
                server.starttls()
                server.ehlo()
            except smtplib.SMTPNotSupportedError:
                logger.warning("SMTP server %s does not support STARTTLS", s.email_smtp_host)
            if s.email_smtp_username and password:
                server.login(s.email_smtp_username, password)
            for msg in messages:
                server.send_message(msg)

    async def send(self, to_emails: list[str], subject: str, body: str) -> None:
        """Deliver to each recipient. Raises DependencyFailure on SMTP or socket errors."""
        recipients = _dedupe(to_emails)
        if not recipients:
            logger.info("Email: no recipients, skipping send (subject=%r)", subject[:80])
            return
        messages = [self._build(to, subject, body) for to in recipients]
        try:
            await asyncio.to_thread(self._deliver, messages)
        except (smtplib.SMTPException, OSError) as e:
            raise DependencyFailure("email", str(e)) from e
        logger.info("Email sent to %d recipients (subject=%r)", len(recipients), subject[:80])


def build_notification_service(
    settings: Settings | None = None,
) -> LogOnlyNotificationService | SmtpNotificationService:
    """Pick the sender configured by EMAIL_BACKEND."""
    settings = settings or get_settings()
    if settings.email_backend == "smtp":
        return SmtpNotificationService(settings)
    return LogOnlyNotificationService()
