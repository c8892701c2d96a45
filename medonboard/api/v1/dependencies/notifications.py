"""Email sender, template renderer and dispatcher (composition root)."""

from __future__ import annotations

from functools import lru_cache

from medonboard.application.services.notification_dispatcher import NotificationDispatcher
from medonboard.core.config import get_settings
from medonboard.core.constants import LOGIN_PATH
from medonboard.infrastructure.services import (
    EmailTemplateRenderer,
    LogOnlyNotificationService,
    SmtpNotificationService,
    build_notification_service,
)


@lru_cache
def get_template_renderer() -> EmailTemplateRenderer:
    """Compiled templates are shared for the process lifetime."""
    return EmailTemplateRenderer()


@lru_cache
def get_notification_sender() -> LogOnlyNotificationService | SmtpNotificationService:
    """Sender chosen by EMAIL_BACKEND (log or smtp)."""
    return build_notification_service(get_settings())


def get_notification_dispatcher() -> NotificationDispatcher:
    """Best-effort dispatcher; emails link to {APP_URL}/login."""
    settings = get_settings()
    return NotificationDispatcher(
        sender=get_notification_sender(),
        renderer=get_template_renderer(),
        login_link=settings.app_url.rstrip("/") + LOGIN_PATH,
    )
