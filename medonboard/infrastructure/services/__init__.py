"""Infrastructure services: email senders, templates and permission resolution."""

from medonboard.infrastructure.services.email_template_renderer import (
    EmailTemplateRenderer,
)
from medonboard.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
    SmtpNotificationService,
    build_notification_service,
)
from medonboard.infrastructure.services.permission_resolver import SqlPermissionResolver

__all__ = [
    "EmailTemplateRenderer",
    "LogOnlyNotificationService",
    "SmtpNotificationService",
    "SqlPermissionResolver",
    "build_notification_service",
]
