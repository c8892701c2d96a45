"""Best-effort notification dispatch: render a template and send it.

Delivery never fails the caller. Rendering or sending errors are logged and
notify() returns False.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from medonboard.application.interfaces.services import (
    INotificationService,
    ITemplateRenderer,
)
from medonboard.domain.enums import NotificationTarget
from medonboard.domain.exceptions import DependencyFailure
from medonboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _recipients(recipients: str | Sequence[str] | None) -> list[str]:
    if recipients is None:
        return []
    if isinstance(recipients, str):
        recipients = [recipients]
    return list(dict.fromkeys(r.strip() for r in recipients if r and r.strip()))


class NotificationDispatcher:
    """notify(target, recipients, template_key, payload); login_link is always in context."""

    def __init__(
        self,
        sender: INotificationService,
        renderer: ITemplateRenderer,
        login_link: str,
    ) -> None:
        self.sender = sender
        self.renderer = renderer
        self.login_link = login_link

    async def notify(
        self,
        target: NotificationTarget,
        recipients: str | Sequence[str] | None,
        template_key: str,
        payload: dict[str, Any] | None = None,
    ) -> bool:
        """Send template_key to recipients. Returns True only when the send succeeded."""
        if target is NotificationTarget.NONE:
            return False
        to = _recipients(recipients)
        if not to:
            logger.info(
                "No %s recipients for %s; notification skipped", target.value, template_key
            )
            return False
        context = {"login_link": self.login_link, **(payload or {})}
        try:
            subject, body = self.renderer.render(template_key, context)
            await self.sender.send(to, subject, body)
        except DependencyFailure as e:
            logger.warning(
                "Notification %s to %s failed: %s", template_key, target.value, e.message
            )
            return False
        except Exception:
            logger.exception("Notification %s to %s failed", template_key, target.value)
            return False
        logger.info(
            "Notification %s sent to %d %s recipient(s)", template_key, len(to), target.value
        )
        return True
