"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from medonboard.application.dtos.user import PrincipalResult


# Notification sender interface (email)
class INotificationService(Protocol):
    """Protocol for sending notifications (e.g. email) to a list of recipients."""

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Send to the given addresses. Raises DependencyFailure on delivery errors."""


# Template renderer interface (template key -> subject/body)
class ITemplateRenderer(Protocol):
    """Protocol for rendering notification templates."""

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Return (subject, body). Raises DependencyFailure for unknown keys or render errors."""


# Permission resolver interface
class IPermissionResolver(Protocol):
    """Protocol for reading principals and dynamic-role permissions (used by AuthorizationService)."""

    async def get_principal(self, user_id: str) -> PrincipalResult | None:
        """Return user id, system role and dynamic role id; None if user missing or inactive."""

    async def get_role_permissions(self, role_id: str) -> list[tuple[str, str]]:
        """(resource, action) pairs assigned to the dynamic role."""

    async def get_role_id_by_name(self, name: str) -> str | None:
        """Id of the dynamic role with this (upper-cased) name."""

    async def invalidate_role(self, role_id: str) -> None:
        """Drop any cached permission list for role_id."""


# Cache interface
class ICacheService(Protocol):
    """Protocol for cache (get/set/delete with TTL)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""

    async def get(self, key: str) -> Any | None:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL; return True on success."""

    async def delete(self, key: str) -> bool:
        """Remove key; return True if deleted."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern; return count."""
