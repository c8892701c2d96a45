"""Authorization service: resolves (resource, action) grants for a principal.

Resolution order:
1. ADMIN system role (any case) is granted everything; nothing else is read.
2. Other system roles consult their static grant table.
3. The principal's dynamic role is checked for an exact (resource, action) row.
4. Otherwise deny.

Every lookup error fails closed: it is logged and the answer is deny.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from medonboard.application.interfaces.services import IPermissionResolver
from medonboard.domain.exceptions import AuthorizationException
from medonboard.domain.permissions import (
    STATEMENTS,
    all_permissions,
    is_admin_role,
    is_system_role_name,
    role_allows,
    role_grants,
)
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced

logger = get_logger(__name__)


class _Principal:
    """System role plus dynamic role id; dynamic pairs are loaded at most once."""

    __slots__ = ("system_role", "role_id", "_pairs")

    def __init__(self, system_role: str | None, role_id: str | None) -> None:
        self.system_role = system_role
        self.role_id = role_id
        self._pairs: frozenset[tuple[str, str]] | None = None

    async def dynamic_pairs(
        self, resolver: IPermissionResolver
    ) -> frozenset[tuple[str, str]]:
        if self._pairs is None:
            if self.role_id is None:
                self._pairs = frozenset()
            else:
                pairs = await resolver.get_role_permissions(self.role_id)
                self._pairs = frozenset((r, a) for r, a in pairs)
        return self._pairs

    async def allows(
        self, resolver: IPermissionResolver, resource: str, action: str
    ) -> bool:
        if is_admin_role(self.system_role):
            return True
        if role_allows(self.system_role, resource, action):
            return True
        return (resource, action) in await self.dynamic_pairs(resolver)


class AuthorizationService:
    """Centralized, fail-closed permission checks."""

    def __init__(self, permission_resolver: IPermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    async def _principal(
        self, user_id: str | None, role: str | None
    ) -> _Principal | None:
        """Resolve the principal; a stored user takes precedence over an explicit role."""
        if user_id:
            found = await self.permission_resolver.get_principal(user_id)
            if found is None:
                logger.info("Permission check for unknown or inactive user %s", user_id)
                return None
            return _Principal(found.role, found.role_id)
        if not role or not role.strip():
            return None
        if is_system_role_name(role):
            return _Principal(role, None)
        # Not a system role: treat the name as a dynamic role.
        role_id = await self.permission_resolver.get_role_id_by_name(role.strip().upper())
        return _Principal(None, role_id)

    @traced("authorization.has_permission")
    async def has_permission(
        self,
        resource: str,
        action: str,
        *,
        user_id: str | None = None,
        role: str | None = None,
    ) -> bool:
        """True if the principal (user_id or role name) holds resource:action."""
        try:
            principal = await self._principal(user_id, role)
            if principal is None:
                return False
            return await principal.allows(self.permission_resolver, resource, action)
        except Exception:
            logger.exception(
                "Permission check failed (user_id=%s, role=%s, %s:%s); denying",
                user_id,
                role,
                resource,
                action,
            )
            return False

    @traced("authorization.has_all_permissions")
    async def has_all_permissions(
        self,
        permissions: Mapping[str, Iterable[str]],
        *,
        user_id: str | None = None,
        role: str | None = None,
    ) -> bool:
        """True only if every listed action on every listed resource is granted."""
        try:
            principal = await self._principal(user_id, role)
            if principal is None:
                return False
            for resource, actions in permissions.items():
                for action in actions:
                    if not await principal.allows(
                        self.permission_resolver, resource, action
                    ):
                        return False
            return True
        except Exception:
            logger.exception(
                "Permission check failed (user_id=%s, role=%s); denying", user_id, role
            )
            return False

    @traced("authorization.list_permissions")
    async def list_permissions(self, user_id: str) -> list[tuple[str, str]]:
        """Static grants plus dynamic-role grants, de-duplicated; the full catalogue for ADMIN."""
        try:
            principal = await self._principal(user_id, None)
            if principal is None:
                return []
            if is_admin_role(principal.system_role):
                return all_permissions()
            grants = role_grants(principal.system_role)
            static = [
                (resource, action)
                for resource, actions in STATEMENTS.items()
                for action in actions
                if action in grants.get(resource, frozenset())
            ]
            dynamic = sorted(await principal.dynamic_pairs(self.permission_resolver))
            return list(dict.fromkeys([*static, *dynamic]))
        except Exception:
            logger.exception("Listing permissions failed for user %s", user_id)
            return []

    async def require_permission(
        self,
        resource: str,
        action: str,
        *,
        user_id: str | None = None,
        role: str | None = None,
    ) -> None:
        """Raise AuthorizationException if the principal lacks resource:action."""
        if not await self.has_permission(resource, action, user_id=user_id, role=role):
            raise AuthorizationException(resource=resource, action=action)

    async def invalidate_role_cache(self, role_id: str) -> None:
        """Drop the cached permission list of a dynamic role."""
        try:
            await self.permission_resolver.invalidate_role(role_id)
        except Exception:
            logger.exception("Failed to invalidate permission cache for role %s", role_id)
