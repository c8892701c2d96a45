"""Reads principals and dynamic-role permissions for the authorization engine.

Dynamic-role permission lists are cached per role (permission:role:<role_id>);
principal lookups always hit the database so role changes apply immediately.
"""

from __future__ import annotations

import logging

from medonboard.application.dtos.user import PrincipalResult
from medonboard.application.interfaces.services import ICacheService
from medonboard.core.config import get_settings
from medonboard.infrastructure.cache.keys import role_permissions_key
from medonboard.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from medonboard.infrastructure.persistence.repositories.role_repo import RoleRepository
from medonboard.infrastructure.persistence.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class SqlPermissionResolver:
    """IPermissionResolver backed by SQL with an optional Redis cache."""

    def __init__(
        self,
        user_repo: UserRepository,
        permission_repo: PermissionRepository,
        role_repo: RoleRepository,
        cache: ICacheService | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        self.user_repo = user_repo
        self.permission_repo = permission_repo
        self.role_repo = role_repo
        self.cache = cache
        self.cache_ttl = cache_ttl or get_settings().cache_ttl_permissions

    async def get_principal(self, user_id: str) -> PrincipalResult | None:
        return await self.user_repo.get_principal(user_id)

    async def get_role_permissions(self, role_id: str) -> list[tuple[str, str]]:
        use_cache = self.cache is not None and self.cache.is_available()
        key = role_permissions_key(role_id)
        if use_cache:
            cached = await self.cache.get(key)
            if isinstance(cached, list):
                return [(str(r), str(a)) for r, a in cached]
        pairs = await self.permission_repo.list_pairs_for_role(role_id)
        if use_cache:
            await self.cache.set(key, [list(p) for p in pairs], ttl=self.cache_ttl)
        return pairs

    async def get_role_id_by_name(self, name: str) -> str | None:
        role = await self.role_repo.get_by_name(name)
        return role.id if role else None

    async def invalidate_role(self, role_id: str) -> None:
        if self.cache is not None and self.cache.is_available():
            await self.cache.delete(role_permissions_key(role_id))
