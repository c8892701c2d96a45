"""Role application service: dynamic role CRUD and assignment.

System role names (GUEST, PATIENT, DOCTOR, CLINIC, ADMIN, any case) are
reserved: they cannot be created, and rows flagged is_system cannot be
updated or deleted.
"""

from __future__ import annotations

from collections.abc import Iterable

from medonboard.application.dtos.role import RoleResult
from medonboard.application.dtos.user import UserResult
from medonboard.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.domain.enums import SystemRole
from medonboard.domain.exceptions import (
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SystemRoleProtectedException,
    ValidationException,
)
from medonboard.domain.permissions import (
    ROLE_GRANTS,
    is_system_role_name,
    normalize_role,
)
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced

logger = get_logger(__name__)


class RoleService:
    """Create, update, delete and assign dynamic roles."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        user_repo: IUserRepository,
        authorization: AuthorizationService,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._user_repo = user_repo
        self._authorization = authorization

    async def _require_role(self, role_id: str) -> RoleResult:
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    def _ensure_mutable(self, role: RoleResult, operation: str) -> None:
        if role.is_system or is_system_role_name(role.name):
            raise SystemRoleProtectedException(role.name, operation)

    async def _validated_permission_ids(self, permission_ids: Iterable[str]) -> list[str]:
        """Return de-duplicated ids; ValidationException if any id is unknown."""
        ids = list(dict.fromkeys(permission_ids))
        if not ids:
            return []
        found = {p.id for p in await self._permission_repo.get_by_ids(ids)}
        missing = [pid for pid in ids if pid not in found]
        if missing:
            raise ValidationException(
                f"Unknown permission ids: {', '.join(missing)}", field="permission_ids"
            )
        return ids

    @traced("roles.create_role")
    async def create_role(
        self,
        name: str,
        display_name: str | None = None,
        description: str | None = None,
        permission_ids: list[str] | None = None,
    ) -> RoleResult:
        """Create a dynamic role with an optional permission set.

        Raises:
            ValidationException: Blank name or unknown permission id.
            SystemRoleProtectedException: Name is a reserved system role.
            RoleAlreadyExistsException: Name already taken.
        """
        normalized = normalize_role(name)
        if normalized is None:
            raise ValidationException("Role name is required", field="name")
        if is_system_role_name(normalized):
            raise SystemRoleProtectedException(normalized, "create")
        if await self._role_repo.get_by_name(normalized) is not None:
            raise RoleAlreadyExistsException(normalized)
        ids = await self._validated_permission_ids(permission_ids or [])
        created = await self._role_repo.create_role(
            normalized, display_name or name.strip(), description
        )
        if ids:
            await self._role_permission_repo.replace_permissions(created.id, ids)
        logger.info("Created role %s with %d permissions", normalized, len(ids))
        return await self._require_role(created.id)

    @traced("roles.update_role")
    async def update_role(
        self,
        role_id: str,
        *,
        display_name: str | None = None,
        description: str | None = None,
        permission_ids: list[str] | None = None,
    ) -> RoleResult:
        """Update display fields; permission_ids, when given, replaces the whole set."""
        role = await self._require_role(role_id)
        self._ensure_mutable(role, "update")
        ids = (
            await self._validated_permission_ids(permission_ids)
            if permission_ids is not None
            else None
        )
        await self._role_repo.update_role(
            role_id, display_name=display_name, description=description
        )
        if ids is not None:
            await self._role_permission_repo.replace_permissions(role_id, ids)
        await self._authorization.invalidate_role_cache(role_id)
        return await self._require_role(role_id)

    @traced("roles.delete_role")
    async def delete_role(self, role_id: str) -> None:
        """Delete a dynamic role after detaching it from its users."""
        role = await self._require_role(role_id)
        self._ensure_mutable(role, "delete")
        detached = await self._user_repo.clear_dynamic_role(role_id)
        await self._role_repo.delete_role(role_id)
        await self._authorization.invalidate_role_cache(role_id)
        logger.info("Deleted role %s (detached from %d users)", role.name, detached)

    async def get_role(self, role_id: str) -> RoleResult:
        return await self._require_role(role_id)

    async def list_roles(self, skip: int = 0, limit: int = 100) -> list[RoleResult]:
        return await self._role_repo.list_roles(skip=skip, limit=limit)

    @traced("roles.assign_role")
    async def assign_role(self, user_id: str, role_id: str) -> UserResult:
        """Attach a dynamic role to a user (replacing any previous one)."""
        role = await self._require_role(role_id)
        if role.is_system:
            raise ValidationException(
                f"System role '{role.name}' is set through the user's role field",
                field="role_id",
            )
        updated = await self._user_repo.set_dynamic_role(user_id, role.id)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        return updated

    @traced("roles.revoke_role")
    async def revoke_role(self, user_id: str) -> UserResult:
        updated = await self._user_repo.set_dynamic_role(user_id, None)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        return updated

    async def ensure_system_roles(self) -> int:
        """Create missing system role rows and sync them to their static grants.

        Returns the number of rows created. Permissions must be seeded first.
        """
        created = 0
        for system_role in SystemRole:
            role = await self._role_repo.get_by_name(system_role.value)
            if role is None:
                role = await self._role_repo.create_role(
                    system_role.value,
                    system_role.value.capitalize(),
                    f"Built-in {system_role.value.lower()} role",
                    is_system=True,
                )
                created += 1
            ids: list[str] = []
            for resource, actions in ROLE_GRANTS[system_role].items():
                for action in sorted(actions):
                    perm = await self._permission_repo.get_by_resource_action(
                        resource, action
                    )
                    if perm is not None:
                        ids.append(perm.id)
            await self._role_permission_repo.replace_permissions(role.id, ids)
            await self._authorization.invalidate_role_cache(role.id)
        return created
