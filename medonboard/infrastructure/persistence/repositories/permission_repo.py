"""Permission catalogue repository. Read methods return PermissionResult."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.application.dtos.permission import PermissionResult
from medonboard.infrastructure.persistence.models.permission import Permission
from medonboard.infrastructure.persistence.models.role import RolePermission
from medonboard.infrastructure.persistence.repositories.base import (
    BaseRepository,
    unique_ids,
)


def _permission_to_result(p: Permission) -> PermissionResult:
    return PermissionResult(
        id=p.id, resource=p.resource, action=p.action, description=p.description
    )


class PermissionRepository(BaseRepository[Permission]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_resource_action(
        self, resource: str, action: str
    ) -> PermissionResult | None:
        result = await self.db.execute(
            select(Permission).where(
                Permission.resource == resource, Permission.action == action
            )
        )
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def get_by_ids(self, permission_ids: Iterable[str]) -> list[PermissionResult]:
        ids = unique_ids(permission_ids)
        if not ids:
            return []
        result = await self.db.execute(select(Permission).where(Permission.id.in_(ids)))
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def list_permissions(self) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission).order_by(Permission.resource, Permission.action)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def list_pairs_for_role(self, role_id: str) -> list[tuple[str, str]]:
        """(resource, action) pairs linked to role_id."""
        result = await self.db.execute(
            select(Permission.resource, Permission.action)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.resource, Permission.action)
        )
        return [(row.resource, row.action) for row in result.all()]

    async def create_permission(
        self, resource: str, action: str, description: str | None = None
    ) -> PermissionResult:
        created = await self.create(
            Permission(resource=resource, action=action, description=description)
        )
        return _permission_to_result(created)
