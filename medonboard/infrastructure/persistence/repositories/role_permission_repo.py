"""Role-permission link repository: replaces a role's permission set."""

from collections.abc import Iterable

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.infrastructure.persistence.models.role import RolePermission
from medonboard.infrastructure.persistence.repositories.base import (
    BaseRepository,
    unique_ids,
)


class RolePermissionRepository(BaseRepository[RolePermission]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RolePermission)

    async def replace_permissions(
        self, role_id: str, permission_ids: Iterable[str]
    ) -> None:
        """Delete the role's links and insert one per id in permission_ids."""
        await self.db.execute(
            sa_delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        self.db.add_all(
            RolePermission(role_id=role_id, permission_id=pid)
            for pid in unique_ids(permission_ids)
        )
        await self.db.flush()
