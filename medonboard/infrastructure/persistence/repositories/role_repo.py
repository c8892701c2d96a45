"""Dynamic role repository. Read methods return RoleResult with permissions."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medonboard.application.dtos.permission import PermissionResult
from medonboard.application.dtos.role import RoleResult
from medonboard.domain.exceptions import RoleAlreadyExistsException
from medonboard.infrastructure.persistence.models.role import Role
from medonboard.infrastructure.persistence.repositories.base import (
    BaseRepository,
    is_loaded,
)


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to RoleResult; permissions only when eagerly loaded."""
    permissions: tuple[PermissionResult, ...] = ()
    if is_loaded(r, "permissions"):
        permissions = tuple(
            PermissionResult(
                id=p.id, resource=p.resource, action=p.action, description=p.description
            )
            for p in r.permissions
        )
    return RoleResult(
        id=r.id,
        name=r.name,
        display_name=r.display_name,
        description=r.description,
        is_system=r.is_system,
        permissions=permissions,
    )


class RoleRepository(BaseRepository[Role]):
    """Role repository. Names are stored upper-cased."""

    _mutable_fields = frozenset({"display_name", "description"})

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    def _with_permissions(self):
        return (
            select(Role)
            .options(selectinload(Role.permissions))
            .execution_options(populate_existing=True)
        )

    async def create_role(
        self,
        name: str,
        display_name: str | None,
        description: str | None,
        *,
        is_system: bool = False,
    ) -> RoleResult:
        """Create role; raises RoleAlreadyExistsException on duplicate name."""
        role = Role(
            name=name.strip().upper(),
            display_name=display_name,
            description=description,
            is_system=is_system,
        )
        try:
            async with self.db.begin_nested():
                created = await self.create(role)
        except IntegrityError:
            raise RoleAlreadyExistsException(role.name) from None
        return _role_to_result(created)

    async def get_role(self, role_id: str) -> RoleResult | None:
        result = await self.db.execute(self._with_permissions().where(Role.id == role_id))
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(
            self._with_permissions().where(Role.name == name.strip().upper())
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def list_roles(self, skip: int = 0, limit: int = 100) -> list[RoleResult]:
        result = await self.db.execute(
            self._with_permissions().order_by(Role.name).offset(skip).limit(limit)
        )
        return [_role_to_result(r) for r in result.scalars().all()]

    async def update_role(
        self, role_id: str, *, display_name: str | None, description: str | None
    ) -> RoleResult | None:
        role = await self.get_by_id(role_id)
        if role is None:
            return None
        changes = {
            k: v
            for k, v in (("display_name", display_name), ("description", description))
            if v is not None
        }
        self.apply_fields(role, changes)
        await self.update(role)
        return await self.get_role(role_id)

    async def delete_role(self, role_id: str) -> bool:
        role = await self.get_by_id(role_id)
        if role is None:
            return False
        await self.delete(role)
        return True

