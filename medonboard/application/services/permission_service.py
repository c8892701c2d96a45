"""Permission catalogue service: idempotent seeding and listing."""

from __future__ import annotations

from medonboard.application.dtos.permission import PermissionResult, SeedResult
from medonboard.application.interfaces.repositories import IPermissionRepository
from medonboard.domain.permissions import SEEDED_PERMISSIONS
from medonboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class PermissionService:
    """Seeds the static catalogue into the permission table and reads it back."""

    def __init__(self, permission_repo: IPermissionRepository) -> None:
        self._repo = permission_repo

    async def seed_permissions(self) -> SeedResult:
        """Insert catalogue entries that are missing; existing rows are left as is."""
        created = skipped = 0
        for resource, action, description in SEEDED_PERMISSIONS:
            if await self._repo.get_by_resource_action(resource, action) is not None:
                skipped += 1
                continue
            await self._repo.create_permission(resource, action, description)
            created += 1
        result = SeedResult(created=created, skipped=skipped, total=len(SEEDED_PERMISSIONS))
        logger.info(
            "Seeded permissions: %d created, %d skipped, %d total",
            result.created,
            result.skipped,
            result.total,
        )
        return result

    async def list_permissions(self) -> list[PermissionResult]:
        return await self._repo.list_permissions()

    async def list_permissions_grouped(self) -> dict[str, list[PermissionResult]]:
        """Permissions keyed by resource, each list ordered by action."""
        grouped: dict[str, list[PermissionResult]] = {}
        for permission in await self._repo.list_permissions():
            grouped.setdefault(permission.resource, []).append(permission)
        return grouped
