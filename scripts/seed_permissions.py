"""Seed the permission catalogue and the built-in system role rows.

Usage:
    python -m scripts.seed_permissions
    medonboard-seed-permissions
Idempotent: existing permissions and roles are left as they are, and system
role grants are re-synced. Requires Postgres (DATABASE_URL).
"""

import asyncio
import sys

from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.application.services.permission_service import PermissionService
from medonboard.application.services.role_service import RoleService
from medonboard.infrastructure.persistence import database
from medonboard.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)
from medonboard.infrastructure.services import SqlPermissionResolver
from medonboard.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Seed permissions, then create system roles with their grants."""
    setup_logging()
    database.get_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                permission_repo = PermissionRepository(session)
                role_repo = RoleRepository(session)
                user_repo = UserRepository(session)
                seeded = await PermissionService(permission_repo).seed_permissions()
                roles = RoleService(
                    role_repo=role_repo,
                    permission_repo=permission_repo,
                    role_permission_repo=RolePermissionRepository(session),
                    user_repo=user_repo,
                    authorization=AuthorizationService(
                        SqlPermissionResolver(user_repo, permission_repo, role_repo)
                    ),
                )
                created_roles = await roles.ensure_system_roles()
        print(
            f"Permissions: {seeded.created} created, {seeded.skipped} skipped "
            f"({seeded.total} total)"
        )
        print(f"System roles created: {created_roles}")
    finally:
        await database.dispose_engine()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
