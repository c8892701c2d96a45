"""Authorization, role and permission service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.application.services.permission_service import PermissionService
from medonboard.application.services.role_service import RoleService
from medonboard.core.config import get_settings
from medonboard.infrastructure.cache import CacheService
from medonboard.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)
from medonboard.infrastructure.services import SqlPermissionResolver

from . import db as db_deps


def get_cache(request: Request) -> CacheService | None:
    """Redis cache set in app lifespan; None when the app runs without one."""
    return getattr(request.app.state, "cache", None)


def get_authorization_service(
    cache: Annotated[CacheService | None, Depends(get_cache)],
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo)],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo)],
) -> AuthorizationService:
    """Build AuthorizationService with the SQL resolver and optional cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise dynamic-role permission lists are read from the DB each time.
    """
    resolver = SqlPermissionResolver(
        user_repo,
        permission_repo,
        role_repo,
        cache=cache,
        cache_ttl=get_settings().cache_ttl_permissions,
    )
    return AuthorizationService(permission_resolver=resolver)


def get_role_service(
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo_for_write)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(db_deps.get_role_permission_repo_for_write)
    ],
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo_for_write)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> RoleService:
    """Role service for writes; the same transactional session backs every repo."""
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        role_permission_repo=role_permission_repo,
        user_repo=user_repo,
        authorization=authorization,
    )


def get_role_service_for_read(
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo)],
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(db_deps.get_role_permission_repo)
    ],
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> RoleService:
    """Role service for list/get (read session)."""
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        role_permission_repo=role_permission_repo,
        user_repo=user_repo,
        authorization=authorization,
    )


def get_permission_service(
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo)],
) -> PermissionService:
    return PermissionService(permission_repo)


def get_permission_service_for_write(
    permission_repo: Annotated[
        PermissionRepository, Depends(db_deps.get_permission_repo_for_write)
    ],
) -> PermissionService:
    """Permission service for seeding (transactional)."""
    return PermissionService(permission_repo)
