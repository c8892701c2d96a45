"""Permissions API: catalogue, seeding, and permission checks."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medonboard.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_permission_service,
    get_permission_service_for_write,
    require_permission,
    require_role,
)
from medonboard.application.dtos.user import UserResult
from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.application.services.permission_service import PermissionService
from medonboard.core.limiter import limit_seed
from medonboard.domain.enums import SystemRole
from medonboard.domain.permissions import is_admin_role
from medonboard.schemas.permission import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionPair,
    PermissionResponse,
    SeedResponse,
    UserPermissionsResponse,
)

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    permission_svc: Annotated[PermissionService, Depends(get_permission_service)],
    _: Annotated[object, Depends(require_permission("permission", "list"))] = None,
):
    """List the permission catalogue ordered by resource, action."""
    permissions = await permission_svc.list_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.get("/grouped", response_model=dict[str, list[PermissionResponse]])
async def list_permissions_grouped(
    permission_svc: Annotated[PermissionService, Depends(get_permission_service)],
    _: Annotated[object, Depends(require_permission("permission", "list"))] = None,
):
    """Permission catalogue keyed by resource."""
    grouped = await permission_svc.list_permissions_grouped()
    return {
        resource: [PermissionResponse.model_validate(p) for p in items]
        for resource, items in grouped.items()
    }


@router.post("/seed", response_model=SeedResponse)
@limit_seed
async def seed_permissions(
    request: Request,
    permission_svc: Annotated[PermissionService, Depends(get_permission_service_for_write)],
    _: Annotated[object, Depends(require_role(SystemRole.ADMIN))] = None,
):
    """Insert missing catalogue rows (idempotent)."""
    result = await permission_svc.seed_permissions()
    return SeedResponse.model_validate(result)


@router.post("/check", response_model=PermissionCheckResponse)
async def check_permission(
    body: PermissionCheckRequest,
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    _: Annotated[UserResult, Depends(get_current_user)],
):
    """Evaluate resource:action for a stored user or a bare role name.

    Never fails: unknown principals and internal errors answer False.
    """
    allowed = await auth_svc.has_permission(
        body.resource, body.action, user_id=body.user_id, role=body.role
    )
    return PermissionCheckResponse(has_permission=allowed)


@router.get("/users/{user_id}", response_model=UserPermissionsResponse)
async def get_user_permissions(
    user_id: str,
    current_user: Annotated[UserResult, Depends(get_current_user)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Effective permissions of a user. Users may read their own; others need permission:view."""
    if user_id != current_user.id and not is_admin_role(current_user.role):
        await auth_svc.require_permission("permission", "view", user_id=current_user.id)
    pairs = await auth_svc.list_permissions(user_id)
    return UserPermissionsResponse(
        user_id=user_id,
        permissions=[PermissionPair(resource=r, action=a) for r, a in pairs],
    )
