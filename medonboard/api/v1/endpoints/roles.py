"""Roles API: dynamic role CRUD and user assignment."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from medonboard.api.v1.dependencies import (
    get_role_service,
    get_role_service_for_read,
    require_permission,
)
from medonboard.application.services.role_service import RoleService
from medonboard.core.limiter import limit_writes
from medonboard.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from medonboard.schemas.user import DynamicRoleAssign, UserResponse

router = APIRouter()


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission("role", "create"))] = None,
):
    """Create a dynamic role. Names are upper-cased; system names are reserved."""
    role = await role_svc.create_role(
        body.name,
        display_name=body.display_name,
        description=body.description,
        permission_ids=body.permission_ids,
    )
    return RoleResponse.model_validate(role)


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    _: Annotated[object, Depends(require_permission("role", "list"))] = None,
):
    roles = await role_svc.list_roles(skip=skip, limit=limit)
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
    _: Annotated[object, Depends(require_permission("role", "view"))] = None,
):
    role = await role_svc.get_role(role_id)
    return RoleResponse.model_validate(role)


@router.patch("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission("role", "update"))] = None,
):
    """Update a dynamic role. permission_ids, when sent, replaces the whole set."""
    role = await role_svc.update_role(
        role_id,
        display_name=body.display_name,
        description=body.description,
        permission_ids=body.permission_ids,
    )
    return RoleResponse.model_validate(role)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission("role", "delete"))] = None,
):
    """Delete a dynamic role; users holding it lose the link."""
    await role_svc.delete_role(role_id)
    return Response(status_code=204)


@router.put("/users/{user_id}", response_model=UserResponse)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: DynamicRoleAssign,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission("role", "assign"))] = None,
):
    """Attach a dynamic role to a user (replaces any previous one)."""
    user = await role_svc.assign_role(user_id, body.role_id)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=UserResponse)
@limit_writes
async def revoke_role(
    request: Request,
    user_id: str,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission("role", "revoke"))] = None,
):
    user = await role_svc.revoke_role(user_id)
    return UserResponse.model_validate(user)
