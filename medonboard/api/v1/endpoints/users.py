"""Users API: current user, role selection, own requests and the admin team."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medonboard.api.v1.dependencies import (
    get_current_user,
    get_onboarding_service_for_read,
    get_user_service,
    get_user_service_for_read,
    require_permission,
    require_role,
)
from medonboard.application.dtos.user import UserResult
from medonboard.application.services.onboarding_service import OnboardingService
from medonboard.application.services.user_service import UserService
from medonboard.core.limiter import limit_writes
from medonboard.domain.enums import SystemRole
from medonboard.domain.exceptions import AuthorizationException
from medonboard.domain.permissions import is_admin_role
from medonboard.schemas.approval_request import ApprovalRequestResponse
from medonboard.schemas.user import TeamMemberCreate, UserResponse, UserRoleUpdate

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
):
    return UserResponse.model_validate(current_user)


@router.put("/me/role", response_model=UserResponse)
@limit_writes
async def select_my_role(
    request: Request,
    body: UserRoleUpdate,
    current_user: Annotated[UserResult, Depends(get_current_user)],
    user_svc: Annotated[UserService, Depends(get_user_service)],
):
    """Pick a system role during onboarding. ADMIN cannot be self-assigned."""
    if is_admin_role(body.role):
        raise AuthorizationException(message="ADMIN role cannot be self-assigned")
    user = await user_svc.update_user_role(current_user.id, body.role)
    return UserResponse.model_validate(user)


@router.get("/me/request-status", response_model=ApprovalRequestResponse | None)
async def get_my_request_status(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    """Latest approval request of the caller, or null when none was submitted."""
    found = await onboarding.get_my_request_status(current_user.id)
    return ApprovalRequestResponse.model_validate(found) if found else None


@router.get("/me/requests/{request_id}", response_model=ApprovalRequestResponse)
async def get_my_request(
    request_id: str,
    current_user: Annotated[UserResult, Depends(get_current_user)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    """One of the caller's own approval requests."""
    found = await onboarding.get_my_request(current_user.id, request_id)
    return ApprovalRequestResponse.model_validate(found)


@router.get("/team-members", response_model=list[UserResponse])
async def list_team_members(
    user_svc: Annotated[UserService, Depends(get_user_service_for_read)],
    _: Annotated[object, Depends(require_role(SystemRole.ADMIN))] = None,
):
    """Users at the admin-role onboarding stage."""
    users = await user_svc.list_team_members()
    return [UserResponse.model_validate(u) for u in users]


@router.post("/team-members", response_model=UserResponse, status_code=201)
@limit_writes
async def create_team_member(
    request: Request,
    body: TeamMemberCreate,
    user_svc: Annotated[UserService, Depends(get_user_service)],
    _: Annotated[object, Depends(require_role(SystemRole.ADMIN))] = None,
):
    """Add an admin-team user holding a dynamic role and email them the sign-in link."""
    member = await user_svc.create_team_member(body.name, str(body.email), body.role_id)
    return UserResponse.model_validate(member)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_svc: Annotated[UserService, Depends(get_user_service_for_read)],
    _: Annotated[object, Depends(require_permission("user", "view"))] = None,
):
    user = await user_svc.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}/role", response_model=UserResponse)
@limit_writes
async def set_user_role(
    request: Request,
    user_id: str,
    body: UserRoleUpdate,
    user_svc: Annotated[UserService, Depends(get_user_service)],
    _: Annotated[object, Depends(require_role(SystemRole.ADMIN))] = None,
):
    """Set any system role on a user (admin only)."""
    user = await user_svc.update_user_role(user_id, body.role)
    return UserResponse.model_validate(user)
