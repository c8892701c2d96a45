"""Admin API: the admin approval queue and adjudication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from medonboard.api.v1.dependencies import (
    get_onboarding_service,
    get_onboarding_service_for_read,
    require_role,
)
from medonboard.application.dtos.user import UserResult
from medonboard.application.services.onboarding_service import OnboardingService
from medonboard.core.limiter import limit_adjudication
from medonboard.domain.enums import SystemRole
from medonboard.schemas.approval_request import ApprovalRequestResponse, RejectRequest

router = APIRouter()

_admin_only = require_role(SystemRole.ADMIN)


@router.get("/approval-requests", response_model=list[ApprovalRequestResponse])
async def list_approval_requests(
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
    _: Annotated[UserResult, Depends(_admin_only)],
    status: str | None = Query("PENDING", description="PENDING, APPROVED or REJECTED"),
):
    """Requests in the admin queue (clinic submissions and independent doctors)."""
    requests = await onboarding.list_admin_requests(status)
    return [ApprovalRequestResponse.model_validate(r) for r in requests]


@router.get("/approval-requests/{request_id}", response_model=ApprovalRequestResponse)
async def get_approval_request(
    request_id: str,
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
    _: Annotated[UserResult, Depends(_admin_only)],
):
    found = await onboarding.get_admin_request(request_id)
    return ApprovalRequestResponse.model_validate(found)


@router.post(
    "/approval-requests/{request_id}/approve", response_model=ApprovalRequestResponse
)
@limit_adjudication
async def approve_request(
    request: Request,
    request_id: str,
    current_user: Annotated[UserResult, Depends(_admin_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Approve a pending request; the requester moves to APPROVED_BY_ADMIN."""
    result = await onboarding.approve(request_id, current_user.id)
    return ApprovalRequestResponse.model_validate(result)


@router.post(
    "/approval-requests/{request_id}/reject", response_model=ApprovalRequestResponse
)
@limit_adjudication
async def reject_request(
    request: Request,
    request_id: str,
    body: RejectRequest,
    current_user: Annotated[UserResult, Depends(_admin_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Reject a pending request with a non-empty reason."""
    result = await onboarding.reject(request_id, current_user.id, body.rejection_reason)
    return ApprovalRequestResponse.model_validate(result)
