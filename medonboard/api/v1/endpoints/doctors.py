"""Doctors API: the caller's profile, submissions, request history and the directory."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from medonboard.api.v1.dependencies import (
    get_current_user,
    get_onboarding_service,
    get_onboarding_service_for_read,
    get_user_service_for_read,
    require_role,
)
from medonboard.application.dtos.user import UserResult
from medonboard.application.services.onboarding_service import OnboardingService
from medonboard.application.services.user_service import UserService
from medonboard.core.limiter import limit_writes
from medonboard.domain.enums import NotificationFallback, SystemRole
from medonboard.schemas.approval_request import ApprovalRequestResponse
from medonboard.schemas.doctor import (
    DoctorDocumentsUpdate,
    DoctorProfileUpdate,
    DoctorResponse,
)
from medonboard.schemas.onboarding import DoctorOnboardingResponse

router = APIRouter()

_doctor_only = require_role(SystemRole.DOCTOR)


@router.get("/approved", response_model=list[DoctorResponse])
async def list_approved_doctors(
    user_svc: Annotated[UserService, Depends(get_user_service_for_read)],
    _: Annotated[UserResult, Depends(get_current_user)],
):
    """Doctors approved by an admin or by their clinic."""
    doctors = await user_svc.list_approved_doctors()
    return [DoctorResponse.model_validate(d) for d in doctors]


@router.get("/me", response_model=DoctorResponse)
async def get_my_doctor_profile(
    current_user: Annotated[UserResult, Depends(_doctor_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    doctor = await onboarding.doctor_for_user(current_user.id)
    return DoctorResponse.model_validate(doctor)


@router.put("/me/profile", response_model=DoctorOnboardingResponse)
@limit_writes
async def submit_doctor_profile(
    request: Request,
    body: DoctorProfileUpdate,
    current_user: Annotated[UserResult, Depends(_doctor_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
    fallback: NotificationFallback | None = Query(None),
):
    """Save the profile and open (or refresh) an approval request.

    Independent doctors go to the admin queue; clinic-linked doctors notify
    their clinic, or the fallback recipient when the clinic has no contact.
    """
    result = await onboarding.update_doctor_profile(
        current_user.id,
        body.model_dump(exclude_unset=True, mode="json"),
        fallback=fallback,
    )
    return DoctorOnboardingResponse.model_validate(result)


@router.put("/me/documents", response_model=DoctorOnboardingResponse)
@limit_writes
async def submit_doctor_documents(
    request: Request,
    body: DoctorDocumentsUpdate,
    current_user: Annotated[UserResult, Depends(_doctor_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
    fallback: NotificationFallback | None = Query(None),
):
    result = await onboarding.submit_doctor_documents(
        current_user.id, body.documents, fallback=fallback
    )
    return DoctorOnboardingResponse.model_validate(result)


@router.patch("/me", response_model=DoctorOnboardingResponse)
@limit_writes
async def update_doctor_simple(
    request: Request,
    body: DoctorProfileUpdate,
    current_user: Annotated[UserResult, Depends(_doctor_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Edit profile fields without submitting for approval."""
    result = await onboarding.update_doctor_simple(
        current_user.id, body.model_dump(exclude_unset=True, mode="json")
    )
    return DoctorOnboardingResponse.model_validate(result)


@router.get("/me/requests", response_model=list[ApprovalRequestResponse])
async def list_my_doctor_requests(
    current_user: Annotated[UserResult, Depends(_doctor_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
    status: str | None = Query(None, description="PENDING, APPROVED or REJECTED"),
):
    """Every approval request the caller submitted, in either queue, newest first."""
    requests = await onboarding.list_my_requests(current_user.id, status)
    return [ApprovalRequestResponse.model_validate(r) for r in requests]
