"""Clinics API: the caller's clinic profile, its doctors and its approval queue."""

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
from medonboard.core.limiter import limit_adjudication, limit_writes
from medonboard.domain.enums import SystemRole
from medonboard.schemas.approval_request import (
    ApprovalRequestResponse,
    ClinicApproveRequest,
    RejectRequest,
)
from medonboard.schemas.clinic import (
    ClinicDoctorCreate,
    ClinicDocumentsUpdate,
    ClinicProfileUpdate,
    ClinicResponse,
)
from medonboard.schemas.doctor import DoctorResponse
from medonboard.schemas.onboarding import ClinicOnboardingResponse

router = APIRouter()

_clinic_only = require_role(SystemRole.CLINIC)


@router.get("/approved", response_model=list[ClinicResponse])
async def list_approved_clinics(
    user_svc: Annotated[UserService, Depends(get_user_service_for_read)],
    _: Annotated[UserResult, Depends(get_current_user)],
):
    clinics = await user_svc.list_approved_clinics()
    return [ClinicResponse.model_validate(c) for c in clinics]


@router.get("/me", response_model=ClinicResponse)
async def get_my_clinic(
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    clinic = await onboarding.clinic_for_user(current_user.id)
    return ClinicResponse.model_validate(clinic)


@router.put("/me/profile", response_model=ClinicOnboardingResponse)
@limit_writes
async def submit_clinic_profile(
    request: Request,
    body: ClinicProfileUpdate,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Save the clinic profile and open (or refresh) an admin approval request."""
    result = await onboarding.update_clinic_profile(
        current_user.id, body.model_dump(exclude_unset=True, mode="json")
    )
    return ClinicOnboardingResponse.model_validate(result)


@router.put("/me/documents", response_model=ClinicOnboardingResponse)
@limit_writes
async def update_clinic_documents(
    request: Request,
    body: ClinicDocumentsUpdate,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Replace the clinic's documents and notify admins."""
    result = await onboarding.notify_clinic_documents_update(
        current_user.id, body.documents
    )
    return ClinicOnboardingResponse.model_validate(result)


@router.patch("/me", response_model=ClinicOnboardingResponse)
@limit_writes
async def update_clinic_simple(
    request: Request,
    body: ClinicProfileUpdate,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    result = await onboarding.update_clinic_simple(
        current_user.id, body.model_dump(exclude_unset=True, mode="json")
    )
    return ClinicOnboardingResponse.model_validate(result)


@router.post("/me/doctors", response_model=DoctorResponse, status_code=201)
@limit_writes
async def create_clinic_doctor(
    request: Request,
    body: ClinicDoctorCreate,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    """Create a doctor account linked to the caller's clinic and email an invitation."""
    fields = body.model_dump(exclude_unset=True, exclude={"email", "name"})
    doctor = await onboarding.create_doctor_for_clinic(
        current_user.id, str(body.email), body.name, fields
    )
    return DoctorResponse.model_validate(doctor)


@router.get("/me/requests", response_model=list[ApprovalRequestResponse])
async def list_clinic_requests(
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
    status: str | None = Query(None, description="PENDING, APPROVED or REJECTED"),
):
    """Doctor requests routed to the caller's clinic, newest first."""
    requests = await onboarding.list_clinic_requests(current_user.id, status)
    return [ApprovalRequestResponse.model_validate(r) for r in requests]


@router.get("/me/requests/{request_id}", response_model=ApprovalRequestResponse)
async def get_clinic_request(
    request_id: str,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    found = await onboarding.get_clinic_request(request_id, current_user.id)
    return ApprovalRequestResponse.model_validate(found)


@router.post("/me/requests/{request_id}/approve", response_model=ApprovalRequestResponse)
@limit_adjudication
async def approve_clinic_request(
    request: Request,
    request_id: str,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
    body: ClinicApproveRequest | None = None,
):
    """Approve a pending doctor request in the caller's clinic queue."""
    renewal_date = body.renewal_date if body else None
    result = await onboarding.approve_by_clinic(
        request_id, current_user.id, renewal_date=renewal_date
    )
    return ApprovalRequestResponse.model_validate(result)


@router.post("/me/requests/{request_id}/reject", response_model=ApprovalRequestResponse)
@limit_adjudication
async def reject_clinic_request(
    request: Request,
    request_id: str,
    body: RejectRequest,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service)],
):
    result = await onboarding.reject_by_clinic(
        request_id, current_user.id, body.rejection_reason
    )
    return ApprovalRequestResponse.model_validate(result)


@router.get("/me/doctors", response_model=list[DoctorResponse])
async def list_clinic_doctors(
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    """Approved doctors linked to the caller's clinic."""
    doctors = await onboarding.list_clinic_doctors(current_user.id)
    return [DoctorResponse.model_validate(d) for d in doctors]


@router.get("/me/doctors/{doctor_id}", response_model=DoctorResponse)
async def get_clinic_doctor(
    doctor_id: str,
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
):
    doctor = await onboarding.get_clinic_doctor(current_user.id, doctor_id)
    return DoctorResponse.model_validate(doctor)


@router.get("/me/submissions", response_model=list[ApprovalRequestResponse])
async def list_my_clinic_submissions(
    current_user: Annotated[UserResult, Depends(_clinic_only)],
    onboarding: Annotated[OnboardingService, Depends(get_onboarding_service_for_read)],
    status: str | None = Query(None, description="PENDING, APPROVED or REJECTED"),
):
    """The clinic's own registration requests to admins, newest first."""
    requests = await onboarding.list_my_requests(current_user.id, status)
    return [ApprovalRequestResponse.model_validate(r) for r in requests]
