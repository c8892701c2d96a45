"""Patients API: the caller's patient profile."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medonboard.api.v1.dependencies import (
    get_patient_service,
    get_patient_service_for_read,
    require_role,
)
from medonboard.application.dtos.user import UserResult
from medonboard.application.services.patient_service import PatientService
from medonboard.core.limiter import limit_writes
from medonboard.domain.enums import SystemRole
from medonboard.schemas.patient import (
    PatientOnboardingResponse,
    PatientProfileUpdate,
    PatientResponse,
)

router = APIRouter()

_patient_only = require_role(SystemRole.PATIENT)


@router.get("/me", response_model=PatientResponse)
async def get_my_patient_profile(
    current_user: Annotated[UserResult, Depends(_patient_only)],
    patients: Annotated[PatientService, Depends(get_patient_service_for_read)],
):
    patient = await patients.get_profile(current_user.id)
    return PatientResponse.model_validate(patient)


@router.put("/me/profile", response_model=PatientOnboardingResponse)
@limit_writes
async def complete_patient_profile(
    request: Request,
    body: PatientProfileUpdate,
    current_user: Annotated[UserResult, Depends(_patient_only)],
    patients: Annotated[PatientService, Depends(get_patient_service)],
):
    """Save the patient profile; the caller moves to PATIENT_PROFILE_COMPLETED."""
    result = await patients.complete_profile(
        current_user.id, body.model_dump(exclude_unset=True)
    )
    return PatientOnboardingResponse.model_validate(result)
