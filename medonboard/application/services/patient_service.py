"""Patient application service: profile completion."""

from __future__ import annotations

from typing import Any

from medonboard.application.dtos.patient import PatientProfileResult, PatientResult
from medonboard.application.interfaces.repositories import (
    IPatientRepository,
    IUserRepository,
)
from medonboard.domain.enums import OnboardingEvent
from medonboard.domain.exceptions import ResourceNotFoundException
from medonboard.domain.onboarding import next_stage
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced

logger = get_logger(__name__)


def normalise_phone(phone_code: str | None, phone_number: str | None) -> str | None:
    """Join code and number with one space; None when both are blank."""
    parts = [p.strip() for p in (phone_code, phone_number) if p and p.strip()]
    return " ".join(parts) or None


class PatientService:
    def __init__(self, user_repo: IUserRepository, patient_repo: IPatientRepository) -> None:
        self.user_repo = user_repo
        self.patient_repo = patient_repo

    async def get_profile(self, user_id: str) -> PatientResult:
        patient = await self.patient_repo.get_by_user_id(user_id)
        if patient is None:
            raise ResourceNotFoundException("patient", user_id)
        return patient

    @traced("patients.complete_profile")
    async def complete_profile(
        self, user_id: str, data: dict[str, Any]
    ) -> PatientProfileResult:
        """Create or update the caller's patient row and mark onboarding complete.

        Only keys present in data are written. phone_code and phone_number
        are stored together as "<code> <number>".
        """
        user = await self.user_repo.get_user(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        stage = next_stage(user.onboarding_stage, OnboardingEvent.PATIENT_PROFILE_SUBMITTED)

        fields = dict(data)
        if "phone_code" in fields or "phone_number" in fields:
            fields["phone_number"] = normalise_phone(
                fields.pop("phone_code", None), fields.get("phone_number")
            )
        patient = await self.patient_repo.upsert_for_user(user_id, fields)
        await self.user_repo.set_onboarding_stage(user_id, stage.value)
        logger.info("Patient profile completed for user %s", user_id)
        return PatientProfileResult(profile=patient, onboarding_stage=stage.value)
