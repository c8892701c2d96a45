"""Responses for profile submissions (persisted profile plus routing outcome)."""

from pydantic import BaseModel, ConfigDict

from medonboard.domain.enums import NotificationTarget
from medonboard.schemas.approval_request import ApprovalRequestResponse
from medonboard.schemas.clinic import ClinicResponse
from medonboard.schemas.doctor import DoctorResponse


class DoctorOnboardingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile: DoctorResponse
    onboarding_stage: str | None
    notification_target: NotificationTarget
    request: ApprovalRequestResponse | None = None


class ClinicOnboardingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile: ClinicResponse
    onboarding_stage: str | None
    notification_target: NotificationTarget
    request: ApprovalRequestResponse | None = None
