"""DTOs returned by onboarding state-machine operations."""

from dataclasses import dataclass

from medonboard.application.dtos.approval_request import ApprovalRequestResult
from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.doctor import DoctorResult
from medonboard.domain.enums import NotificationTarget


@dataclass(frozen=True)
class OnboardingResult:
    """Outcome of a profile mutation: persisted profile plus routing decision.

    request is None and onboarding_stage is the unchanged stage for
    simple updates and notify-only paths.
    """

    profile: DoctorResult | ClinicResult
    onboarding_stage: str | None
    notification_target: NotificationTarget
    request: ApprovalRequestResult | None = None
