"""Application DTOs (no ORM dependency)."""

from medonboard.application.dtos.approval_request import (
    ApprovalEntity,
    ApprovalRequestResult,
    ClinicEntity,
    DoctorEntity,
)
from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.doctor import DoctorResult
from medonboard.application.dtos.onboarding import OnboardingResult
from medonboard.application.dtos.permission import PermissionResult, SeedResult
from medonboard.application.dtos.role import RoleResult
from medonboard.application.dtos.user import PrincipalResult, UserResult

__all__ = [
    "ApprovalEntity",
    "ApprovalRequestResult",
    "ClinicEntity",
    "ClinicResult",
    "DoctorEntity",
    "DoctorResult",
    "OnboardingResult",
    "PermissionResult",
    "PrincipalResult",
    "RoleResult",
    "SeedResult",
    "UserResult",
]
