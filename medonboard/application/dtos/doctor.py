"""DTOs for doctor profiles (no dependency on ORM)."""

from dataclasses import dataclass, field
from typing import Any

from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.user import UserResult


@dataclass(frozen=True)
class DoctorResult:
    """Doctor read-model. clinic_id set means approvals route to that clinic."""

    id: str
    user_id: str
    clinic_id: str | None
    license_number: str | None
    specialization: str | None
    qualification: str | None
    experience_years: int | None
    documents: dict[str, Any] = field(default_factory=dict)
    professional_info: dict[str, Any] = field(default_factory=dict)
    user: UserResult | None = None
    clinic: ClinicResult | None = None

    @property
    def has_clinic(self) -> bool:
        return self.clinic_id is not None
